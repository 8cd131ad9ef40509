from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Literal

from .errors import ExpressionError
from .models import DEFAULT_MAX_DICE, DEFAULT_SIDES, BinaryOp, ConstantTerm, DiceTerm, Keep, Node, Operator


logger = logging.getLogger(__name__)

TokenKind = Literal["int", "sym"]

_TOKEN_RE = re.compile(r"(?P<int>\d+)|(?P<sym>[-+*/%()dhl])", re.ASCII)
_SPACE_RE = re.compile(r"\s+")

_ADDITIVE: frozenset[str] = frozenset({"+", "-"})
_MULTIPLICATIVE: frozenset[str] = frozenset({"*", "/", "%"})


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    pos: int


def tokenize(text: str) -> list[Token]:
    tokens: list[Token] = []
    pos = 0
    lowered = text.lower()

    while pos < len(lowered):
        space = _SPACE_RE.match(lowered, pos)
        if space:
            pos = space.end()
            continue

        m = _TOKEN_RE.match(lowered, pos)
        if not m:
            raise ExpressionError(
                f"[UNPARSEABLE_INPUT] Could not understand '{text[pos]}' at position {pos}. Example: '2d6 + 3' or '4d6h3'."
            )

        kind: TokenKind = "int" if m.lastgroup == "int" else "sym"
        tokens.append(Token(kind=kind, text=m.group(), pos=pos))
        pos = m.end()

    return tokens


class _Parser:
    """Recursive-descent parser over the token list.

    expr  := term (('+' | '-') term)*
    term  := dice (('*' | '/' | '%') dice)*
    dice  := atom | [atom] 'd' [atom] [('h' | 'l') INT]
    atom  := ['+' | '-'] INT | '(' expr ')'

    A sign only belongs to a literal when it touches the digits.
    """

    def __init__(self, tokens: list[Token], max_dice: int = DEFAULT_MAX_DICE) -> None:
        self._tokens = tokens
        self._index = 0
        self._max_dice = max_dice

    def _peek(self, offset: int = 0) -> Token | None:
        i = self._index + offset
        return self._tokens[i] if i < len(self._tokens) else None

    def _at(self, *symbols: str) -> bool:
        tok = self._peek()
        return tok is not None and tok.kind == "sym" and tok.text in symbols

    def _advance(self) -> Token:
        tok = self._tokens[self._index]
        self._index += 1
        return tok

    def _at_signed_int(self) -> bool:
        # The sign must touch its digits; "d - 1" is a subtraction.
        tok = self._peek()
        nxt = self._peek(1)
        return (
            tok is not None
            and tok.kind == "sym"
            and tok.text in _ADDITIVE
            and nxt is not None
            and nxt.kind == "int"
            and nxt.pos == tok.pos + 1
        )

    def _at_atom(self) -> bool:
        tok = self._peek()
        if tok is None:
            return False
        if tok.kind == "int" or tok.text == "(":
            return True
        return self._at_signed_int()

    def parse(self) -> Node:
        if not self._tokens:
            raise ExpressionError("[UNPARSEABLE_INPUT] No dice or numbers found. Example: 'd20' or '2d6 + 3'.")

        root = self._expr()
        tok = self._peek()
        if tok is not None:
            if tok.text == ")":
                raise ExpressionError(
                    f"[UNBALANCED_PARENTHESES] Unexpected ')' at position {tok.pos}. Example: '(2d6 + 4)d6'."
                )
            raise ExpressionError(
                f"[UNPARSEABLE_INPUT] Unexpected '{tok.text}' at position {tok.pos}. Example: '2d6 + 3' or '4d6h3'."
            )
        return root

    def _expr(self) -> Node:
        node = self._term()
        while self._at(*_ADDITIVE):
            op: Operator = self._advance().text  # type: ignore[assignment]
            node = BinaryOp(op=op, left=node, right=self._term())
        return node

    def _term(self) -> Node:
        node = self._dice()
        while self._at(*_MULTIPLICATIVE):
            op: Operator = self._advance().text  # type: ignore[assignment]
            node = BinaryOp(op=op, left=node, right=self._dice())
        return node

    def _dice(self) -> Node:
        count: Node | None = None
        if not self._at("d"):
            count = self._atom()
            if not self._at("d"):
                return count
            if isinstance(count, ConstantTerm) and count.value > self._max_dice:
                raise ExpressionError(
                    f"[TOO_MANY_DICE] At most {self._max_dice} dice per term, got {count.value}. Example: '100d6'."
                )

        self._advance()  # 'd'

        if count is None and (not self._at_atom() or self._at_signed_int()):
            # A bare 'd' is a single d20; a sign after it is a binary operator.
            sides: Node = ConstantTerm(DEFAULT_SIDES)
        elif self._at_atom():
            sides = self._atom()
        else:
            raise ExpressionError(
                f"[MALFORMED_DICE] Missing die sides after 'd'{self._where()}. Example: '2d6'."
            )

        keep: Keep | None = None
        if self._at("h", "l"):
            mode = "highest" if self._advance().text == "h" else "lowest"
            tok = self._peek()
            if tok is None or tok.kind != "int":
                raise ExpressionError(
                    f"[MALFORMED_DICE] Keep modifier needs a number{self._where()}. Example: '4d6h3' or '2d20l1'."
                )
            keep = Keep(mode=mode, n=int(self._advance().text))

        return DiceTerm(count=count if count is not None else ConstantTerm(1), sides=sides, keep=keep)

    def _atom(self) -> Node:
        tok = self._peek()
        if tok is None:
            raise ExpressionError("[UNPARSEABLE_INPUT] Expression ends early. Example: '2d6 + 3'.")

        if tok.kind == "int":
            self._advance()
            return ConstantTerm(int(tok.text))

        if self._at_signed_int():
            self._advance()
            value = int(self._advance().text)
            return ConstantTerm(-value if tok.text == "-" else value)

        if tok.text == "(":
            self._advance()
            node = self._expr()
            if not self._at(")"):
                raise ExpressionError(
                    f"[UNBALANCED_PARENTHESES] Missing ')' for '(' at position {tok.pos}. Example: '(2d6 + 4)d6'."
                )
            self._advance()
            return node

        raise ExpressionError(
            f"[UNPARSEABLE_INPUT] Expected a number or '(' but found '{tok.text}' at position {tok.pos}. Example: '2d6 + 3'."
        )

    def _where(self) -> str:
        tok = self._peek()
        return f" at position {tok.pos}" if tok is not None else " at end of input"


def parse_tree(text: str, max_dice: int = DEFAULT_MAX_DICE) -> Node:
    """Parse ``text`` into a node tree. Raises ExpressionError for invalid input.

    Literal dice counts above ``max_dice`` are rejected here; counts that
    come from sub-expressions are capped when the tree is evaluated.
    """

    tokens = tokenize(text)
    try:
        return _Parser(tokens, max_dice=max_dice).parse()
    except RecursionError:
        logger.debug("expression nested too deeply: %d tokens", len(tokens))
        raise ExpressionError(
            "[UNPARSEABLE_INPUT] Expression is nested too deeply. Example: '(2d6 + 4)d6'."
        ) from None


def _label(node: Node) -> str:
    if isinstance(node, ConstantTerm):
        return str(node.value)
    if isinstance(node, BinaryOp):
        return node.op
    if isinstance(node, DiceTerm):
        if node.keep is None:
            return "d"
        return f"d{'h' if node.keep.mode == 'highest' else 'l'}{node.keep.n}"
    raise TypeError(f"unknown node type: {type(node).__name__}")


def _children(node: Node) -> list[tuple[str, Node]]:
    if isinstance(node, ConstantTerm):
        return []
    if isinstance(node, BinaryOp):
        return [("left", node.left), ("right", node.right)]
    if isinstance(node, DiceTerm):
        return [("count", node.count), ("sides", node.sides)]
    raise TypeError(f"unknown node type: {type(node).__name__}")


def render_tree(root: Node) -> str:
    """One line per node, pre-order; each line is the path from ``head``."""

    lines: list[str] = []
    stack: list[tuple[str, Node]] = [("head", root)]
    while stack:
        path, node = stack.pop()
        lines.append(f"{path}->({_label(node)})\n")
        for edge, child in reversed(_children(node)):
            stack.append((f"{path}->{edge}", child))
    return "".join(lines)
