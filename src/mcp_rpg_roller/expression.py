from __future__ import annotations

import logging
import operator
from typing import Callable

from .die import Die, RandomSource, default_rng
from .errors import ExpressionError
from .models import (
    DEFAULT_MAX_DICE,
    BinaryOp,
    ConstantTerm,
    DiceTerm,
    InvalidTree,
    Node,
    RollRecord,
    TreeState,
    UnsetTree,
    ValidTree,
)
from .parser import parse_tree, render_tree


logger = logging.getLogger(__name__)

NOT_SET_TEXT = "expression not yet set"
INVALID_TEXT = "invalid expression"


def trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def trunc_mod(a: int, b: int) -> int:
    """Remainder matching trunc_div; takes the sign of the dividend."""
    return a - b * trunc_div(a, b)


_ARITHMETIC: dict[str, Callable[[int, int], int]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": trunc_div,
    "%": trunc_mod,
}


class ExpressionTree:
    """Parsed dice expression that can be evaluated repeatedly.

    ``set_expression`` parses once; every ``parse_expression`` call walks
    the same tree and rolls every dice term again. Invalid or empty
    expressions never raise here: they evaluate to 0 and show up in
    ``to_string``.
    """

    def __init__(
        self,
        expression: str = "",
        rng: RandomSource | None = None,
        max_dice: int = DEFAULT_MAX_DICE,
    ) -> None:
        self._rng = rng if rng is not None else default_rng()
        self._max_dice = max_dice
        self._state: TreeState = UnsetTree()
        self._rolls: list[RollRecord] = []
        self.set_expression(expression)

    @property
    def expression(self) -> str:
        return self._state.expression

    @property
    def state(self) -> TreeState:
        return self._state

    @property
    def is_valid(self) -> bool:
        return isinstance(self._state, ValidTree)

    @property
    def rolls(self) -> tuple[RollRecord, ...]:
        """Dice rolled by the most recent ``parse_expression`` call."""
        return tuple(self._rolls)

    def set_expression(self, text: str) -> None:
        self._rolls = []

        if not text:
            self._state = UnsetTree()
            return

        try:
            root = parse_tree(text, max_dice=self._max_dice)
        except ExpressionError as e:
            logger.debug("invalid expression %r: %s", text, e)
            self._state = InvalidTree(expression=text, reason=str(e))
            return

        self._state = ValidTree(expression=text, root=root)

    def parse_expression(self) -> int:
        self._rolls = []
        if not isinstance(self._state, ValidTree):
            return 0
        return self._evaluate(self._state.root)

    def to_string(self) -> str:
        if isinstance(self._state, UnsetTree):
            return NOT_SET_TEXT
        if isinstance(self._state, InvalidTree):
            return INVALID_TEXT
        return render_tree(self._state.root)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"ExpressionTree({self.expression!r})"

    def _evaluate(self, root: Node) -> int:
        """Post-order walk with an explicit stack; operands land on ``values``."""

        values: list[int] = []
        stack: list[tuple[Node, bool]] = [(root, False)]
        while stack:
            node, children_done = stack.pop()

            if isinstance(node, ConstantTerm):
                values.append(node.value)
            elif isinstance(node, BinaryOp):
                if children_done:
                    right = values.pop()
                    left = values.pop()
                    values.append(self._apply(node, left, right))
                else:
                    stack.append((node, True))
                    stack.append((node.right, False))
                    stack.append((node.left, False))
            elif isinstance(node, DiceTerm):
                if children_done:
                    sides = values.pop()
                    count = values.pop()
                    values.append(self._roll_term(node, count, sides))
                else:
                    stack.append((node, True))
                    stack.append((node.sides, False))
                    stack.append((node.count, False))
            else:
                raise TypeError(f"unknown node type: {type(node).__name__}")

        return values.pop()

    def _apply(self, node: BinaryOp, left: int, right: int) -> int:
        if node.op in ("/", "%") and right == 0:
            logger.warning("%s by zero in %r; node evaluates to 0", node.op, self.expression)
            return 0
        return _ARITHMETIC[node.op](left, right)

    def _roll_term(self, node: DiceTerm, count: int, sides: int) -> int:
        # No dice to roll: the term stands for its sides value.
        if count <= 0:
            return sides

        if sides < 1:
            logger.warning("cannot roll %dd%d in %r; term evaluates to 0", count, sides, self.expression)
            return 0

        if count > self._max_dice:
            logger.warning("%d dice requested in %r; rolling %d", count, self.expression, self._max_dice)
            count = self._max_dice

        die = Die(sides, rng=self._rng)
        rolls = [die.roll() for _ in range(count)]

        if node.keep is None:
            kept = rolls
        else:
            ordered = sorted(rolls, reverse=node.keep.mode == "highest")
            kept = ordered[: min(node.keep.n, count)]

        self._rolls.append(
            RollRecord(count=count, sides=sides, keep=node.keep, rolls=tuple(rolls), kept=tuple(kept))
        )
        return sum(kept)
