from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias


DEFAULT_SIDES = 20
DEFAULT_MAX_DICE = 10_000

Operator: TypeAlias = Literal["+", "-", "*", "/", "%"]
KeepMode: TypeAlias = Literal["highest", "lowest"]


@dataclass(frozen=True)
class Keep:
    mode: KeepMode
    n: int


@dataclass(frozen=True)
class ConstantTerm:
    value: int


@dataclass(frozen=True)
class DiceTerm:
    count: Node
    sides: Node
    keep: Keep | None = None


@dataclass(frozen=True)
class BinaryOp:
    op: Operator
    left: Node
    right: Node


Node: TypeAlias = ConstantTerm | DiceTerm | BinaryOp


@dataclass(frozen=True)
class UnsetTree:
    expression: str = ""


@dataclass(frozen=True)
class InvalidTree:
    expression: str
    reason: str


@dataclass(frozen=True)
class ValidTree:
    expression: str
    root: Node


TreeState: TypeAlias = UnsetTree | InvalidTree | ValidTree


@dataclass(frozen=True)
class RollRecord:
    """Dice rolled for one dice term during a single evaluation."""

    count: int
    sides: int
    keep: Keep | None
    rolls: tuple[int, ...]
    kept: tuple[int, ...]

    @property
    def subtotal(self) -> int:
        return sum(self.kept)

    @property
    def notation(self) -> str:
        suffix = ""
        if self.keep is not None:
            suffix = f"{'h' if self.keep.mode == 'highest' else 'l'}{self.keep.n}"
        return f"{self.count}d{self.sides}{suffix}"
