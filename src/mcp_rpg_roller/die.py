from __future__ import annotations

import secrets
from typing import Protocol

from .errors import DieError
from .models import DEFAULT_SIDES


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


def default_rng() -> RandomSource:
    return secrets.SystemRandom()


class Die:
    """A single die with a fixed number of sides.

    The random source is injected so callers can pass a seeded
    ``random.Random`` for reproducible rolls.
    """

    __slots__ = ("_sides", "_rng")

    def __init__(self, sides: int = DEFAULT_SIDES, rng: RandomSource | None = None) -> None:
        if isinstance(sides, bool) or not isinstance(sides, int):
            raise DieError(f"[INVALID_DIE] Die sides must be an integer, got {sides!r}.")
        if sides < 1:
            raise DieError(f"[INVALID_DIE] Die sides must be at least 1, got {sides}.")
        self._sides = sides
        self._rng = rng if rng is not None else default_rng()

    @property
    def sides(self) -> int:
        return self._sides

    def roll(self) -> int:
        return self._rng.randint(1, self._sides)

    def __repr__(self) -> str:
        return f"Die(sides={self._sides})"
