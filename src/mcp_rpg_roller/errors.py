from __future__ import annotations


class DiceError(ValueError):
    """User-facing validation errors (fail-fast, no roll performed)."""


class ExpressionError(DiceError):
    """The expression text does not follow the dice grammar."""


class DieError(DiceError):
    """A die was asked for with a side count it cannot have."""


class NameGeneratorError(ValueError):
    """Unknown race or gender requested from the name generator."""
