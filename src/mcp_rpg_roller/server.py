from __future__ import annotations

import logging
import random
import secrets
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .config import load_settings
from .dice import DiceError, roll_from_text
from .die import RandomSource
from .errors import NameGeneratorError
from .names import NameGenerator


settings = load_settings()

mcp = FastMCP(settings.server_name)

_rng: RandomSource = random.Random(settings.seed) if settings.seed is not None else secrets.SystemRandom()


@mcp.tool()
def roll_dice(text: str):
    """Roll a dice expression such as '4d6h3', '(2d6 + 4)d6 + 5' or '2d(1d6 + 2) / 2'.

    Input: text (string)
    Output: structured JSON with the parsed tree, every roll and the total

    Raises a hard error (exception) on invalid input.
    """

    try:
        return roll_from_text(text, rng=_rng, max_dice=settings.max_dice)
    except DiceError as e:
        # Fail-fast: surface stable error codes in the message.
        raise ValueError(str(e)) from None


@mcp.tool()
def make_name(race: Optional[str] = None, gender: Optional[str] = None):
    """Generate a fantasy name for a race (human, dwarf, elf) and gender (male, female)."""

    try:
        generator = NameGenerator(
            race=race or settings.name_race,
            gender=gender or settings.name_gender,
            rng=_rng,
        )
    except NameGeneratorError as e:
        raise ValueError(str(e)) from None

    return {"race": generator.race, "gender": generator.gender, "name": generator.make_name()}


def run() -> None:
    logging.basicConfig(level=settings.log_level, format="%(levelname)s:%(name)s:%(message)s")
    # Default transport is stdio, which works well for MCP client integration.
    mcp.run()


if __name__ == "__main__":
    run()
