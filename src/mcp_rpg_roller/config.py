"""Runtime settings for the roller server, read from environment variables."""

from __future__ import annotations

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field

from .models import DEFAULT_MAX_DICE


ENV_PREFIX = "MCP_RPG_ROLLER_"


class Settings(BaseModel):
    server_name: str = Field("mcp-rpg-roller", description="Name announced by the MCP server")
    seed: Optional[int] = Field(None, description="Seed for reproducible rolls; unset uses secrets.SystemRandom")
    max_dice: int = Field(DEFAULT_MAX_DICE, ge=1, description="Most dice a single term may roll")
    name_race: Literal["human", "dwarf", "elf"] = Field("dwarf", description="Default race for make_name")
    name_gender: Optional[Literal["male", "female"]] = Field(None, description="Default gender for make_name")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "WARNING", description="Root log level set by the server"
    )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``MCP_RPG_ROLLER_*`` variables.

    Raises pydantic.ValidationError when a value does not fit its field.
    """
    env = os.environ if environ is None else environ
    values: dict[str, str] = {}
    for field in Settings.model_fields:
        raw = env.get(ENV_PREFIX + field.upper())
        if raw is None or raw.strip() == "":
            continue
        raw = raw.strip()
        values[field] = raw.upper() if field == "log_level" else raw
    return Settings(**values)
