import pytest
from pydantic import ValidationError

from mcp_rpg_roller.config import Settings, load_settings


def test_defaults_without_environment():
    assert load_settings({}) == Settings()
    assert Settings().seed is None
    assert Settings().log_level == "WARNING"


def test_reads_prefixed_variables():
    s = load_settings(
        {
            "MCP_RPG_ROLLER_SEED": "42",
            "MCP_RPG_ROLLER_NAME_RACE": "elf",
            "MCP_RPG_ROLLER_LOG_LEVEL": "debug",
            "MCP_RPG_ROLLER_SERVER_NAME": " table-one ",
            "UNRELATED": "x",
        }
    )
    assert s.seed == 42
    assert s.name_race == "elf"
    assert s.log_level == "DEBUG"
    assert s.server_name == "table-one"


def test_blank_values_are_ignored():
    assert load_settings({"MCP_RPG_ROLLER_SEED": "  "}).seed is None


def test_reads_os_environ(monkeypatch):
    monkeypatch.setenv("MCP_RPG_ROLLER_NAME_GENDER", "male")
    assert load_settings().name_gender == "male"


@pytest.mark.parametrize(
    ("key", "value"),
    [("MCP_RPG_ROLLER_SEED", "lots"), ("MCP_RPG_ROLLER_NAME_RACE", "orc"), ("MCP_RPG_ROLLER_LOG_LEVEL", "loud")],
)
def test_invalid_values_raise(key, value):
    with pytest.raises(ValidationError):
        load_settings({key: value})


def test_max_dice_from_environment():
    assert Settings().max_dice == 10_000
    assert load_settings({"MCP_RPG_ROLLER_MAX_DICE": "50"}).max_dice == 50
    with pytest.raises(ValidationError):
        load_settings({"MCP_RPG_ROLLER_MAX_DICE": "0"})
