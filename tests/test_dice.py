import random

import pytest

from mcp_rpg_roller.dice import roll_from_text
from mcp_rpg_roller.errors import DiceError


class ScriptedRng:
    def __init__(self, values):
        self.values = list(values)

    def randint(self, a, b):
        return self.values.pop(0)


def test_roll_report_shape():
    report = roll_from_text("4d6h3 + 2", rng=ScriptedRng([5, 2, 6, 1]))

    assert report["input"] == "4d6h3 + 2"
    assert report["total"] == 15
    assert report["tree"].startswith("head->(+)\n")
    assert report["timestamp"].endswith("Z")
    assert len(report["request_id"]) == 32
    assert report["rolls"] == [
        {
            "notation": "4d6h3",
            "count": 4,
            "sides": 6,
            "rolls": [5, 2, 6, 1],
            "subtotal": 13,
            "keep": {"mode": "highest", "n": 3},
            "kept": [6, 5, 2],
        }
    ]
    assert report["explanation"] == "4d6h3: rolls [5, 2, 6, 1] -> keep [6, 5, 2] => 13; total => 15"


def test_roll_report_without_keep():
    report = roll_from_text("2d10 + 2d4 + 4", rng=ScriptedRng([7, 3, 2, 4]))
    assert report["total"] == 20
    assert report["explanation"] == "2d10: rolls [7, 3] => 10; 2d4: rolls [2, 4] => 6; total => 20"
    assert "keep" not in report["rolls"][0]


def test_roll_report_for_constant():
    report = roll_from_text("42", rng=random.Random(0))
    assert report["total"] == 42
    assert report["rolls"] == []
    assert report["explanation"] == "total => 42"
    assert report["rng"]["source"] == "random.Random"


@pytest.mark.parametrize(
    ("text", "prefix"),
    [
        ("", "[EMPTY_INPUT]"),
        ("dhgdshd", "[UNPARSEABLE_INPUT]"),
        ("3d", "[MALFORMED_DICE]"),
        ("(1d6", "[UNBALANCED_PARENTHESES]"),
    ],
)
def test_roll_rejections(text, prefix):
    with pytest.raises(DiceError) as exc:
        roll_from_text(text)
    assert str(exc.value).startswith(prefix)
