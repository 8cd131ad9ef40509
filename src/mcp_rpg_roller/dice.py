from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from .die import RandomSource, default_rng
from .errors import DiceError
from .expression import ExpressionTree
from .models import DEFAULT_MAX_DICE, InvalidTree, RollRecord, UnsetTree


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _roll_to_dict(record: RollRecord) -> dict[str, Any]:
    out: dict[str, Any] = {
        "notation": record.notation,
        "count": record.count,
        "sides": record.sides,
        "rolls": list(record.rolls),
        "subtotal": record.subtotal,
    }
    if record.keep is not None:
        out["keep"] = {"mode": record.keep.mode, "n": record.keep.n}
        out["kept"] = list(record.kept)
    return out


def _explain(records: tuple[RollRecord, ...], total: int) -> str:
    parts: list[str] = []
    for r in records:
        if r.keep is None:
            parts.append(f"{r.notation}: rolls {list(r.rolls)} => {r.subtotal}")
        else:
            parts.append(f"{r.notation}: rolls {list(r.rolls)} -> keep {list(r.kept)} => {r.subtotal}")
    parts.append(f"total => {total}")
    return "; ".join(parts)


def roll_from_text(
    text: str,
    rng: RandomSource | None = None,
    max_dice: int = DEFAULT_MAX_DICE,
) -> dict[str, Any]:
    """Parse, validate, then roll. Raises DiceError for invalid input."""

    source = rng if rng is not None else default_rng()
    tree = ExpressionTree(text, rng=source, max_dice=max_dice)

    state = tree.state
    if isinstance(state, UnsetTree):
        raise DiceError("[EMPTY_INPUT] Empty input. Example: '2d6 + 3' or '4d6h3'.")
    if isinstance(state, InvalidTree):
        raise DiceError(state.reason)

    total = tree.parse_expression()
    records = tree.rolls

    return {
        "request_id": uuid.uuid4().hex,
        "timestamp": _now_utc_iso(),
        "input": text,
        "tree": tree.to_string(),
        "rng": {
            "source": f"{type(source).__module__}.{type(source).__name__}",
            "nonce": str(uuid.uuid4()),
        },
        "rolls": [_roll_to_dict(r) for r in records],
        "total": total,
        "explanation": _explain(records, total),
    }
