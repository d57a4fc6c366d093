"""Human-readable diffs between two cut sheet states."""

from __future__ import annotations

import json
from typing import Any

from src.engine.models import CamelModel

_FIELD_LABELS: dict[str, str] = {
    "thickness": "Thickness",
    "pieces_per_package": "Pieces per Package",
    "processor_notes": "Processor Notes",
    "processor_modifications": "Cut Modifications",
    "removed_cuts": "Removed Cuts",
    "added_cuts": "Added Cuts",
    "hanging_weight_lbs": "Hanging Weight",
    "final_weight_lbs": "Final Weight",
    "actual_weight_lbs": "Package Weight",
    "produced_packages": "Produced Packages",
    "selections": "Cuts",
    "allocations": "Split Allocation",
}


class ChangeDiff(CamelModel):
    field: str
    label: str
    before: str | None = None
    after: str | None = None


def format_field_label(field: str) -> str:
    if field in _FIELD_LABELS:
        return _FIELD_LABELS[field]
    return " ".join(word[:1].upper() + word[1:] for word in field.split("_"))


def format_value(value: Any) -> str | None:
    """Render a JSON-like value for display."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, str):
        return value
    if isinstance(value, int | float):
        return f"{value:g}" if isinstance(value, float) else str(value)
    if isinstance(value, list):
        if not value:
            return "None"
        if isinstance(value[0], dict):
            return ", ".join(
                str(item.get("cut_name") or item.get("name") or json.dumps(item, sort_keys=True))
                for item in value
            )
        return ", ".join(format_value(item) or "" for item in value)
    if isinstance(value, dict):
        parts = [
            f"{format_field_label(k)}: {format_value(v)}"
            for k, v in value.items()
            if v is not None
        ]
        return ", ".join(parts) or "Empty"
    return json.dumps(value)


def generate_change_diff(
    previous: dict[str, Any] | None,
    new: dict[str, Any] | None,
) -> list[ChangeDiff]:
    """Field-level differences between two flat state dicts, in key order."""
    prev = previous or {}
    nxt = new or {}
    diffs: list[ChangeDiff] = []
    for key in dict.fromkeys([*prev, *nxt]):
        before, after = prev.get(key), nxt.get(key)
        if json.dumps(before, sort_keys=True, default=str) == json.dumps(
            after, sort_keys=True, default=str,
        ):
            continue
        diffs.append(ChangeDiff(
            field=key,
            label=format_field_label(key),
            before=format_value(before),
            after=format_value(after),
        ))
    return diffs
