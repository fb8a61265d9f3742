"""JSON adapter for raw time entries and persisted overrides."""

from __future__ import annotations

import json
from pathlib import Path

from overtime_engine.overrides import overrides_from_mapping, overrides_to_mapping
from overtime_engine.schema import UserOverride


def _check_item(item, index: int) -> dict:
    if not isinstance(item, dict):
        raise ValueError(f"Item {index}: expected an object, got {type(item).__name__}")
    interval = item.get("timeInterval")
    if interval is not None and not isinstance(interval, dict):
        raise ValueError(f"Item {index}: timeInterval must be an object")
    return item


def parse(file_path: str) -> list[dict]:
    """Parse a JSON file holding a list of raw time entries."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of time entry objects")

    return [_check_item(item, i) for i, item in enumerate(payload, start=1)]


def load_overrides(file_path: str) -> dict[str, UserOverride]:
    """Load a persisted override map; a missing file means no overrides."""

    path = Path(file_path)
    if not path.exists():
        return {}

    with path.open(encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, dict):
        raise ValueError("Overrides file must contain an object keyed by user id")
    return overrides_from_mapping(payload)


def save_overrides(file_path: str, overrides: dict[str, UserOverride]) -> None:
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(overrides_to_mapping(overrides), indent=2, sort_keys=True), encoding="utf-8")
