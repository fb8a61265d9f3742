"""Per-user capacity and multiplier overrides."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional

from overtime_engine.config import coerce_number
from overtime_engine.schema import OvertimeConfig, UserOverride

logger = logging.getLogger(__name__)

OVERRIDE_FIELDS = ("capacity", "multiplier")
MIN_OVERRIDE_VALUE = 1.0
DEFAULT_MATCH_TOLERANCE = 0.01


class OverrideError(ValueError):
    """Raised when an override edit carries an unusable value."""


def effective_settings(
    user_id: str,
    config: OvertimeConfig,
    overrides: Optional[Mapping[str, UserOverride]] = None,
) -> tuple[float, float]:
    """Return the ``(capacity, multiplier)`` that apply to ``user_id``."""

    override = (overrides or {}).get(user_id) or UserOverride()
    capacity = override.capacity if override.capacity is not None else config.daily_threshold
    multiplier = override.multiplier if override.multiplier is not None else config.overtime_multiplier
    return capacity, multiplier


def default_value(field: str, config: OvertimeConfig) -> float:
    """Global value an override field falls back to."""

    return config.daily_threshold if field == "capacity" else config.overtime_multiplier


def set_override(
    overrides: Mapping[str, UserOverride],
    user_id: str,
    field: str,
    value: Any,
    config: OvertimeConfig,
) -> dict[str, UserOverride]:
    """Return a new override map with ``field`` set for ``user_id``.

    Setting a value equal to the global default clears that field, and a
    user left with no fields is dropped from the map entirely.
    """

    if field not in OVERRIDE_FIELDS:
        raise OverrideError(f"Unknown override field '{field}'")

    number = coerce_number(value)
    if number is None or number < MIN_OVERRIDE_VALUE:
        raise OverrideError(f"Invalid {field} override for user {user_id}: {value!r}")

    updated = dict(overrides)
    current = updated.get(user_id) or UserOverride()
    if abs(number - default_value(field, config)) < DEFAULT_MATCH_TOLERANCE:
        current = replace(current, **{field: None})
    else:
        current = replace(current, **{field: number})

    if current.is_empty():
        updated.pop(user_id, None)
    else:
        updated[user_id] = current
    return updated


def clear_override(overrides: Mapping[str, UserOverride], user_id: str) -> dict[str, UserOverride]:
    updated = dict(overrides)
    updated.pop(user_id, None)
    return updated


def prune_overrides(overrides: Mapping[str, Optional[UserOverride]]) -> dict[str, UserOverride]:
    """Drop users whose override record carries no values."""

    return {user_id: override for user_id, override in overrides.items() if override and not override.is_empty()}


def overrides_from_mapping(raw: Optional[Mapping[str, Any]]) -> dict[str, UserOverride]:
    """Build an override map from persisted data.

    Accepts ``{user: {"capacity": .., "multiplier": ..}}`` as well as the
    older ``{user: multiplier}`` layout, which is read as a multiplier-only
    override.
    """

    overrides: dict[str, UserOverride] = {}
    for user_id, record in (raw or {}).items():
        if isinstance(record, Mapping):
            override = UserOverride(
                capacity=coerce_number(record.get("capacity")),
                multiplier=coerce_number(record.get("multiplier")),
            )
        else:
            logger.debug("Migrating legacy multiplier override for user %s", user_id)
            override = UserOverride(multiplier=coerce_number(record))
        overrides[str(user_id)] = override
    return prune_overrides(overrides)


def overrides_to_mapping(overrides: Mapping[str, UserOverride]) -> dict[str, dict]:
    return {user_id: override.to_dict() for user_id, override in prune_overrides(overrides).items()}
