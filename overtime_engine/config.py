"""Overtime configuration loading."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from overtime_engine.schema import (
    DEFAULT_DAILY_THRESHOLD,
    DEFAULT_OVERTIME_MULTIPLIER,
    DEFAULT_WEEKLY_THRESHOLD,
    OvertimeConfig,
)

logger = logging.getLogger(__name__)

_FIELD_ALIASES = {
    "daily_threshold": ("daily_threshold", "dailyThreshold", "daily"),
    "weekly_threshold": ("weekly_threshold", "weeklyThreshold", "weekly"),
    "overtime_multiplier": ("overtime_multiplier", "overtimeMultiplier", "multiplier"),
}

_DEFAULTS = {
    "daily_threshold": DEFAULT_DAILY_THRESHOLD,
    "weekly_threshold": DEFAULT_WEEKLY_THRESHOLD,
    "overtime_multiplier": DEFAULT_OVERTIME_MULTIPLIER,
}


def coerce_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or None when it is not numeric."""

    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def config_from_mapping(raw: Optional[Mapping[str, Any]]) -> OvertimeConfig:
    """Build a config, falling back to defaults for absent, non-numeric or zero values."""

    raw = raw or {}
    values = {}
    for name, aliases in _FIELD_ALIASES.items():
        found = None
        for alias in aliases:
            if alias in raw:
                found = coerce_number(raw[alias])
                break
        if not found or found < 0:
            if found is not None:
                logger.debug("Ignoring non-positive %s=%r", name, found)
            found = _DEFAULTS[name]
        values[name] = found
    return OvertimeConfig(**values)


def load_config(config_path: Path) -> OvertimeConfig:
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with config_path.open("r", encoding="utf-8") as f:
        payload = yaml.safe_load(f) or {}
    if not isinstance(payload, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")
    overtime_section = payload.get("overtime", payload)
    if not isinstance(overtime_section, dict):
        raise ValueError(f"'overtime' section must be a mapping: {config_path}")
    return config_from_mapping(overtime_section)
