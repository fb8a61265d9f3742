"""Raw time entry normalization.

Entries come straight from the time-tracking provider and encode the same
facts in several ways. Every accessor here is lenient: missing or malformed
data resolves to zero, an empty string or None, never an exception.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

NO_PROJECT_COLOR = "#999999"

_ISO_DURATION = re.compile(r"PT(?:(\d+(?:\.\d+)?)H)?(?:(\d+(?:\.\d+)?)M)?(?:(\d+(?:\.\d+)?)S)?")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""

    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 in UTC with a ``Z`` suffix."""

    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def start_timestamp(entry: Mapping[str, Any]) -> Optional[str]:
    start = _mapping(entry.get("timeInterval")).get("start")
    return start if isinstance(start, str) and start else None


def end_timestamp(entry: Mapping[str, Any]) -> Optional[str]:
    end = _mapping(entry.get("timeInterval")).get("end")
    return end if isinstance(end, str) and end else None


def date_key(entry: Mapping[str, Any]) -> Optional[str]:
    """Return the ``YYYY-MM-DD`` day of the entry's start, or None without a start."""

    start = start_timestamp(entry)
    if start is None:
        return None
    return start[:10]


def start_sort_key(entry: Mapping[str, Any]) -> float:
    """Epoch seconds of the entry start; missing or unparseable starts sort first."""

    parsed = parse_timestamp(start_timestamp(entry))
    return parsed.timestamp() if parsed else 0.0


def _resolved_hours(entry: Mapping[str, Any]) -> float:
    seconds = entry.get("duration")
    if _is_number(seconds):
        return seconds / 3600

    interval = _mapping(entry.get("timeInterval"))
    if not interval:
        return 0.0

    iso_duration = interval.get("duration")
    if isinstance(iso_duration, str) and iso_duration:
        match = _ISO_DURATION.search(iso_duration)
        if match:
            hours, minutes, secs = (float(part or 0) for part in match.groups())
            return hours + minutes / 60 + secs / 3600

    start = parse_timestamp(interval.get("start"))
    end = parse_timestamp(interval.get("end"))
    if start and end:
        return (end - start).total_seconds() / 3600

    return 0.0


def duration_hours(entry: Mapping[str, Any]) -> float:
    """Resolve the entry duration in hours from seconds, ISO duration or start/end.

    Negative results (end before start, negative seconds) count as zero.
    """

    return max(0.0, _resolved_hours(entry))


def hourly_rate(entry: Mapping[str, Any]) -> float:
    """Hourly rate in currency units; the stored amount is in minor units."""

    amount = _mapping(entry.get("hourlyRate")).get("amount")
    if _is_number(amount):
        return amount / 100

    project_amount = _mapping(_mapping(entry.get("project")).get("hourlyRate")).get("amount")
    if _is_number(project_amount) and project_amount:
        return project_amount / 100

    return 0.0


def entry_identifier(entry: Mapping[str, Any]) -> Optional[str]:
    identifier = entry.get("id") or entry.get("_id")
    return str(identifier) if identifier else None


def project_name(entry: Mapping[str, Any]) -> str:
    return _mapping(entry.get("project")).get("name") or ""


def project_color(entry: Mapping[str, Any]) -> str:
    return _mapping(entry.get("project")).get("color") or NO_PROJECT_COLOR


def client_name(entry: Mapping[str, Any]) -> str:
    return (
        _mapping(entry.get("project")).get("clientName")
        or entry.get("clientName")
        or _mapping(entry.get("client")).get("name")
        or ""
    )


def task_name(entry: Mapping[str, Any]) -> str:
    return _mapping(entry.get("task")).get("name") or entry.get("taskName") or ""


def tag_names(entry: Mapping[str, Any]) -> list[str]:
    tags = entry.get("tags")
    if not isinstance(tags, list):
        return []
    return [tag["name"] for tag in tags if isinstance(tag, Mapping) and tag.get("name")]

