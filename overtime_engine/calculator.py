"""Per-user overtime calculation and the full analysis pipeline."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional

from overtime_engine import normalize
from overtime_engine.allocation import allocate_day, entry_costs
from overtime_engine.overrides import effective_settings
from overtime_engine.schema import (
    AnalysisResult,
    EntryResult,
    ExcludedEntry,
    OvertimeConfig,
    UserOverride,
    UserResult,
)
from overtime_engine.summary import empty_result, round2, team_summary

logger = logging.getLogger(__name__)

UNKNOWN_USER_ID = "unknown"
UNKNOWN_USER_NAME = "Unknown User"

MISSING_START = "missing_start"
ZERO_DURATION = "zero_duration"


def _synthesized_end(start: Optional[str], hours: float) -> Optional[str]:
    parsed = normalize.parse_timestamp(start)
    if parsed is None:
        return None
    try:
        return normalize.format_timestamp(parsed + timedelta(hours=hours))
    except OverflowError:
        return None


def _display_sort_key(entry: EntryResult) -> tuple[float, str]:
    parsed = normalize.parse_timestamp(entry.start) or normalize.parse_timestamp(entry.date)
    if parsed is None:
        parsed = datetime.fromtimestamp(0, tz=timezone.utc)
    return parsed.timestamp(), entry.date


def calculate_user(
    user_id: str,
    user_name: str,
    user_email: str,
    entries: Iterable[Mapping[str, Any]],
    config: OvertimeConfig,
    overrides: Optional[Mapping[str, UserOverride]] = None,
    excluded: Optional[list[ExcludedEntry]] = None,
) -> UserResult:
    """Allocate one user's entries day by day and total their hours and cost."""

    capacity, multiplier = effective_settings(user_id, config, overrides)

    by_day: dict[str, list[Mapping[str, Any]]] = defaultdict(list)
    for entry in entries:
        day = normalize.date_key(entry)
        if day is None:
            if excluded is not None:
                excluded.append(
                    ExcludedEntry(
                        entry_id=normalize.entry_identifier(entry) or "",
                        user_id=user_id,
                        reason=MISSING_START,
                    )
                )
            continue
        by_day[day].append(entry)

    details: list[EntryResult] = []
    total_hours = 0.0
    overtime_hours = 0.0
    base_cost = 0.0
    ot_premium = 0.0

    for day, day_entries in by_day.items():
        allocations = allocate_day(day_entries, capacity)

        if excluded is not None:
            allocated = {id(allocation.entry) for allocation in allocations}
            excluded.extend(
                ExcludedEntry(entry_id=normalize.entry_identifier(entry) or "", user_id=user_id, reason=ZERO_DURATION)
                for entry in day_entries
                if id(entry) not in allocated
            )

        for allocation in allocations:
            entry = allocation.entry
            rate = normalize.hourly_rate(entry)
            costs = entry_costs(allocation.regular_hours, allocation.overtime_hours, rate, multiplier)

            total_hours += allocation.hours
            overtime_hours += allocation.overtime_hours
            base_cost += costs.base_amount
            ot_premium += costs.premium_amount

            start = normalize.start_timestamp(entry)
            end = normalize.end_timestamp(entry) or _synthesized_end(start, allocation.hours)

            details.append(
                EntryResult(
                    entry_id=normalize.entry_identifier(entry) or f"{user_id}-{day}-{len(details)}",
                    date=day,
                    start=start,
                    end=end,
                    description=entry.get("description") or "",
                    project_name=normalize.project_name(entry),
                    project_color=normalize.project_color(entry),
                    client_name=normalize.client_name(entry),
                    task_name=normalize.task_name(entry),
                    tags=normalize.tag_names(entry),
                    billable=bool(entry.get("billable")),
                    duration_hours=round2(allocation.hours),
                    regular_hours=round2(allocation.regular_hours),
                    overtime_hours=round2(allocation.overtime_hours),
                    hourly_rate=round2(rate),
                    ot_rate=round2(rate * multiplier),
                    base_amount=round2(costs.base_amount),
                    premium_amount=round2(costs.premium_amount),
                    total_amount=round2(costs.total_amount),
                )
            )

    details.sort(key=_display_sort_key, reverse=True)

    logger.debug(
        "User %s: %d entries over %d days, %.2fh total, %.2fh overtime (capacity=%s, multiplier=%s)",
        user_id,
        len(details),
        len(by_day),
        total_hours,
        overtime_hours,
        capacity,
        multiplier,
    )

    return UserResult(
        user_id=user_id,
        user_name=user_name,
        user_email=user_email,
        multiplier=multiplier,
        capacity=capacity,
        total_hours=round2(total_hours),
        regular_hours=round2(total_hours - overtime_hours),
        overtime_hours=round2(overtime_hours),
        base_cost=round2(base_cost),
        ot_premium=round2(ot_premium),
        total_cost=round2(base_cost + ot_premium),
        entries=details,
        days_worked=len(by_day),
    )


def _group_by_user(entries: Iterable[Mapping[str, Any]]) -> dict[str, dict]:
    users: dict[str, dict] = {}
    for entry in entries:
        user_id = str(entry.get("userId") or entry.get("_id") or UNKNOWN_USER_ID)
        if user_id not in users:
            users[user_id] = {
                "user_name": entry.get("userName") or UNKNOWN_USER_NAME,
                "user_email": entry.get("userEmail") or "",
                "entries": [],
            }
        users[user_id]["entries"].append(entry)
    return users


def calculate_overtime(
    entries: Optional[list[Mapping[str, Any]]],
    config: OvertimeConfig,
    overrides: Optional[Mapping[str, UserOverride]] = None,
) -> AnalysisResult:
    """Run the full analysis over a period's raw entries.

    Recomputes everything from scratch on each call; ``overrides`` is only
    read. Entries that contribute nothing (no start, no duration) are listed
    in ``AnalysisResult.excluded``.
    """

    if not entries:
        return empty_result(config)

    excluded: list[ExcludedEntry] = []
    users = [
        calculate_user(
            user_id,
            data["user_name"],
            data["user_email"],
            data["entries"],
            config,
            overrides,
            excluded=excluded,
        )
        for user_id, data in _group_by_user(entries).items()
    ]
    users.sort(key=lambda user: user.overtime_hours, reverse=True)

    if excluded:
        logger.warning(
            "Excluded %d of %d entries from totals (%d missing start, %d zero duration)",
            len(excluded),
            len(entries),
            sum(1 for item in excluded if item.reason == MISSING_START),
            sum(1 for item in excluded if item.reason == ZERO_DURATION),
        )

    return AnalysisResult(users=users, summary=team_summary(users), config=config, excluded=excluded)
