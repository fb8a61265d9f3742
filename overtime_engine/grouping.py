"""Re-slice computed entry results along alternative dimensions.

Grouping never re-runs allocation: every view is a fold over the
``EntryResult`` lists already stored on each ``UserResult``.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Callable, Optional

import numpy as np

from overtime_engine.schema import EntryResult, GroupBucket, GroupedView, UserResult
from overtime_engine.summary import round2

GROUP_DIMENSIONS = ("user", "client", "project", "task", "date", "week")

NO_CLIENT = "(No Client)"
NO_PROJECT = "(No Project)"
NO_TASK = "(No Task)"
TOTAL_KEY = "TOTAL"

HIGH_OVERTIME_RATIO = 0.30

_TOTAL_NOUNS = {"client": "clients", "project": "projects", "task": "tasks", "date": "days", "week": "weeks"}


def iso_week_key(date_str: str) -> str:
    """Return the ISO-8601 week label ``YYYY-Www`` for a ``YYYY-MM-DD`` date."""

    iso_year, iso_week, _ = date.fromisoformat(date_str[:10]).isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def week_range_label(week_key: str) -> str:
    """Return the Monday to Sunday span of an ISO week, e.g. ``Dec 1 - Dec 7``."""

    year, week = week_key.split("-W")
    monday = date.fromisocalendar(int(year), int(week), 1)
    sunday = date.fromisocalendar(int(year), int(week), 7)
    return f"{monday:%b} {monday.day} - {sunday:%b} {sunday.day}"


def _shares(regular: np.ndarray, overtime: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    total = regular + overtime
    safe_total = np.where(total > 0, total, 1.0)
    regular_pct = np.where(total > 0, regular / safe_total * 100.0, 0.0)
    overtime_pct = np.where(total > 0, overtime / safe_total * 100.0, 0.0)
    return total, regular_pct, overtime_pct


def _build_buckets(
    keys: list[str],
    labels: list[str],
    regular: list[float],
    overtime: list[float],
    amounts: list[float],
    counts: list[int],
) -> list[GroupBucket]:
    regular_arr = np.asarray(regular, dtype=float)
    overtime_arr = np.asarray(overtime, dtype=float)
    total, regular_pct, overtime_pct = _shares(regular_arr, overtime_arr)
    high = (total > 0) & (overtime_arr > HIGH_OVERTIME_RATIO * total)

    return [
        GroupBucket(
            key=keys[i],
            label=labels[i],
            regular_hours=round2(float(regular_arr[i])),
            overtime_hours=round2(float(overtime_arr[i])),
            total_hours=round2(float(total[i])),
            total_amount=round2(float(amounts[i])),
            regular_pct=float(regular_pct[i]),
            overtime_pct=float(overtime_pct[i]),
            high_overtime=bool(high[i]),
            entry_count=int(counts[i]),
        )
        for i in range(len(keys))
    ]


def _totals_row(buckets: list[GroupBucket], label: str) -> GroupBucket:
    regular = float(np.sum([b.regular_hours for b in buckets], dtype=float))
    overtime = float(np.sum([b.overtime_hours for b in buckets], dtype=float))
    amount = float(np.sum([b.total_amount for b in buckets], dtype=float))
    count = sum(b.entry_count for b in buckets)
    (totals,) = _build_buckets([TOTAL_KEY], [label], [regular], [overtime], [amount], [count])
    totals.is_total = True
    return totals


def fold_entries(
    users: list[UserResult],
    key_fn: Callable[[EntryResult], str],
    dimension: str,
    sort_by: str = "amount",
    label_fn: Optional[Callable[[str], str]] = None,
) -> GroupedView:
    """Group every entry across users by ``key_fn`` and fold its hours and amount.

    ``sort_by`` is ``"amount"`` (total amount descending) or ``"key"`` (key
    descending, which is chronological-descending for date and week keys).
    """

    sums: dict[str, list[float]] = defaultdict(lambda: [0.0, 0.0, 0.0, 0])
    for user in users:
        for entry in user.entries:
            bucket = sums[key_fn(entry)]
            bucket[0] += entry.regular_hours or 0.0
            bucket[1] += entry.overtime_hours or 0.0
            bucket[2] += entry.total_amount or 0.0
            bucket[3] += 1

    if sort_by == "key":
        ordered = sorted(sums.items(), key=lambda item: item[0], reverse=True)
    else:
        ordered = sorted(sums.items(), key=lambda item: item[1][2], reverse=True)

    keys = [key for key, _ in ordered]
    label_fn = label_fn or (lambda key: key)
    buckets = _build_buckets(
        keys,
        [label_fn(key) for key in keys],
        [values[0] for _, values in ordered],
        [values[1] for _, values in ordered],
        [values[2] for _, values in ordered],
        [values[3] for _, values in ordered],
    )
    noun = _TOTAL_NOUNS.get(dimension, "groups")
    return GroupedView(dimension=dimension, buckets=buckets, totals=_totals_row(buckets, f"TOTAL ({len(buckets)} {noun})"))


def group_by_client(users: list[UserResult]) -> GroupedView:
    return fold_entries(users, lambda entry: entry.client_name or NO_CLIENT, "client")


def group_by_project(users: list[UserResult]) -> GroupedView:
    return fold_entries(users, lambda entry: entry.project_name or NO_PROJECT, "project")


def group_by_task(users: list[UserResult]) -> GroupedView:
    return fold_entries(users, lambda entry: entry.task_name or NO_TASK, "task")


def group_by_date(users: list[UserResult]) -> GroupedView:
    return fold_entries(users, lambda entry: entry.date, "date", sort_by="key")


def group_by_week(users: list[UserResult]) -> GroupedView:
    return fold_entries(
        users,
        lambda entry: iso_week_key(entry.date),
        "week",
        sort_by="key",
        label_fn=week_range_label,
    )


def group_by_user(users: list[UserResult]) -> GroupedView:
    """One bucket per user, ordered by total hours rather than overtime."""

    ordered = sorted(users, key=lambda user: user.total_hours, reverse=True)
    buckets = _build_buckets(
        [user.user_id for user in ordered],
        [user.user_name for user in ordered],
        [user.regular_hours for user in ordered],
        [user.overtime_hours for user in ordered],
        [user.total_cost for user in ordered],
        [len(user.entries) for user in ordered],
    )
    for bucket, user in zip(buckets, ordered):
        bucket.capacity_hours = round2(user.capacity * user.days_worked)
        bucket.base_amount = user.base_cost
        bucket.premium_amount = user.ot_premium

    totals = _totals_row(buckets, f"TOTAL ({len(buckets)} users)")
    totals.capacity_hours = round2(sum(b.capacity_hours for b in buckets))
    totals.base_amount = round2(sum(b.base_amount for b in buckets))
    totals.premium_amount = round2(sum(b.premium_amount for b in buckets))
    return GroupedView(dimension="user", buckets=buckets, totals=totals)


_GROUPERS: dict[str, Callable[[list[UserResult]], GroupedView]] = {
    "user": group_by_user,
    "client": group_by_client,
    "project": group_by_project,
    "task": group_by_task,
    "date": group_by_date,
    "week": group_by_week,
}


def group_results(users: list[UserResult], dimension: str) -> GroupedView:
    """Build the grouped view for one of ``GROUP_DIMENSIONS``."""

    try:
        grouper = _GROUPERS[dimension]
    except KeyError:
        raise ValueError(f"Unknown grouping dimension '{dimension}', expected one of {GROUP_DIMENSIONS}") from None
    return grouper(users)
