"""CSV export for grouped summaries and per-entry detail."""

from __future__ import annotations

import csv
import io
from typing import Optional

from overtime_engine.normalize import parse_timestamp
from overtime_engine.schema import AnalysisResult, GroupBucket, GroupedView

_DIMENSION_TITLES = {
    "client": "Client",
    "project": "Project",
    "task": "Task",
    "date": "Date",
    "week": "Week",
}

USER_HEADERS = [
    "User Name",
    "Capacity (hrs)",
    "Regular Hours",
    "Overtime Hours",
    "Total Hours",
    "Utilization %",
    "Base Amount",
    "OT Premium",
    "Total Amount",
]

DETAILED_HEADERS = [
    "User Name",
    "Date",
    "Start Time",
    "End Time",
    "Project",
    "Client",
    "Task",
    "Tags",
    "Description",
    "Duration (hrs)",
    "Regular Hours",
    "Overtime Hours",
    "Hourly Rate",
    "OT Rate",
    "Base Amount",
    "OT Premium",
    "Total Amount",
]


def _fmt(value: Optional[float]) -> str:
    return f"{(value or 0.0):.2f}"


def format_clock(timestamp: Optional[str]) -> str:
    """``HH:MM`` in the timestamp's own offset; empty when missing or malformed."""

    parsed = parse_timestamp(timestamp)
    return parsed.strftime("%H:%M") if parsed else ""


def _user_row(bucket: GroupBucket) -> list[str]:
    capacity = bucket.capacity_hours or 0.0
    utilization = round(bucket.total_hours / capacity * 100) if capacity > 0 else 0
    return [
        bucket.label,
        _fmt(capacity),
        _fmt(bucket.regular_hours),
        _fmt(bucket.overtime_hours),
        _fmt(bucket.total_hours),
        str(utilization),
        _fmt(bucket.base_amount),
        _fmt(bucket.premium_amount),
        _fmt(bucket.total_amount),
    ]


def grouped_rows(view: GroupedView, include_totals: bool = True) -> list[list[str]]:
    """Header plus one row per bucket (and the totals row) for a grouped view."""

    rows_source = view.rows() if include_totals else iter(view.buckets)

    if view.dimension == "user":
        return [USER_HEADERS, *(_user_row(bucket) for bucket in rows_source)]

    title = _DIMENSION_TITLES.get(view.dimension, view.dimension.title())
    headers = [title, "Regular Hours", "Overtime Hours", "Total Hours", "Total Amount"]
    if view.dimension == "week":
        headers.insert(1, "Date Range")

    rows = [headers]
    for bucket in rows_source:
        row = [bucket.label if bucket.is_total else bucket.key]
        if view.dimension == "week":
            row.append("" if bucket.is_total else bucket.label)
        row.extend(
            [
                _fmt(bucket.regular_hours),
                _fmt(bucket.overtime_hours),
                _fmt(bucket.total_hours),
                _fmt(bucket.total_amount),
            ]
        )
        rows.append(row)
    return rows


def detailed_rows(result: AnalysisResult) -> list[list[str]]:
    rows = [DETAILED_HEADERS]
    for user in result.users:
        for entry in user.entries:
            rows.append(
                [
                    user.user_name,
                    entry.date,
                    format_clock(entry.start),
                    format_clock(entry.end),
                    entry.project_name,
                    entry.client_name,
                    entry.task_name,
                    "; ".join(entry.tags),
                    entry.description,
                    _fmt(entry.duration_hours),
                    _fmt(entry.regular_hours),
                    _fmt(entry.overtime_hours),
                    _fmt(entry.hourly_rate),
                    _fmt(entry.ot_rate),
                    _fmt(entry.base_amount),
                    _fmt(entry.premium_amount),
                    _fmt(entry.total_amount),
                ]
            )
    return rows


def rows_to_text(rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerows(rows)
    return buffer.getvalue()


def _write(rows: list[list[str]], file_path: str) -> None:
    with open(file_path, "w", newline="", encoding="utf-8") as handle:
        csv.writer(handle).writerows(rows)


def export_grouped(view: GroupedView, file_path: str, include_totals: bool = True) -> None:
    """Write a grouped summary view to CSV."""

    _write(grouped_rows(view, include_totals=include_totals), file_path)


def export_detailed(result: AnalysisResult, file_path: str) -> None:
    """Write one CSV row per computed entry."""

    _write(detailed_rows(result), file_path)
