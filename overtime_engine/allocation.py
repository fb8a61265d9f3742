"""Daily regular/overtime allocation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from overtime_engine.normalize import duration_hours, start_sort_key


@dataclass
class Allocation:
    """Hours of one entry split against the day's remaining capacity."""

    entry: Mapping[str, Any]
    hours: float
    regular_hours: float
    overtime_hours: float


@dataclass
class EntryCosts:
    base_amount: float
    premium_amount: float
    total_amount: float


def allocate_day(entries: Iterable[Mapping[str, Any]], capacity: float) -> list[Allocation]:
    """Split one user's entries for a single day into regular and overtime hours.

    Capacity is consumed in start-time order, so earlier entries claim the
    regular pool first. Entries without a usable start sort first; entries
    with no duration are skipped and do not consume capacity.
    """

    allocations: list[Allocation] = []
    accumulated = 0.0
    for entry in sorted(entries, key=start_sort_key):
        hours = duration_hours(entry)
        if hours <= 0:
            continue

        remaining = max(0.0, capacity - accumulated)
        regular = min(hours, remaining)
        overtime = max(0.0, hours - regular)
        accumulated += hours

        allocations.append(Allocation(entry=entry, hours=hours, regular_hours=regular, overtime_hours=overtime))
    return allocations


def entry_costs(regular_hours: float, overtime_hours: float, rate: float, multiplier: float) -> EntryCosts:
    """Base cost covers every hour; the premium is the overtime surcharge only."""

    base = (regular_hours + overtime_hours) * rate
    premium = overtime_hours * rate * (multiplier - 1)
    return EntryCosts(base_amount=base, premium_amount=premium, total_amount=base + premium)
