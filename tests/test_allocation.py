import pytest

from overtime_engine.allocation import allocate_day, entry_costs


def test_entries_within_capacity_are_regular(entry_factory):
    entries = [
        entry_factory("a", "u1", "2025-01-06T08:00:00Z", hours=3),
        entry_factory("b", "u1", "2025-01-06T12:00:00Z", hours=4),
    ]
    allocations = allocate_day(entries, capacity=8)
    assert [a.regular_hours for a in allocations] == [3, 4]
    assert [a.overtime_hours for a in allocations] == [0, 0]


def test_allocation_is_order_sensitive(entry_factory):
    long_first = [
        entry_factory("short", "u1", "2025-01-06T15:00:00Z", hours=4),
        entry_factory("long", "u1", "2025-01-06T08:00:00Z", hours=6),
    ]
    by_id = {a.entry["id"]: a for a in allocate_day(long_first, capacity=8)}
    assert (by_id["long"].regular_hours, by_id["long"].overtime_hours) == (6, 0)
    assert (by_id["short"].regular_hours, by_id["short"].overtime_hours) == (2, 2)

    short_first = [
        entry_factory("short", "u1", "2025-01-06T08:00:00Z", hours=4),
        entry_factory("long", "u1", "2025-01-06T13:00:00Z", hours=6),
    ]
    by_id = {a.entry["id"]: a for a in allocate_day(short_first, capacity=8)}
    assert (by_id["short"].regular_hours, by_id["short"].overtime_hours) == (4, 0)
    assert (by_id["long"].regular_hours, by_id["long"].overtime_hours) == (4, 2)


def test_zero_duration_entries_skipped(entry_factory):
    entries = [
        entry_factory("empty", "u1", "2025-01-06T07:00:00Z", hours=0),
        entry_factory("work", "u1", "2025-01-06T08:00:00Z", hours=9),
    ]
    allocations = allocate_day(entries, capacity=8)
    assert [a.entry["id"] for a in allocations] == ["work"]
    assert allocations[0].overtime_hours == 1


def test_unparseable_start_sorts_first_and_claims_capacity(entry_factory):
    entries = [
        entry_factory("timed", "u1", "2025-01-06T08:00:00Z", hours=4),
        entry_factory("untimed", "u1", "2025-01-06 garbage", hours=8),
    ]
    by_id = {a.entry["id"]: a for a in allocate_day(entries, capacity=8)}
    assert by_id["untimed"].regular_hours == 8
    assert by_id["timed"].overtime_hours == 4


def test_hours_conserved_per_day(entry_factory):
    entries = [entry_factory(str(i), "u1", f"2025-01-06T{8 + i:02d}:00:00Z", hours=1.75) for i in range(7)]
    allocations = allocate_day(entries, capacity=7.5)
    assert sum(a.regular_hours + a.overtime_hours for a in allocations) == pytest.approx(7 * 1.75)
    assert sum(a.regular_hours for a in allocations) == pytest.approx(7.5)


def test_entry_costs_split_base_and_premium():
    costs = entry_costs(regular_hours=8, overtime_hours=2, rate=20, multiplier=1.5)
    assert costs.base_amount == 200
    assert costs.premium_amount == 20
    assert costs.total_amount == costs.base_amount + costs.premium_amount


def test_entry_costs_multiplier_one_has_no_premium():
    costs = entry_costs(regular_hours=0, overtime_hours=3, rate=50, multiplier=1.0)
    assert costs.premium_amount == 0
    assert costs.total_amount == 150


def test_reversed_interval_does_not_free_capacity(entry_factory):
    backwards = entry_factory("bad", "u1", "2025-01-06T07:00:00Z")
    backwards["timeInterval"]["end"] = "2025-01-06T05:00:00Z"
    entries = [backwards, entry_factory("work", "u1", "2025-01-06T08:00:00Z", hours=9)]

    (allocation,) = allocate_day(entries, capacity=8)
    assert allocation.entry["id"] == "work"
    assert (allocation.regular_hours, allocation.overtime_hours) == (8, 1)
