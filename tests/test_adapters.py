import csv
import json

import pytest

from overtime_engine.adapters import csv_adapter, json_adapter
from overtime_engine.calculator import calculate_overtime
from overtime_engine.grouping import group_results
from overtime_engine.schema import OvertimeConfig, UserOverride


def test_json_parse_success(tmp_path, entry_factory):
    path = tmp_path / "entries.json"
    payload = [entry_factory("a", "u1", "2025-01-01T09:00:00Z", hours=1)]
    path.write_text(json.dumps(payload), encoding="utf-8")
    entries = json_adapter.parse(str(path))
    assert len(entries) == 1
    assert entries[0]["id"] == "a"


def test_json_parse_rejects_non_list(tmp_path):
    path = tmp_path / "entries.json"
    path.write_text(json.dumps({"id": "a"}), encoding="utf-8")
    with pytest.raises(ValueError):
        json_adapter.parse(str(path))


def test_json_parse_rejects_bad_item(tmp_path):
    path = tmp_path / "entries.json"
    path.write_text(json.dumps([{"id": "a"}, "oops"]), encoding="utf-8")
    with pytest.raises(ValueError, match="Item 2"):
        json_adapter.parse(str(path))


def test_overrides_missing_file_is_empty(tmp_path):
    assert json_adapter.load_overrides(str(tmp_path / "none.json")) == {}


def test_save_overrides_prunes_empty_records(tmp_path):
    path = tmp_path / "state" / "overrides.json"
    json_adapter.save_overrides(str(path), {"u1": UserOverride(capacity=6.0), "u2": UserOverride()})
    assert json.loads(path.read_text(encoding="utf-8")) == {"u1": {"capacity": 6.0}}
    assert json_adapter.load_overrides(str(path)) == {"u1": UserOverride(capacity=6.0)}


def test_load_overrides_legacy_layout(tmp_path):
    path = tmp_path / "overrides.json"
    path.write_text(json.dumps({"u1": 1.75}), encoding="utf-8")
    assert json_adapter.load_overrides(str(path)) == {"u1": UserOverride(multiplier=1.75)}


def _read_csv(path):
    with open(path, newline="", encoding="utf-8") as handle:
        return list(csv.reader(handle))


def test_export_week_summary(tmp_path, sample_entries):
    result = calculate_overtime(sample_entries, OvertimeConfig())
    path = tmp_path / "weeks.csv"
    csv_adapter.export_grouped(group_results(result.users, "week"), str(path))

    rows = _read_csv(path)
    assert rows[0] == ["Week", "Date Range", "Regular Hours", "Overtime Hours", "Total Hours", "Total Amount"]
    assert rows[1][0] == "2025-W11"
    assert rows[2][:2] == ["2025-W10", "Mar 3 - Mar 9"]
    assert rows[-1][0] == "TOTAL (2 weeks)"
    assert rows[-1][4] == "27.50"


def test_export_user_summary(tmp_path, sample_entries):
    result = calculate_overtime(sample_entries, OvertimeConfig(), {"u-ben": UserOverride(capacity=6)})
    path = tmp_path / "users.csv"
    csv_adapter.export_grouped(group_results(result.users, "user"), str(path), include_totals=False)

    rows = _read_csv(path)
    assert rows[0] == csv_adapter.USER_HEADERS
    assert rows[1] == ["Ana Silva", "16.00", "15.50", "2.00", "17.50", "109", "700.00", "40.00", "740.00"]
    assert len(rows) == 3


def test_export_detailed(tmp_path, sample_entries):
    result = calculate_overtime(sample_entries, OvertimeConfig())
    path = tmp_path / "detailed.csv"
    csv_adapter.export_detailed(result, str(path))

    rows = _read_csv(path)
    assert rows[0] == csv_adapter.DETAILED_HEADERS
    assert len(rows) == 1 + 4
    by_description = {row[8]: row for row in rows[1:]}
    planning = by_description["Sprint planning"]
    assert planning[2:4] == ["08:00", "14:00"]
    assert planning[7] == "meeting"
    assert planning[-1] == "240.00"


def test_rows_to_text_quotes_commas():
    text = csv_adapter.rows_to_text([["Name", "Amount"], ["Acme, Inc", "1.00"]])
    assert text == 'Name,Amount\n"Acme, Inc",1.00\n'
