"""Streamlit demo UI for overtime-engine."""

from __future__ import annotations

import tempfile
from typing import Any

from overtime_engine.adapters import csv_adapter, json_adapter
from overtime_engine.calculator import calculate_overtime
from overtime_engine.config import config_from_mapping
from overtime_engine.grouping import GROUP_DIMENSIONS, group_results
from overtime_engine.overrides import OverrideError, default_value, set_override

DEMO_DATASET = "examples/sample_entries.json"


def _parse_uploaded(uploaded_file) -> list:
    with tempfile.NamedTemporaryFile(delete=False, suffix=".json") as handle:
        handle.write(uploaded_file.getbuffer())
        temp_path = handle.name
    return json_adapter.parse(temp_path)


def _fmt_hours(hours: float) -> str:
    whole = int(hours)
    minutes = round((hours - whole) * 60)
    return f"{whole}h" if minutes == 0 else f"{whole}h {minutes}m"


def run_report(entries: list, settings: dict, overrides: dict, group_by: str) -> dict[str, Any]:
    """Run the engine and return a UI-friendly result payload."""

    config = config_from_mapping(settings)
    result = calculate_overtime(entries, config, overrides)
    view = group_results(result.users, group_by)
    return {
        "result": result,
        "view": view,
        "rows": [
            {
                "Name": row.label,
                "Regular": _fmt_hours(row.regular_hours),
                "Overtime": _fmt_hours(row.overtime_hours),
                "Total": _fmt_hours(row.total_hours),
                "Split": f"{row.regular_pct:.0f}% reg / {row.overtime_pct:.0f}% OT",
                "Amount": f"${row.total_amount:,.2f}",
                "High OT": "yes" if row.high_overtime else "",
            }
            for row in view.rows()
        ],
        "csv": csv_adapter.rows_to_text(csv_adapter.grouped_rows(view)),
    }


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Overtime Summary", layout="wide")
    st.title("Overtime Summary")

    if "overrides" not in st.session_state:
        st.session_state["overrides"] = {}

    with st.sidebar:
        st.header("Settings")
        uploaded = st.file_uploader("Upload time entries", type=["json"])
        use_demo = st.checkbox("Load demo dataset", value=True)
        daily = st.number_input("Daily threshold (h)", min_value=0.5, max_value=24.0, value=8.0, step=0.5)
        weekly = st.number_input("Weekly threshold (h)", min_value=1.0, max_value=168.0, value=40.0, step=1.0)
        multiplier = st.number_input("Overtime multiplier", min_value=1.0, max_value=5.0, value=1.5, step=0.25)
        group_by = st.selectbox("Group by", options=list(GROUP_DIMENSIONS), index=0)

    try:
        if uploaded is not None:
            entries = _parse_uploaded(uploaded)
        elif use_demo:
            entries = json_adapter.parse(DEMO_DATASET)
        else:
            st.info("Upload a JSON export of time entries or enable the demo dataset.")
            return
    except ValueError as exc:
        st.error(f"Input error: {exc}")
        return

    settings = {"daily_threshold": daily, "weekly_threshold": weekly, "overtime_multiplier": multiplier}
    report = run_report(entries, settings, st.session_state["overrides"], group_by)
    result = report["result"]

    summary = result.summary
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Users", summary.user_count)
    c2.metric("Total hours", _fmt_hours(summary.total_hours))
    c3.metric("Overtime hours", _fmt_hours(summary.overtime_hours))
    c4.metric("Total cost", f"${summary.costs.total_cost:,.2f}")
    if result.excluded:
        st.warning(f"{len(result.excluded)} entries were excluded (missing start time or zero duration).")

    st.subheader(f"Summary by {group_by}")
    st.table(report["rows"])
    st.download_button("Export CSV", report["csv"], file_name=f"overtime_by_{group_by}.csv", mime="text/csv")

    with st.expander("Per-user overrides"):
        users = {user.user_id: user.user_name for user in result.users}
        if users:
            user_id = st.selectbox("User", options=list(users), format_func=users.get)
            field = st.radio("Field", options=["capacity", "multiplier"], horizontal=True)
            current = st.session_state["overrides"].get(user_id)
            current_value = getattr(current, field, None) if current else None
            if current_value is None:
                current_value = default_value(field, result.config)
            value = st.number_input("Value", min_value=0.0, value=float(current_value), step=0.5)
            if st.button("Apply override"):
                try:
                    st.session_state["overrides"] = set_override(
                        st.session_state["overrides"], user_id, field, value, result.config
                    )
                    st.rerun()
                except OverrideError as exc:
                    st.error(str(exc))
        if st.button("Reset all overrides"):
            st.session_state["overrides"] = {}
            st.rerun()


if __name__ == "__main__":
    main()
