"""Run an overtime report from a JSON file of raw time entries."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from overtime_engine.adapters import csv_adapter, json_adapter
from overtime_engine.calculator import calculate_overtime
from overtime_engine.config import config_from_mapping, load_config
from overtime_engine.grouping import GROUP_DIMENSIONS, group_results

logger = logging.getLogger("run_report")


def _resolve_config(args: argparse.Namespace):
    base = load_config(Path(args.config)).to_dict() if args.config else {}
    for name in ("daily_threshold", "weekly_threshold", "overtime_multiplier"):
        value = getattr(args, name)
        if value is not None:
            base[name] = value
    return config_from_mapping(base)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Compute regular vs overtime hours and cost per user")
    parser.add_argument("--entries", required=True, help="Path to JSON list of raw time entries")
    parser.add_argument("--config", help="Optional YAML file with overtime settings")
    parser.add_argument("--overrides", help="Optional JSON file with per-user overrides")
    parser.add_argument("--daily-threshold", dest="daily_threshold", type=float)
    parser.add_argument("--weekly-threshold", dest="weekly_threshold", type=float)
    parser.add_argument("--multiplier", dest="overtime_multiplier", type=float)
    parser.add_argument("--group-by", choices=GROUP_DIMENSIONS, default="user")
    parser.add_argument("--csv", help="Write the grouped summary to this CSV path")
    parser.add_argument("--detailed-csv", help="Write one row per entry to this CSV path")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    try:
        entries = json_adapter.parse(args.entries)
        config = _resolve_config(args)
        overrides = json_adapter.load_overrides(args.overrides) if args.overrides else {}
    except (OSError, ValueError) as exc:
        logger.error("Cannot load report inputs: %s", exc)
        return 1

    result = calculate_overtime(entries, config, overrides)
    view = group_results(result.users, args.group_by)
    grouped = view.to_dict()

    report = {
        "summary": result.to_dict()["summary"],
        "config": config.to_dict(),
        "excluded": len(result.excluded),
        "group_by": args.group_by,
        "rows": grouped["buckets"],
        "totals": grouped["totals"],
    }
    print(json.dumps(report, indent=2))

    if args.csv:
        csv_adapter.export_grouped(view, args.csv)
        print(f"Saved {args.group_by} summary to {args.csv}")
    if args.detailed_csv:
        csv_adapter.export_detailed(result, args.detailed_csv)
        print(f"Saved detailed entries to {args.detailed_csv}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
