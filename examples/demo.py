"""Demo script for overtime-engine."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from overtime_engine.adapters.json_adapter import load_overrides, parse
from overtime_engine.calculator import calculate_overtime
from overtime_engine.config import load_config
from overtime_engine.grouping import GROUP_DIMENSIONS, group_results

EXAMPLES_DIR = Path(__file__).resolve().parent


def main() -> None:
    entries = parse(str(EXAMPLES_DIR / "sample_entries.json"))
    config = load_config(EXAMPLES_DIR / "overtime.yaml")
    overrides = load_overrides(str(EXAMPLES_DIR / "overrides.json"))

    result = calculate_overtime(entries, config, overrides)
    print("Summary:", result.summary)
    print("Excluded:", result.excluded)
    for dimension in GROUP_DIMENSIONS:
        view = group_results(result.users, dimension)
        print(f"\nBy {dimension}:")
        for row in view.rows():
            print(f"  {row.label:<28} reg={row.regular_hours:>6.2f} ot={row.overtime_hours:>6.2f} amount={row.total_amount:>8.2f}")


if __name__ == "__main__":
    main()
