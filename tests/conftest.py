import json
from pathlib import Path

import pytest

EXAMPLES_DIR = Path(__file__).resolve().parents[1] / "examples"


def make_entry(entry_id, user_id, start, hours=None, rate_cents=None, **extra):
    """Build a raw entry in the provider's shape with a start/end interval."""

    interval = {}
    if start is not None:
        interval["start"] = start
    entry = {
        "id": entry_id,
        "userId": user_id,
        "userName": f"User {user_id}",
        "userEmail": f"{user_id}@example.com",
        "timeInterval": interval,
    }
    if hours is not None:
        entry["duration"] = int(hours * 3600)
    if rate_cents is not None:
        entry["hourlyRate"] = {"amount": rate_cents}
    entry.update(extra)
    return entry


@pytest.fixture
def sample_entries():
    return json.loads((EXAMPLES_DIR / "sample_entries.json").read_text(encoding="utf-8"))


@pytest.fixture
def entry_factory():
    return make_entry
