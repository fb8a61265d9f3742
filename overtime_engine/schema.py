"""Core data schema for overtime analysis."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Iterator, Optional

DEFAULT_DAILY_THRESHOLD = 8.0
DEFAULT_WEEKLY_THRESHOLD = 40.0
DEFAULT_OVERTIME_MULTIPLIER = 1.5
DEFAULT_CURRENCY = "USD"


@dataclass(frozen=True)
class OvertimeConfig:
    """Global overtime settings; the weekly threshold is carried but not applied."""

    daily_threshold: float = DEFAULT_DAILY_THRESHOLD
    weekly_threshold: float = DEFAULT_WEEKLY_THRESHOLD
    overtime_multiplier: float = DEFAULT_OVERTIME_MULTIPLIER

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class UserOverride:
    """Per-user replacement for the global capacity and/or multiplier."""

    capacity: Optional[float] = None
    multiplier: Optional[float] = None

    def is_empty(self) -> bool:
        return self.capacity is None and self.multiplier is None

    def to_dict(self) -> dict:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass
class EntryResult:
    """Allocation and cost breakdown for one time entry."""

    entry_id: str
    date: str
    start: Optional[str]
    end: Optional[str]
    description: str
    project_name: str
    project_color: str
    client_name: str
    task_name: str
    tags: list[str]
    billable: bool
    duration_hours: float
    regular_hours: float
    overtime_hours: float
    hourly_rate: float
    ot_rate: float
    base_amount: float
    premium_amount: float
    total_amount: float


@dataclass
class UserResult:
    user_id: str
    user_name: str
    user_email: str
    multiplier: float
    capacity: float
    total_hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    base_cost: float = 0.0
    ot_premium: float = 0.0
    total_cost: float = 0.0
    entries: list[EntryResult] = field(default_factory=list)
    days_worked: int = 0


@dataclass
class CostSummary:
    base_cost: float = 0.0
    ot_premium: float = 0.0
    total_cost: float = 0.0
    currency: str = DEFAULT_CURRENCY


@dataclass
class TeamSummary:
    total_hours: float = 0.0
    regular_hours: float = 0.0
    overtime_hours: float = 0.0
    user_count: int = 0
    costs: CostSummary = field(default_factory=CostSummary)


@dataclass
class ExcludedEntry:
    """Raw entry that contributed nothing to the totals, and why."""

    entry_id: str
    user_id: str
    reason: str


@dataclass
class AnalysisResult:
    users: list[UserResult]
    summary: TeamSummary
    config: OvertimeConfig
    excluded: list[ExcludedEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class GroupBucket:
    """One row of a grouped summary view."""

    key: str
    label: str
    regular_hours: float
    overtime_hours: float
    total_hours: float
    total_amount: float
    regular_pct: float
    overtime_pct: float
    high_overtime: bool
    entry_count: int = 0
    capacity_hours: Optional[float] = None
    base_amount: Optional[float] = None
    premium_amount: Optional[float] = None
    is_total: bool = False


@dataclass
class GroupedView:
    dimension: str
    buckets: list[GroupBucket]
    totals: GroupBucket

    def rows(self) -> Iterator[GroupBucket]:
        """Yield bucket rows followed by the totals row."""

        yield from self.buckets
        yield self.totals

    def to_dict(self) -> dict:
        return asdict(self)
