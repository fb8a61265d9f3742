"""Workspace-level aggregation of per-user results."""

from __future__ import annotations

import math

from overtime_engine.schema import (
    DEFAULT_CURRENCY,
    AnalysisResult,
    CostSummary,
    OvertimeConfig,
    TeamSummary,
    UserResult,
)


def round2(value: float) -> float:
    """Round to cents with halves going up."""

    return math.floor(value * 100 + 0.5) / 100


def team_summary(users: list[UserResult], currency: str = DEFAULT_CURRENCY) -> TeamSummary:
    """Sum user totals; regular hours are derived so they never drift from total minus overtime."""

    total_hours = sum(user.total_hours for user in users)
    overtime_hours = sum(user.overtime_hours for user in users)
    base_cost = sum(user.base_cost for user in users)
    ot_premium = sum(user.ot_premium for user in users)

    return TeamSummary(
        total_hours=round2(total_hours),
        regular_hours=round2(total_hours - overtime_hours),
        overtime_hours=round2(overtime_hours),
        user_count=len(users),
        costs=CostSummary(
            base_cost=round2(base_cost),
            ot_premium=round2(ot_premium),
            total_cost=round2(base_cost + ot_premium),
            currency=currency,
        ),
    )


def empty_result(config: OvertimeConfig) -> AnalysisResult:
    return AnalysisResult(users=[], summary=TeamSummary(), config=config)
