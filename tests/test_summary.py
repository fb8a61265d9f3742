from overtime_engine.schema import OvertimeConfig, UserResult
from overtime_engine.summary import empty_result, round2, team_summary


def _user(user_id, total, overtime, base, premium):
    return UserResult(
        user_id=user_id,
        user_name=user_id,
        user_email="",
        multiplier=1.5,
        capacity=8,
        total_hours=total,
        regular_hours=total - overtime,
        overtime_hours=overtime,
        base_cost=base,
        ot_premium=premium,
        total_cost=base + premium,
    )


def test_team_summary_sums_users():
    summary = team_summary([_user("a", 10, 2, 200, 20), _user("b", 5.5, 0, 110, 0)])
    assert summary.total_hours == 15.5
    assert summary.overtime_hours == 2
    assert summary.regular_hours == 13.5
    assert summary.user_count == 2
    assert summary.costs.base_cost == 310
    assert summary.costs.ot_premium == 20
    assert summary.costs.total_cost == 330
    assert summary.costs.currency == "USD"


def test_empty_result_keeps_config():
    config = OvertimeConfig(daily_threshold=7)
    result = empty_result(config)
    assert result.config is config
    assert result.summary.user_count == 0
    assert result.excluded == []


def test_round2_sends_halves_up():
    assert round2(0.125) == 0.13
    assert round2(0.375) == 0.38
    assert round2(2.5) == 2.5
    assert round2(0) == 0


def test_team_summary_rounds_half_cent_up():
    summary = team_summary([_user("u1", 1, 0, 0.125, 0)])
    assert summary.costs.base_cost == 0.13
