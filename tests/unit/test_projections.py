"""Unit tests for investment growth projections"""

import pytest
from finplan.domain.exceptions import InvalidInputError
from finplan.domain.models import PresetTier
from finplan.domain.projections import (
    calculate_investment_projections,
    project_growth,
    project_investment_growth,
)


def test_project_growth_zero_rate_is_linear():
    assert project_growth(1000.0, 100.0, 10, annual_return=0.0) == 13000.0


def test_project_growth_compounds_monthly():
    # 7% a year compounded monthly roughly doubles a balance in 10 years
    assert project_growth(1000.0, 0.0, 10) == pytest.approx(2009.66, abs=0.01)


def test_project_growth_with_contributions():
    rate = 0.07 / 12
    expected = 500.0 * (((1 + rate) ** 360 - 1) / rate)
    assert project_growth(0.0, 500.0, 30) == pytest.approx(expected)


def test_project_growth_zero_years():
    assert project_growth(2500.0, 300.0, 0) == 2500.0


@pytest.mark.parametrize(
    "balance, contribution, years, annual_return",
    [(-1.0, 100.0, 10, 0.07), (0.0, -100.0, 10, 0.07), (0.0, 100.0, -1, 0.07), (0.0, 100.0, 10, -0.01)],
)
def test_project_growth_rejects_negative_inputs(balance, contribution, years, annual_return):
    with pytest.raises(InvalidInputError):
        project_growth(balance, contribution, years, annual_return)


def test_projection_monotone_in_contribution_and_horizon():
    projection = project_investment_growth(
        10000.0,
        {PresetTier.LOW: 100.0, PresetTier.RECOMMENDED: 300.0, PresetTier.HIGH: 600.0},
    )

    for years in (10, 20, 30):
        assert projection.low.value_at(years) < projection.recommended.value_at(years)
        assert projection.recommended.value_at(years) < projection.high.value_at(years)

    for tier in PresetTier:
        timeline = projection.timeline(tier)
        assert timeline.value_at(10) < timeline.value_at(20) < timeline.value_at(30)


def test_projection_values_are_whole_dollars():
    projection = project_investment_growth(
        1234.56, {PresetTier.LOW: 10.0, PresetTier.RECOMMENDED: 20.0, PresetTier.HIGH: 30.0}
    )
    assert all(isinstance(v, int) for v in projection.high.values.values())
    assert projection.current_balance == 1234.56


def test_timeline_gain_and_roi():
    projection = project_investment_growth(
        0.0,
        {PresetTier.LOW: 100.0, PresetTier.RECOMMENDED: 200.0, PresetTier.HIGH: 300.0},
        horizons=(10,),
        annual_return=0.0,
    )
    timeline = projection.recommended

    assert timeline.value_at(10) == 24000
    assert timeline.total_gain(10) == 0.0
    assert timeline.roi(10) == 0.0
    assert timeline.value_at(20) == 0  # horizon not projected


def test_timeline_roi_positive_with_returns():
    projection = project_investment_growth(
        0.0, {PresetTier.LOW: 100.0, PresetTier.RECOMMENDED: 100.0, PresetTier.HIGH: 100.0}
    )
    assert projection.low.total_gain(30) > 0
    assert projection.low.roi(30) > 100.0


def test_calculate_investment_projections_from_income():
    projection = calculate_investment_projections(5000.0, 6000.0, 5, 15, 15)

    assert projection.low.monthly_contribution == 300
    assert projection.recommended.monthly_contribution == 900
    assert projection.high.monthly_contribution == 900
    assert projection.recommended.values == projection.high.values
