"""Investment growth projections using monthly compounding"""

from typing import Dict, Iterable, Mapping

from finplan.domain.exceptions import InvalidInputError
from finplan.domain.models import InvestmentProjection, PresetTier, ProjectionTimeline
from finplan.utils.rounding import round_half_up

DEFAULT_ANNUAL_RETURN = 0.07
DEFAULT_HORIZONS = (10, 20, 30)


def project_growth(
    current_balance: float,
    monthly_contribution: float,
    years: int,
    annual_return: float = DEFAULT_ANNUAL_RETURN,
) -> float:
    """
    Future value of a balance plus level monthly contributions.

    FV = P(1+r)^n + C((1+r)^n - 1) / r, with r = annual_return / 12 and n = years * 12.
    A zero rate degenerates to P + C*n.
    """
    if current_balance < 0 or monthly_contribution < 0:
        raise InvalidInputError("Balance and contribution must be non-negative")
    if years < 0:
        raise InvalidInputError(f"years must be non-negative, got {years}")
    if annual_return < 0:
        raise InvalidInputError(f"annual_return must be non-negative, got {annual_return}")

    months = years * 12
    rate = annual_return / 12

    if rate == 0:
        return current_balance + monthly_contribution * months

    growth = (1 + rate) ** months
    return current_balance * growth + monthly_contribution * ((growth - 1) / rate)


def _timeline(
    current_balance: float,
    monthly_contribution: float,
    horizons: Iterable[int],
    annual_return: float,
) -> ProjectionTimeline:
    values: Dict[int, int] = {
        years: round_half_up(project_growth(current_balance, monthly_contribution, years, annual_return))
        for years in horizons
    }
    return ProjectionTimeline(monthly_contribution=monthly_contribution, values=values)


def project_investment_growth(
    current_balance: float,
    contribution_tiers: Mapping[PresetTier, float],
    horizons: Iterable[int] = DEFAULT_HORIZONS,
    annual_return: float = DEFAULT_ANNUAL_RETURN,
) -> InvestmentProjection:
    """Project each contribution tier over each horizon, rounded to whole dollars"""
    horizons = tuple(horizons)
    return InvestmentProjection(
        current_balance=current_balance,
        low=_timeline(current_balance, contribution_tiers[PresetTier.LOW], horizons, annual_return),
        recommended=_timeline(
            current_balance, contribution_tiers[PresetTier.RECOMMENDED], horizons, annual_return
        ),
        high=_timeline(current_balance, contribution_tiers[PresetTier.HIGH], horizons, annual_return),
    )


def calculate_investment_projections(
    current_balance: float,
    monthly_income: float,
    low_percentage: float,
    recommended_percentage: float,
    high_percentage: float,
    annual_return: float = DEFAULT_ANNUAL_RETURN,
) -> InvestmentProjection:
    """Projections where each tier contributes a fixed percentage of monthly income"""
    tiers = {
        PresetTier.LOW: round_half_up(monthly_income * low_percentage / 100),
        PresetTier.RECOMMENDED: round_half_up(monthly_income * recommended_percentage / 100),
        PresetTier.HIGH: round_half_up(monthly_income * high_percentage / 100),
    }
    return project_investment_growth(current_balance, tiers, annual_return=annual_return)
