"""Emergency fund sizing, savings period and contribution options"""

import logging
import math
from typing import List

from finplan.domain.exceptions import InvalidInputError
from finplan.domain.models import (
    EmergencyFundDurationOption,
    EmergencyFundPlan,
    HealthMetrics,
    IncomeStability,
    PresetOptions,
    PresetValue,
)
from finplan.utils.rounding import percent_of, round_half_up

logger = logging.getLogger(__name__)

DURATION_OPTION_MONTHS = (3, 6, 12)

# Savings periods in months
AGGRESSIVE_PERIOD = 12
MODERATE_PERIOD = 18
STANDARD_PERIOD = 24

# Contribution tiers for duration options
LOW_TIER_PERIOD = 24
HIGH_TIER_PERIOD = 8


def target_months_for(stability: IncomeStability) -> int:
    """6 / 9 / 12 months of essential spending for stable / variable / inconsistent income"""
    return stability.recommended_emergency_months


def savings_period_months(
    health: HealthMetrics, total_debt: float = 0.0, monthly_income: float = 0.0
) -> int:
    """
    How many months to spread the emergency fund target over.

    Health score bands: <40 needs improvement, 40-70 moderate, 70+ good.
    First matching rule wins:
    - 12 months: score < 40 or less than 3 months covered
    - 18 months: score < 70, less than 4.5 months covered, or debt above 3x monthly income
    - 24 months otherwise
    """
    if health.health_score < 40 or health.emergency_fund_months_covered < 3:
        return AGGRESSIVE_PERIOD
    if (
        health.health_score < 70
        or health.emergency_fund_months_covered < 4.5
        or total_debt > monthly_income * 3
    ):
        return MODERATE_PERIOD
    return STANDARD_PERIOD


def _contribution(amount: int, monthly_income: float) -> PresetValue:
    return PresetValue(amount=amount, percentage=percent_of(amount, monthly_income))


def duration_options(
    essential_monthly_spend: float,
    current_balance: float,
    income_stability: IncomeStability,
    monthly_income: float,
) -> List[EmergencyFundDurationOption]:
    """
    Build the 3 / 6 / 12 month alternatives.

    Each option carries low / recommended / high monthly contributions that
    close its shortfall in 24, 12-or-18, and 8 months. The recommended tier
    uses 12 months when more than half the target is still missing, 18
    otherwise.
    """
    recommended_months = target_months_for(income_stability)
    options = []

    for months in DURATION_OPTION_MONTHS:
        target = round_half_up(essential_monthly_spend * months)
        shortfall = max(0.0, target - current_balance)

        if shortfall > 0:
            recommended_period = AGGRESSIVE_PERIOD if shortfall > target * 0.5 else MODERATE_PERIOD
            low = round_half_up(shortfall / LOW_TIER_PERIOD)
            recommended = round_half_up(shortfall / recommended_period)
            high = round_half_up(shortfall / HIGH_TIER_PERIOD)
        else:
            low = recommended = high = 0

        options.append(
            EmergencyFundDurationOption(
                months=months,
                target_amount=target,
                shortfall=shortfall,
                monthly_contribution=PresetOptions(
                    low=_contribution(low, monthly_income),
                    recommended=_contribution(recommended, monthly_income),
                    high=_contribution(high, monthly_income),
                ),
                is_recommended=months == recommended_months,
            )
        )

    return options


def plan_emergency_fund(
    essential_monthly_spend: float,
    current_balance: float,
    income_stability: IncomeStability,
    monthly_income: float,
    health_metrics: HealthMetrics | None = None,
    total_debt: float = 0.0,
) -> EmergencyFundPlan:
    """
    Size the emergency fund and the monthly contribution toward it.

    Requirements:
    - Target = essential spending x 6/9/12 months by income stability
    - Monthly contribution = target / health-aware savings period
    - Nothing to contribute once the balance covers the target

    Raises:
        InvalidInputError: negative spending or balance
    """
    if essential_monthly_spend < 0:
        raise InvalidInputError("Essential monthly spending must be non-negative")
    if current_balance < 0:
        raise InvalidInputError("Emergency fund balance must be non-negative")

    if health_metrics is None:
        health_metrics = HealthMetrics.default()

    target_months = target_months_for(income_stability)
    target = round_half_up(essential_monthly_spend * target_months)
    shortfall = max(0.0, target - current_balance)
    period = savings_period_months(health_metrics, total_debt, monthly_income)

    monthly_contribution = round_half_up(target / period) if shortfall > 0 else 0

    months_to_target = 0
    if shortfall > 0 and monthly_contribution > 0:
        months_to_target = math.ceil(shortfall / monthly_contribution)

    logger.debug(
        "Emergency fund planned",
        extra={
            "target_amount": target,
            "shortfall": shortfall,
            "savings_period_months": period,
            "monthly_contribution": monthly_contribution,
        },
    )

    return EmergencyFundPlan(
        target_months=target_months,
        target_amount=target,
        current_balance=current_balance,
        shortfall=shortfall,
        savings_period_months=period,
        monthly_contribution=monthly_contribution,
        months_to_target=months_to_target,
        duration_options=duration_options(
            essential_monthly_spend, current_balance, income_stability, monthly_income
        ),
    )
