"""Allocation engine - splits monthly income across virtual budget buckets"""

import logging
import math
from typing import Dict, List, Mapping, Tuple, Union

from finplan.domain.debt import calculate_debt_payoff, DEFAULT_APR
from finplan.domain.emergency_fund import plan_emergency_fund
from finplan.domain.exceptions import InvalidInputError
from finplan.domain.models import (
    AccountBalances,
    AllocationBucket,
    AllocationBucketType,
    AllocationPlan,
    DebtPayoffTimeline,
    ExpenseBreakdown,
    HealthMetrics,
    PresetOptions,
    PresetValue,
)
from finplan.domain.projections import calculate_investment_projections, DEFAULT_ANNUAL_RETURN
from finplan.utils.rounding import percent_of, round_half_up

logger = logging.getLogger(__name__)

# 50/30/20 starting point; emergency fund is sized separately
BASELINE_ESSENTIAL_PCT = 50
BASELINE_DISCRETIONARY_PCT = 20
BASELINE_INVESTMENT_PCT = 15
SPENDING_CEILING_PCT = 70  # essential + discretionary; the rest is savings and debt headroom

DEBT_INCLUSION_THRESHOLD = 1000.0
DEBT_PAYDOWN_PCT = 15

# Share of total expenses assumed essential when no category data is available
ESSENTIAL_SHARE_OF_EXPENSES = 0.6

# (low, high) preset percentages; recommended is computed
DISCRETIONARY_PRESET_RANGE = (10, 20)
INVESTMENT_PRESET_RANGE = (5, 15)
DEBT_PRESETS = (10, DEBT_PAYDOWN_PCT, 20)

ESSENTIAL_CATEGORIES = (
    "Groceries",
    "Rent",
    "Mortgage",
    "Utilities",
    "Transportation",
    "Insurance",
    "Healthcare",
    "Childcare",
    "Housing",
    "Food",
)
DISCRETIONARY_CATEGORIES = (
    "Entertainment",
    "Dining",
    "Shopping",
    "Travel",
    "Subscriptions",
    "Hobbies",
)

_ESSENTIAL_LOOKUP = {name.lower() for name in ESSENTIAL_CATEGORIES}
_DISCRETIONARY_LOOKUP = {name.lower() for name in DISCRETIONARY_CATEGORIES}

CategoryBreakdown = Union[Mapping[str, float], ExpenseBreakdown]


def calculate_preset_options(
    monthly_income: float, low_pct: float, recommended_pct: float, high_pct: float
) -> PresetOptions:
    """Dollar amounts for low / recommended / high percentages of income"""
    return PresetOptions(
        low=PresetValue(amount=round_half_up(monthly_income * low_pct / 100), percentage=low_pct),
        recommended=PresetValue(
            amount=round_half_up(monthly_income * recommended_pct / 100), percentage=recommended_pct
        ),
        high=PresetValue(amount=round_half_up(monthly_income * high_pct / 100), percentage=high_pct),
    )


def split_category_spending(
    category_breakdown: CategoryBreakdown | None,
) -> Tuple[float, float, List[str], List[str]]:
    """
    Sum observed spending into essential and discretionary.

    Category names match case-insensitively; names in neither list are ignored.
    Returns (essential_total, discretionary_total, essential_names, discretionary_names).
    """
    if category_breakdown is None:
        return 0.0, 0.0, [], []
    if isinstance(category_breakdown, ExpenseBreakdown):
        category_breakdown = category_breakdown.as_category_totals()

    essential = 0.0
    discretionary = 0.0
    essential_names: List[str] = []
    discretionary_names: List[str] = []

    for name, amount in category_breakdown.items():
        key = name.strip().lower()
        if key in _ESSENTIAL_LOOKUP:
            essential += amount
            if amount > 0:
                essential_names.append(name)
        elif key in _DISCRETIONARY_LOOKUP:
            discretionary += amount
            if amount > 0:
                discretionary_names.append(name)

    return essential, discretionary, essential_names, discretionary_names


def spending_percentages(essential_spending: float, discretionary_spending: float) -> Tuple[int, int]:
    """
    Blend the 50/20 baseline with the observed essential-vs-discretionary ratio.

    Only applies when both totals are positive. The pair never exceeds 70%:
    when rounding pushes it over, both are scaled back and discretionary takes
    whatever essential leaves of the 70.
    """
    if essential_spending <= 0 or discretionary_spending <= 0:
        return BASELINE_ESSENTIAL_PCT, BASELINE_DISCRETIONARY_PCT

    ratio = essential_spending / (essential_spending + discretionary_spending)
    essential_pct = round_half_up(0.5 * BASELINE_ESSENTIAL_PCT + 0.5 * ratio * SPENDING_CEILING_PCT)
    discretionary_pct = round_half_up(
        0.5 * BASELINE_DISCRETIONARY_PCT + 0.5 * (1 - ratio) * SPENDING_CEILING_PCT
    )

    spending_total = essential_pct + discretionary_pct
    if spending_total > SPENDING_CEILING_PCT:
        essential_pct = round_half_up(essential_pct * SPENDING_CEILING_PCT / spending_total)
        discretionary_pct = SPENDING_CEILING_PCT - essential_pct

    return essential_pct, discretionary_pct


def _validate_inputs(
    monthly_income: float, monthly_expenses: float, current_savings: float, total_debt: float
) -> int:
    if monthly_income is None or not math.isfinite(monthly_income) or monthly_income <= 0:
        raise InvalidInputError("monthly_income must be a positive number")
    income = round_half_up(monthly_income)
    if income <= 0:
        raise InvalidInputError("monthly_income must be at least one whole dollar")

    for label, value in (
        ("monthly_expenses", monthly_expenses),
        ("current_savings", current_savings),
        ("total_debt", total_debt),
    ):
        if not math.isfinite(value) or value < 0:
            raise InvalidInputError(f"{label} must be a non-negative number")

    return income


def allocate(
    monthly_income: float,
    monthly_expenses: float = 0.0,
    current_savings: float = 0.0,
    total_debt: float = 0.0,
    category_breakdown: CategoryBreakdown | None = None,
    health_metrics: HealthMetrics | None = None,
    account_balances: AccountBalances | None = None,
    debt_apr: float | None = None,
    annual_return: float = DEFAULT_ANNUAL_RETURN,
) -> AllocationPlan:
    """
    Build the recommended monthly allocation plan.

    Flow:
    1. Start from 50 essential / 20 discretionary / 15 investment
    2. Blend essential/discretionary with observed spending ratio
    3. Include debt paydown (15%) when debt exceeds $1,000, taken out of discretionary
    4. Size the emergency fund contribution from the health-aware savings period
    5. Reconcile rounding so bucket amounts sum exactly to income
    6. Attach presets, investment projection and debt payoff timelines

    Income is planned in whole dollars. Rounding drift goes entirely to the
    largest of emergency / discretionary / investment (ties in that order);
    essential and debt amounts are never touched.

    Raises:
        InvalidInputError: non-positive income or negative amounts
    """
    income = _validate_inputs(monthly_income, monthly_expenses, current_savings, total_debt)

    if health_metrics is None:
        health_metrics = HealthMetrics.default()
    balances = account_balances or AccountBalances()

    emergency_balance = balances.emergency if balances.emergency is not None else current_savings
    debt_balance = balances.debt if balances.debt is not None else total_debt
    investment_balance = balances.investments or 0.0

    essential_spending, discretionary_spending, essential_names, discretionary_names = (
        split_category_spending(category_breakdown)
    )
    essential_pct, discretionary_pct = spending_percentages(essential_spending, discretionary_spending)
    investment_pct = BASELINE_INVESTMENT_PCT

    essential_base = (
        essential_spending if essential_spending > 0 else monthly_expenses * ESSENTIAL_SHARE_OF_EXPENSES
    )
    emergency_plan = plan_emergency_fund(
        essential_monthly_spend=essential_base,
        current_balance=emergency_balance,
        income_stability=health_metrics.income_stability,
        monthly_income=income,
        health_metrics=health_metrics,
        total_debt=debt_balance,
    )

    include_debt = debt_balance > DEBT_INCLUSION_THRESHOLD
    debt_amount = round_half_up(income * DEBT_PAYDOWN_PCT / 100) if include_debt else 0

    essential_amount = round_half_up(income * essential_pct / 100)
    discretionary_amount = round_half_up(income * discretionary_pct / 100)
    investment_amount = round_half_up(income * investment_pct / 100)
    emergency_amount = emergency_plan.monthly_contribution

    if include_debt:
        # Debt takes priority over discretionary spending
        discretionary_amount = max(0, discretionary_amount - debt_amount)

    rounding_adjustment = income - (
        essential_amount + emergency_amount + discretionary_amount + investment_amount + debt_amount
    )

    adjustable: Dict[AllocationBucketType, int] = {
        AllocationBucketType.EMERGENCY_FUND: emergency_amount,
        AllocationBucketType.DISCRETIONARY_SPENDING: discretionary_amount,
        AllocationBucketType.INVESTMENTS: investment_amount,
    }
    # Strict > keeps the earlier bucket on ties
    largest = AllocationBucketType.EMERGENCY_FUND
    for bucket_type, amount in adjustable.items():
        if amount > adjustable[largest]:
            largest = bucket_type
    adjustable[largest] += rounding_adjustment

    logger.debug(
        "Applied rounding adjustment",
        extra={"rounding_adjustment": rounding_adjustment, "bucket": largest.value},
    )

    emergency_amount = adjustable[AllocationBucketType.EMERGENCY_FUND]
    discretionary_amount = adjustable[AllocationBucketType.DISCRETIONARY_SPENDING]
    investment_amount = adjustable[AllocationBucketType.INVESTMENTS]

    buckets = [
        AllocationBucket(
            type=AllocationBucketType.ESSENTIAL_SPENDING,
            amount=essential_amount,
            percentage=essential_pct,
            current_balance=balances.essential or 0.0,
            categories=essential_names or list(ESSENTIAL_CATEGORIES),
        ),
        AllocationBucket(
            type=AllocationBucketType.EMERGENCY_FUND,
            amount=emergency_amount,
            percentage=percent_of(emergency_amount, income),
            current_balance=emergency_balance,
            target_amount=emergency_plan.target_amount,
            months_to_target=emergency_plan.months_to_target,
            duration_options=emergency_plan.duration_options,
        ),
        AllocationBucket(
            type=AllocationBucketType.DISCRETIONARY_SPENDING,
            amount=discretionary_amount,
            percentage=percent_of(discretionary_amount, income),
            current_balance=balances.discretionary or 0.0,
            categories=discretionary_names or list(DISCRETIONARY_CATEGORIES),
            preset_options=calculate_preset_options(
                income, DISCRETIONARY_PRESET_RANGE[0], discretionary_pct, DISCRETIONARY_PRESET_RANGE[1]
            ),
        ),
        AllocationBucket(
            type=AllocationBucketType.INVESTMENTS,
            amount=investment_amount,
            percentage=investment_pct,
            current_balance=investment_balance,
            preset_options=calculate_preset_options(
                income, INVESTMENT_PRESET_RANGE[0], investment_pct, INVESTMENT_PRESET_RANGE[1]
            ),
            projection=calculate_investment_projections(
                investment_balance,
                income,
                INVESTMENT_PRESET_RANGE[0],
                investment_pct,
                INVESTMENT_PRESET_RANGE[1],
                annual_return=annual_return,
            ),
        ),
    ]

    if include_debt:
        buckets.append(_debt_bucket(income, debt_amount, debt_balance, debt_apr))

    based_on = (
        "50/30/20 rule adjusted for emergency fund priority"
        if emergency_plan.shortfall > 0
        else "50/30/20 rule adjusted for your spending patterns"
    )

    return AllocationPlan(
        monthly_income=income,
        buckets=buckets,
        emergency_fund=emergency_plan,
        rounding_adjustment=rounding_adjustment,
        based_on=based_on,
    )


def _debt_bucket(income: int, debt_amount: int, debt_balance: float, debt_apr: float | None) -> AllocationBucket:
    apr = DEFAULT_APR if debt_apr is None else debt_apr
    presets = calculate_preset_options(income, *DEBT_PRESETS)

    timeline = DebtPayoffTimeline(
        low=calculate_debt_payoff(debt_balance, presets.low.amount, apr),
        recommended=calculate_debt_payoff(debt_balance, debt_amount, apr),
        high=calculate_debt_payoff(debt_balance, presets.high.amount, apr),
    )

    return AllocationBucket(
        type=AllocationBucketType.DEBT_PAYDOWN,
        amount=debt_amount,
        percentage=percent_of(debt_amount, income),
        current_balance=debt_balance,
        preset_options=presets,
        total_debt=debt_balance,
        average_apr=apr * 100,
        payoff_timeline=timeline,
    )
