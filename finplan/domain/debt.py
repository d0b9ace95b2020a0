"""Debt amortization and payoff timelines"""

from typing import Tuple

from finplan.domain.exceptions import InvalidInputError
from finplan.domain.models import PayoffResult
from finplan.utils.rounding import round_half_up

DEFAULT_APR = 0.18  # placeholder when no account reports an APR
MAX_PAYOFF_MONTHS = 600  # 50 years

# Card-issuer style minimum used as the comparison baseline
BASELINE_MINIMUM_RATE = 0.03
BASELINE_MINIMUM_FLOOR = 25.0


def _amortize(balance: float, payment: float, monthly_rate: float) -> Tuple[int, float, bool]:
    """
    Run the payment against the balance month by month.

    Returns (months, interest_paid, amortizes). amortizes is False when a
    month's interest meets or exceeds the payment, or when the balance is
    still open after MAX_PAYOFF_MONTHS; months and interest then reflect
    the point where the loop stopped.
    """
    months = 0
    total_interest = 0.0

    while balance > 0 and months < MAX_PAYOFF_MONTHS:
        interest = balance * monthly_rate
        principal = payment - interest
        if principal <= 0:
            return months, total_interest, False
        total_interest += interest
        balance -= principal
        months += 1

    return months, total_interest, balance <= 0


def baseline_minimum_payment(total_debt: float) -> float:
    """3% of the balance, never less than $25"""
    return max(total_debt * BASELINE_MINIMUM_RATE, BASELINE_MINIMUM_FLOOR)


def calculate_debt_payoff(
    total_debt: float,
    monthly_payment: float,
    apr: float | None = None,
) -> PayoffResult:
    """
    Amortize a debt balance under a fixed monthly payment.

    Requirements:
    - Interest accrues monthly at apr / 12 (apr defaults to 18%)
    - Capped at 600 months; a payment that never covers interest returns
      the capped sentinel instead of looping forever. The sentinel reports
      600 payments as total_paid; interest_paid is the interest accrued over
      those months, or every payment when none reached principal
    - interest_saved compares against the minimum-payment baseline
      (max(3% of balance, $25)) and is never negative

    Example:
        $5,000 at 18% paying $500/month -> 11 months, ~$458 interest
    """
    if total_debt < 0 or monthly_payment < 0:
        raise InvalidInputError("Debt balance and monthly payment must be non-negative")
    if apr is None:
        apr = DEFAULT_APR
    if apr < 0:
        raise InvalidInputError(f"APR must be non-negative, got {apr}")

    if total_debt == 0 or monthly_payment == 0:
        return PayoffResult(months=0, total_paid=0, interest_paid=0, interest_saved=0)

    monthly_rate = apr / 12

    months, interest, amortizes = _amortize(total_debt, monthly_payment, monthly_rate)
    if not amortizes:
        total_paid = monthly_payment * MAX_PAYOFF_MONTHS
        if months < MAX_PAYOFF_MONTHS:
            # Payment never covered a month of interest: all of it is interest
            interest = total_paid
        return PayoffResult(
            months=MAX_PAYOFF_MONTHS,
            total_paid=round_half_up(total_paid),
            interest_paid=max(0, round_half_up(interest)),
            interest_saved=0,
            capped=True,
        )

    # Baseline stops early when the minimum can't cover interest; whatever
    # interest it accrued until then is the comparison point
    _, baseline_interest, _ = _amortize(
        total_debt, baseline_minimum_payment(total_debt), monthly_rate
    )
    interest_saved = max(0.0, baseline_interest - interest)

    return PayoffResult(
        months=months,
        total_paid=round_half_up(total_debt + interest),
        interest_paid=round_half_up(interest),
        interest_saved=round_half_up(interest_saved),
    )
