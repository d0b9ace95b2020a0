"""Financial summary aggregation over a trailing window of transactions"""

from datetime import date
from typing import Iterable, List

from finplan.domain.categorizer import categorize, categorize_expenses
from finplan.domain.debt import DEFAULT_APR
from finplan.domain.exceptions import InvalidInputError
from finplan.domain.models import (
    Account,
    AnalysisMetadata,
    AnalysisSnapshot,
    BucketCategory,
    FinancialPosition,
    FinancialSummary,
    MonthlyFlow,
    Transaction,
)
from finplan.utils.date_utils import months_between, subtract_months

DEFAULT_WINDOW_MONTHS = 6

# Estimated minimum payment as a share of balance when the lender doesn't report one
CREDIT_MINIMUM_RATE = 0.025
CREDIT_MINIMUM_FLOOR = 25.0
LOAN_MINIMUM_RATES = (
    ("student", 0.01),
    ("auto", 0.018),
    ("mortgage", 0.005),
)
DEFAULT_LOAN_MINIMUM_RATE = 0.015


def filter_window(
    transactions: Iterable[Transaction], as_of: date, window_months: int
) -> List[Transaction]:
    """Keep transactions dated on or after as_of minus window_months"""
    start = subtract_months(as_of, window_months)
    return [txn for txn in transactions if txn.date >= start]


def summarize(
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    as_of: date | None = None,
    window_months: int = DEFAULT_WINDOW_MONTHS,
) -> FinancialSummary:
    """
    Aggregate monthly averages and balances.

    Requirements:
    - Trailing window (default 6 months) ending at as_of
    - Months analyzed = whole months spanned by the window's transactions, at least 1
    - Debt payments and investment transfers count as monthly spending
    - Pending transactions never count

    Returns zero totals with months_analyzed = 1 for empty input.
    """
    if window_months < 1:
        raise InvalidInputError(f"window_months must be at least 1, got {window_months}")

    if as_of is None:
        as_of = date.today()

    windowed = filter_window(transactions, as_of, window_months)
    accounts = list(accounts)

    if windowed:
        start_date = min(txn.date for txn in windowed)
        end_date = max(txn.date for txn in windowed)
    else:
        start_date = end_date = as_of

    months_analyzed = max(months_between(start_date, end_date), 1)

    income_total = 0.0
    spending_total = 0.0
    invested_total = 0.0

    for txn in windowed:
        if txn.pending:
            continue
        bucket = categorize(txn)
        if bucket == BucketCategory.INCOME:
            income_total += abs(txn.amount)
        elif bucket in (BucketCategory.EXPENSES, BucketCategory.DEBT, BucketCategory.INVESTED):
            spending_total += txn.amount
            if bucket == BucketCategory.INVESTED:
                invested_total += txn.amount

    return FinancialSummary(
        avg_monthly_income=income_total / months_analyzed,
        avg_monthly_expenses=spending_total / months_analyzed,
        monthly_investment_contributions=invested_total / months_analyzed,
        total_debt=sum(a.current_balance or 0.0 for a in accounts if a.is_debt),
        total_invested=sum(a.current_balance or 0.0 for a in accounts if a.is_investment),
        total_cash_available=sum(_cash_balance(a) for a in accounts if a.is_depository),
        months_analyzed=months_analyzed,
        total_transactions=len(windowed),
        analysis_start_date=start_date,
        analysis_end_date=end_date,
    )


def _cash_balance(account: Account) -> float:
    if account.available_balance is not None:
        return account.available_balance
    return account.current_balance or 0.0


def estimate_minimum_payment(account: Account) -> float:
    """
    Monthly minimum payment for a debt account.

    Uses the lender-reported minimum when present, otherwise estimates from
    the balance: credit cards 2.5% with a $25 floor, loans by subtype
    (student 1%, auto 1.8%, mortgage 0.5%, other 1.5%).
    """
    if not account.is_debt:
        return 0.0
    if account.minimum_payment is not None:
        return account.minimum_payment

    balance = abs(account.current_balance or 0.0)
    if balance <= 0:
        return 0.0

    if account.is_credit:
        return max(CREDIT_MINIMUM_FLOOR, balance * CREDIT_MINIMUM_RATE)

    subtype = (account.subtype or "").lower()
    for keyword, rate in LOAN_MINIMUM_RATES:
        if keyword in subtype:
            return balance * rate
    return balance * DEFAULT_LOAN_MINIMUM_RATE


def calculate_debt_minimums(accounts: Iterable[Account]) -> float:
    """Total estimated minimum payments across credit and loan accounts"""
    return sum(estimate_minimum_payment(a) for a in accounts if a.is_debt)


def weighted_average_apr(accounts: Iterable[Account], default: float = DEFAULT_APR) -> float:
    """Balance-weighted APR over debt accounts that report one; default when none do"""
    weighted = 0.0
    balance_total = 0.0
    for account in accounts:
        if not account.is_debt or account.apr is None:
            continue
        balance = abs(account.current_balance or 0.0)
        weighted += account.apr * balance
        balance_total += balance
    if balance_total <= 0:
        return default
    return weighted / balance_total


def build_snapshot(
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    as_of: date | None = None,
    window_months: int = DEFAULT_WINDOW_MONTHS,
) -> AnalysisSnapshot:
    """
    Combine summary, expense breakdown and debt minimums into one snapshot.

    The breakdown is averaged over the same months_analyzed as the summary.
    """
    if as_of is None:
        as_of = date.today()

    transactions = list(transactions)
    accounts = list(accounts)

    summary = summarize(transactions, accounts, as_of=as_of, window_months=window_months)
    windowed = filter_window(transactions, as_of, window_months)
    breakdown = categorize_expenses(windowed, summary.months_analyzed)

    flow = MonthlyFlow.from_breakdown(
        income=summary.avg_monthly_income,
        expense_breakdown=breakdown,
        debt_minimums=calculate_debt_minimums(accounts),
    )
    position = FinancialPosition(
        emergency_cash=summary.total_cash_available,
        total_debt=summary.total_debt,
        investment_balances=summary.total_invested,
        monthly_investment_contributions=summary.monthly_investment_contributions,
    )
    metadata = AnalysisMetadata(
        months_analyzed=summary.months_analyzed,
        accounts_connected=len(accounts),
        transactions_analyzed=summary.total_transactions,
        transactions_needing_validation=sum(
            1 for txn in windowed if not txn.pending and txn.needs_validation
        ),
    )
    return AnalysisSnapshot(monthly_flow=flow, position=position, metadata=metadata)
