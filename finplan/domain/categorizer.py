"""Transaction categorization - bucket assignment and detailed expense breakdown"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional

from finplan.domain.exceptions import InvalidInputError
from finplan.domain.models import (
    Account,
    BucketCategory,
    ExpenseBreakdown,
    EXPENSE_CATEGORY_FIELDS,
    PersonalFinanceCategory,
    Transaction,
)
from finplan.utils.date_utils import month_start

# Primary codes that describe ordinary spending
SPENDING_PRIMARIES = {
    "BANK_FEES",
    "RENT_AND_UTILITIES",
    "FOOD_AND_DRINK",
    "GENERAL_MERCHANDISE",
    "HOME_IMPROVEMENT",
    "MEDICAL",
    "PERSONAL_CARE",
    "GENERAL_SERVICES",
    "GOVERNMENT_AND_NON_PROFIT",
    "TRANSPORTATION",
    "TRAVEL",
    "ENTERTAINMENT",
}

# Money movement rather than consumption; never part of the expense breakdown
NON_EXPENSE_PRIMARIES = {"INCOME", "TRANSFER_IN", "TRANSFER_OUT", "LOAN_PAYMENTS"}

DEBT_KEYWORDS = ("credit card", "loan payments", "mortgage")
INVESTMENT_TRANSFER_KEYWORDS = ("investment", "brokerage", "retirement")

# Tag keywords for transactions that arrive without a personal finance category.
# Checked in order; first hit wins.
LEGACY_CATEGORY_KEYWORDS = (
    ("subscriptions", ("subscription", "streaming", "membership")),
    ("housing", ("rent", "housing")),
    ("utilities", ("utilities", "electric", "water", "internet", "telecommunication")),
    ("food", ("food", "groceries", "restaurant", "coffee")),
    ("transportation", ("transportation", "travel", "gas station", "taxi", "airlines", "parking")),
    ("insurance", ("insurance",)),
    ("healthcare", ("healthcare", "medical", "pharmac", "dentist", "doctor")),
)


def categorize(transaction: Transaction) -> BucketCategory:
    """
    Assign a transaction to one high-level bucket.

    Order of precedence:
    1. User correction - always authoritative, even over a VERY_HIGH category
    2. Personal finance category (primary/detailed codes)
    3. Keyword rules on the legacy category tags

    Never raises; anything unmatched is an expense.
    """
    if transaction.user_corrected_category is not None:
        return transaction.user_corrected_category

    pfc = transaction.personal_finance_category
    if pfc is not None:
        return _bucket_from_pfc(pfc, transaction.amount)

    return _bucket_from_tags(transaction.amount, transaction.category)


def _bucket_from_pfc(pfc: PersonalFinanceCategory, amount: float) -> BucketCategory:
    primary = pfc.primary.upper()
    detailed = pfc.detailed.upper()

    if primary == "INCOME":
        return BucketCategory.INCOME

    if primary == "TRANSFER_IN":
        # Between the user's own accounts
        if "ACCOUNT" in detailed:
            return BucketCategory.CASH
        return BucketCategory.INCOME

    if primary == "TRANSFER_OUT":
        if any(word in detailed for word in ("INVESTMENT", "RETIREMENT", "SAVINGS")):
            return BucketCategory.INVESTED
        if "LOAN" in detailed or "CREDIT" in detailed:
            return BucketCategory.DEBT
        return BucketCategory.EXPENSES

    if primary == "LOAN_PAYMENTS":
        return BucketCategory.DEBT

    if primary in SPENDING_PRIMARIES:
        return BucketCategory.EXPENSES

    return BucketCategory.INCOME if amount < 0 else BucketCategory.EXPENSES


def _bucket_from_tags(amount: float, tags: Iterable[str]) -> BucketCategory:
    # Inflows are negative
    if amount < 0:
        return BucketCategory.INCOME

    primary = next(iter(tags), "").lower()

    if any(keyword in primary for keyword in DEBT_KEYWORDS):
        return BucketCategory.DEBT

    if "transfer" in primary and any(k in primary for k in INVESTMENT_TRANSFER_KEYWORDS):
        return BucketCategory.INVESTED

    return BucketCategory.EXPENSES


def expense_category_for(transaction: Transaction) -> Optional[str]:
    """
    Map an expense transaction to one of the eight breakdown categories.

    Returns None for transactions outside the breakdown: anything not in the
    expenses bucket, and automatically classified money movement (income,
    transfers, loan payments). A user correction to expenses always counts.
    """
    bucket = categorize(transaction)
    if bucket != BucketCategory.EXPENSES:
        return None

    user_says_expense = transaction.user_corrected_category == BucketCategory.EXPENSES
    pfc = transaction.personal_finance_category

    if pfc is not None:
        primary = pfc.primary.upper()
        if primary in NON_EXPENSE_PRIMARIES:
            return "other" if user_says_expense else None
        return _category_from_pfc(primary, _detail_suffix(primary, pfc.detailed.upper()))

    return _category_from_tags(transaction.category)


def _detail_suffix(primary: str, detailed: str) -> str:
    """Strip the primary prefix: RENT_AND_UTILITIES_RENT -> RENT"""
    prefix = primary + "_"
    if detailed.startswith(prefix):
        return detailed[len(prefix):]
    return detailed


def _category_from_pfc(primary: str, detail: str) -> str:
    if primary == "RENT_AND_UTILITIES":
        return "housing" if detail == "RENT" else "utilities"
    if primary == "FOOD_AND_DRINK":
        return "food"
    if primary in ("TRANSPORTATION", "TRAVEL"):
        return "transportation"
    if primary == "ENTERTAINMENT" and ("STREAMING" in detail or "SUBSCRIPTION" in detail):
        return "subscriptions"
    if primary == "GENERAL_SERVICES":
        if "MEMBERSHIP" in detail or "SUBSCRIPTION" in detail:
            return "subscriptions"
        if "INSURANCE" in detail:
            return "insurance"
    if primary == "MEDICAL":
        return "healthcare"
    if primary == "HOME_IMPROVEMENT" and ("MORTGAGE" in detail or "RENT" in detail):
        return "housing"
    return "other"


def _category_from_tags(tags: Iterable[str]) -> str:
    text = " ".join(tags).lower()
    for category, keywords in LEGACY_CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return "other"


def categorize_expenses(transactions: Iterable[Transaction], months: int) -> ExpenseBreakdown:
    """
    Build the monthly-average expense breakdown.

    Confidence is the share of categorized transactions whose category came
    with HIGH or VERY_HIGH confidence; 0 when nothing was categorized.

    Raises:
        InvalidInputError: months < 1 (callers clamp before calling)
    """
    if months < 1:
        raise InvalidInputError(f"months must be at least 1, got {months}")

    totals: Dict[str, float] = {name: 0.0 for name in EXPENSE_CATEGORY_FIELDS}
    counted = 0
    high_confidence = 0

    for txn in transactions:
        if txn.pending:
            continue
        category = expense_category_for(txn)
        if category is None:
            continue
        totals[category] += txn.amount
        counted += 1
        if txn.confidence_level.is_high:
            high_confidence += 1

    if counted == 0:
        return ExpenseBreakdown.empty()

    return ExpenseBreakdown(
        **{name: amount / months for name, amount in totals.items()},
        confidence=high_confidence / counted,
    )


def expenses_by_category(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """Raw expense totals keyed by each transaction's first category tag"""
    breakdown: Dict[str, float] = defaultdict(float)
    for txn in transactions:
        if categorize(txn) != BucketCategory.EXPENSES:
            continue
        name = txn.category[0] if txn.category else "Uncategorized"
        breakdown[name] += txn.amount
    return dict(breakdown)


def transactions_for_bucket(bucket: BucketCategory, transactions: Iterable[Transaction]) -> List[Transaction]:
    return [txn for txn in transactions if categorize(txn) == bucket]


def top_contributors(
    bucket: BucketCategory, transactions: Iterable[Transaction], limit: int = 10
) -> List[Transaction]:
    """Largest transactions in a bucket; income is ranked by absolute amount"""
    matching = transactions_for_bucket(bucket, transactions)
    if bucket == BucketCategory.INCOME:
        key = lambda txn: abs(txn.amount)
    else:
        key = lambda txn: txn.amount
    return sorted(matching, key=key, reverse=True)[:limit]


def monthly_trends(transactions: Iterable[Transaction], bucket: BucketCategory) -> Dict[date, float]:
    """Per-month bucket totals keyed by the first day of each month"""
    trends: Dict[date, float] = defaultdict(float)
    for txn in transactions_for_bucket(bucket, transactions):
        amount = abs(txn.amount) if bucket == BucketCategory.INCOME else txn.amount
        trends[month_start(txn.date)] += amount
    return dict(sorted(trends.items()))


def contributing_accounts(bucket: BucketCategory, accounts: Iterable[Account]) -> List[Account]:
    """Accounts whose balances feed a balance-type bucket"""
    if bucket == BucketCategory.DEBT:
        return [a for a in accounts if a.is_debt]
    if bucket == BucketCategory.INVESTED:
        return [a for a in accounts if a.is_investment]
    if bucket == BucketCategory.CASH:
        return [a for a in accounts if a.is_depository]
    return []
