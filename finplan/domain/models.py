"""Domain models - pure Python dataclasses representing business entities"""

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Tuple


class BucketCategory(str, Enum):
    """High-level bucket every transaction and balance rolls up into"""

    INCOME = "income"
    EXPENSES = "expenses"
    DEBT = "debt"
    INVESTED = "invested"
    CASH = "cash"
    DISPOSABLE = "disposable"


class ConfidenceLevel(str, Enum):
    """Bank-provided confidence in a transaction's personal finance category"""

    UNKNOWN = "UNKNOWN"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"

    @property
    def is_high(self) -> bool:
        return self in (ConfidenceLevel.HIGH, ConfidenceLevel.VERY_HIGH)

    @property
    def needs_validation(self) -> bool:
        # MEDIUM is still right most of the time
        return self in (ConfidenceLevel.LOW, ConfidenceLevel.UNKNOWN)


class IncomeStability(str, Enum):
    """Income consistency class; drives emergency fund sizing"""

    STABLE = "stable"
    VARIABLE = "variable"
    INCONSISTENT = "inconsistent"

    @property
    def recommended_emergency_months(self) -> int:
        return {
            IncomeStability.STABLE: 6,
            IncomeStability.VARIABLE: 9,
            IncomeStability.INCONSISTENT: 12,
        }[self]


class PresetTier(str, Enum):
    LOW = "low"
    RECOMMENDED = "recommended"
    HIGH = "high"


class AllocationBucketType(str, Enum):
    """Virtual buckets a monthly income is split across"""

    ESSENTIAL_SPENDING = "essential_spending"
    EMERGENCY_FUND = "emergency_fund"
    DISCRETIONARY_SPENDING = "discretionary_spending"
    INVESTMENTS = "investments"
    DEBT_PAYDOWN = "debt_paydown"


# ---------------------------------------------------------------------------
# Inputs supplied by bank ingestion
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PersonalFinanceCategory:
    """Primary/detailed category pair, e.g. FOOD_AND_DRINK / FOOD_AND_DRINK_GROCERIES"""

    primary: str
    detailed: str
    confidence_level: ConfidenceLevel = ConfidenceLevel.UNKNOWN


@dataclass(frozen=True)
class Transaction:
    """Bank transaction. Positive amount = money out, negative = money in."""

    transaction_id: str
    account_id: str
    amount: float
    date: date
    name: str
    merchant_name: Optional[str] = None
    category: Tuple[str, ...] = ()
    category_id: Optional[str] = None
    pending: bool = False
    personal_finance_category: Optional[PersonalFinanceCategory] = None
    user_corrected_category: Optional[BucketCategory] = None
    user_validated: bool = False

    @property
    def confidence_level(self) -> ConfidenceLevel:
        if self.personal_finance_category is None:
            return ConfidenceLevel.UNKNOWN
        return self.personal_finance_category.confidence_level

    @property
    def needs_validation(self) -> bool:
        if self.user_validated:
            return False
        return self.confidence_level.needs_validation


@dataclass(frozen=True)
class Account:
    """Linked bank account with its latest balances"""

    account_id: str
    item_id: str
    name: str
    type: str  # depository | credit | loan | investment | brokerage
    subtype: Optional[str] = None
    current_balance: Optional[float] = None
    available_balance: Optional[float] = None
    limit: Optional[float] = None
    apr: Optional[float] = None
    minimum_payment: Optional[float] = None

    @property
    def is_depository(self) -> bool:
        return self.type == "depository"

    @property
    def is_credit(self) -> bool:
        return self.type == "credit"

    @property
    def is_loan(self) -> bool:
        return self.type == "loan"

    @property
    def is_investment(self) -> bool:
        return self.type in ("investment", "brokerage")

    @property
    def is_debt(self) -> bool:
        return self.is_credit or self.is_loan


@dataclass(frozen=True)
class HealthMetrics:
    """Financial health snapshot computed outside the planners"""

    health_score: float
    savings_rate: float
    emergency_fund_months_covered: float
    debt_to_income_ratio: float
    income_stability: IncomeStability

    @classmethod
    def default(cls) -> "HealthMetrics":
        """Neutral metrics used before the user has completed health setup"""
        return cls(
            health_score=50.0,
            savings_rate=0.0,
            emergency_fund_months_covered=0.0,
            debt_to_income_ratio=0.0,
            income_stability=IncomeStability.VARIABLE,
        )


@dataclass(frozen=True)
class AccountBalances:
    """Balances of accounts the user has tagged to each allocation bucket"""

    emergency: Optional[float] = None
    investments: Optional[float] = None
    discretionary: Optional[float] = None
    essential: Optional[float] = None
    debt: Optional[float] = None


# ---------------------------------------------------------------------------
# Categorization and aggregation outputs
# ---------------------------------------------------------------------------


EXPENSE_CATEGORY_FIELDS = (
    "housing",
    "food",
    "transportation",
    "utilities",
    "insurance",
    "subscriptions",
    "healthcare",
    "other",
)


@dataclass(frozen=True)
class ExpenseBreakdown:
    """Monthly average spending across eight expense categories"""

    housing: float = 0.0
    food: float = 0.0
    transportation: float = 0.0
    utilities: float = 0.0
    insurance: float = 0.0
    subscriptions: float = 0.0
    healthcare: float = 0.0
    other: float = 0.0
    confidence: float = 0.0  # share of high/very-high confidence transactions

    @property
    def total(self) -> float:
        return sum(getattr(self, name) for name in EXPENSE_CATEGORY_FIELDS)

    def categories(self) -> List[Tuple[str, float]]:
        """Non-zero categories in display order"""
        return [
            (name, getattr(self, name))
            for name in EXPENSE_CATEGORY_FIELDS
            if getattr(self, name) > 0
        ]

    def as_category_totals(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in EXPENSE_CATEGORY_FIELDS}

    @property
    def confidence_level(self) -> str:
        if self.confidence >= 0.85:
            return "high"
        if self.confidence >= 0.70:
            return "medium"
        return "low"

    @classmethod
    def empty(cls) -> "ExpenseBreakdown":
        return cls()


@dataclass
class FinancialSummary:
    """Trailing-window averages and current balances"""

    avg_monthly_income: float = 0.0
    avg_monthly_expenses: float = 0.0
    monthly_investment_contributions: float = 0.0
    total_debt: float = 0.0
    total_invested: float = 0.0
    total_cash_available: float = 0.0
    months_analyzed: int = 1
    total_transactions: int = 0
    analysis_start_date: Optional[date] = None
    analysis_end_date: Optional[date] = None

    @property
    def net_monthly_income(self) -> float:
        """Signed income minus expenses; negative means a monthly shortfall"""
        return self.avg_monthly_income - self.avg_monthly_expenses

    @property
    def disposable_income(self) -> float:
        return max(0.0, self.net_monthly_income)

    @property
    def has_shortfall(self) -> bool:
        return self.net_monthly_income < 0

    @property
    def net_worth(self) -> float:
        return self.total_cash_available + self.total_invested - self.total_debt

    def bucket_value(self, bucket: BucketCategory) -> float:
        return {
            BucketCategory.INCOME: self.avg_monthly_income,
            BucketCategory.EXPENSES: self.avg_monthly_expenses,
            BucketCategory.DEBT: self.total_debt,
            BucketCategory.INVESTED: self.total_invested,
            BucketCategory.CASH: self.total_cash_available,
            BucketCategory.DISPOSABLE: self.disposable_income,
        }[bucket]


@dataclass(frozen=True)
class MonthlyFlow:
    """Average monthly cash flow: what comes in and what is already spoken for"""

    income: float
    essential_expenses: float
    debt_minimums: float
    expense_breakdown: Optional[ExpenseBreakdown] = None

    @classmethod
    def from_breakdown(
        cls, income: float, expense_breakdown: ExpenseBreakdown, debt_minimums: float
    ) -> "MonthlyFlow":
        return cls(
            income=income,
            essential_expenses=expense_breakdown.total,
            debt_minimums=debt_minimums,
            expense_breakdown=expense_breakdown,
        )

    @property
    def discretionary_income(self) -> float:
        return self.income - self.essential_expenses - self.debt_minimums

    @property
    def is_positive(self) -> bool:
        return self.discretionary_income > 0

    @property
    def has_detailed_breakdown(self) -> bool:
        return self.expense_breakdown is not None

    @property
    def essential_expenses_percentage(self) -> float:
        return self.essential_expenses / self.income * 100 if self.income > 0 else 0.0

    @property
    def debt_minimums_percentage(self) -> float:
        return self.debt_minimums / self.income * 100 if self.income > 0 else 0.0

    @property
    def discretionary_percentage(self) -> float:
        return self.discretionary_income / self.income * 100 if self.income > 0 else 0.0


@dataclass(frozen=True)
class FinancialPosition:
    """Point-in-time balances"""

    emergency_cash: float
    total_debt: float
    investment_balances: float
    monthly_investment_contributions: float

    def emergency_fund_months(self, monthly_expenses: float) -> float:
        if monthly_expenses <= 0:
            return 0.0
        return self.emergency_cash / monthly_expenses

    @property
    def net_worth(self) -> float:
        return self.emergency_cash + self.investment_balances - self.total_debt

    @property
    def has_debt(self) -> bool:
        return self.total_debt > 0

    @property
    def is_investing(self) -> bool:
        return self.monthly_investment_contributions > 0


@dataclass(frozen=True)
class AnalysisMetadata:
    months_analyzed: int
    accounts_connected: int
    transactions_analyzed: int
    transactions_needing_validation: int

    @property
    def needs_validation_review(self) -> bool:
        return self.transactions_needing_validation > 0


@dataclass(frozen=True)
class AnalysisSnapshot:
    """Flow + position + metadata, the input to plan creation"""

    monthly_flow: MonthlyFlow
    position: FinancialPosition
    metadata: AnalysisMetadata

    @property
    def discretionary_income(self) -> float:
        return self.monthly_flow.discretionary_income

    @property
    def is_ready_for_plan(self) -> bool:
        return self.monthly_flow.is_positive and self.metadata.transactions_analyzed > 0


# ---------------------------------------------------------------------------
# Planner outputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PresetValue:
    amount: int
    percentage: float


@dataclass(frozen=True)
class PresetOptions:
    """Low/recommended/high choices offered for an adjustable bucket"""

    low: PresetValue
    recommended: PresetValue
    high: PresetValue

    def value_for(self, tier: PresetTier) -> PresetValue:
        return getattr(self, tier.value)


@dataclass(frozen=True)
class EmergencyFundDurationOption:
    """Target sized to a fixed number of months of essential spending"""

    months: int
    target_amount: int
    shortfall: float
    monthly_contribution: PresetOptions
    is_recommended: bool

    @property
    def is_goal_met(self) -> bool:
        return self.shortfall <= 0

    def time_to_goal(self, tier: PresetTier) -> Optional[int]:
        contribution = self.monthly_contribution.value_for(tier).amount
        if contribution <= 0 or self.shortfall <= 0:
            return None
        return math.ceil(self.shortfall / contribution)


@dataclass(frozen=True)
class EmergencyFundPlan:
    target_months: int
    target_amount: int
    current_balance: float
    shortfall: float
    savings_period_months: int
    monthly_contribution: int
    months_to_target: int
    duration_options: List[EmergencyFundDurationOption] = field(default_factory=list)

    @property
    def is_on_track(self) -> bool:
        return self.shortfall <= 0


@dataclass(frozen=True)
class ProjectionTimeline:
    """Projected balance at each horizon for one contribution level"""

    monthly_contribution: float
    values: Dict[int, int]

    def value_at(self, years: int) -> int:
        return self.values.get(years, 0)

    def total_gain(self, years: int) -> float:
        if years not in self.values:
            return 0.0
        return self.values[years] - self.monthly_contribution * 12 * years

    def roi(self, years: int) -> float:
        contributed = self.monthly_contribution * 12 * years
        if contributed <= 0 or years not in self.values:
            return 0.0
        return (self.values[years] - contributed) / contributed * 100


@dataclass(frozen=True)
class InvestmentProjection:
    current_balance: float
    low: ProjectionTimeline
    recommended: ProjectionTimeline
    high: ProjectionTimeline

    def timeline(self, tier: PresetTier) -> ProjectionTimeline:
        return getattr(self, tier.value)


@dataclass(frozen=True)
class PayoffResult:
    """Outcome of amortizing a balance under a fixed monthly payment"""

    months: int
    total_paid: int
    interest_paid: int
    interest_saved: int
    capped: bool = False  # payment never covers interest


@dataclass(frozen=True)
class DebtPayoffTimeline:
    low: PayoffResult
    recommended: PayoffResult
    high: PayoffResult


@dataclass
class AllocationBucket:
    """One slice of the monthly plan plus the detail that applies to its type"""

    type: AllocationBucketType
    amount: int
    percentage: float
    current_balance: float = 0.0
    categories: List[str] = field(default_factory=list)
    preset_options: Optional[PresetOptions] = None
    # emergency fund
    target_amount: Optional[int] = None
    months_to_target: Optional[int] = None
    duration_options: List[EmergencyFundDurationOption] = field(default_factory=list)
    # investments
    projection: Optional[InvestmentProjection] = None
    # debt paydown
    total_debt: Optional[float] = None
    average_apr: Optional[float] = None
    payoff_timeline: Optional[DebtPayoffTimeline] = None


@dataclass
class AllocationPlan:
    """Recommended split of one month's income"""

    monthly_income: int
    buckets: List[AllocationBucket]
    emergency_fund: EmergencyFundPlan
    rounding_adjustment: int
    based_on: str

    @property
    def total_allocated(self) -> int:
        return sum(bucket.amount for bucket in self.buckets)

    @property
    def includes_debt_paydown(self) -> bool:
        return any(b.type == AllocationBucketType.DEBT_PAYDOWN for b in self.buckets)

    def bucket(self, bucket_type: AllocationBucketType) -> Optional[AllocationBucket]:
        for candidate in self.buckets:
            if candidate.type == bucket_type:
                return candidate
        return None
