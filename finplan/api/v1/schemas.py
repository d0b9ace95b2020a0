"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import Dict, List, Optional

from finplan.domain.models import (
    Account,
    AccountBalances,
    AllocationBucketType,
    BucketCategory,
    ConfidenceLevel,
    HealthMetrics,
    IncomeStability,
    PersonalFinanceCategory,
    Transaction,
)


# ---------------------------------------------------------------------------
# Shared inputs
# ---------------------------------------------------------------------------


class PersonalFinanceCategorySchema(BaseModel):
    primary: str = Field(..., min_length=1, description="Primary code, e.g. FOOD_AND_DRINK")
    detailed: str = Field("", description="Detailed code, with or without the primary prefix")
    confidence_level: ConfidenceLevel = ConfidenceLevel.UNKNOWN


class TransactionSchema(BaseModel):
    """Bank transaction. Positive amount = money out, negative = money in."""

    transaction_id: str = Field(..., min_length=1)
    account_id: str
    amount: float
    date: date
    name: str
    merchant_name: Optional[str] = None
    category: List[str] = Field(default_factory=list, description="Legacy category tags")
    category_id: Optional[str] = None
    pending: bool = False
    personal_finance_category: Optional[PersonalFinanceCategorySchema] = None
    user_corrected_category: Optional[BucketCategory] = None
    user_validated: bool = False

    def to_domain(self) -> Transaction:
        pfc = None
        if self.personal_finance_category is not None:
            pfc = PersonalFinanceCategory(
                primary=self.personal_finance_category.primary,
                detailed=self.personal_finance_category.detailed,
                confidence_level=self.personal_finance_category.confidence_level,
            )
        return Transaction(
            transaction_id=self.transaction_id,
            account_id=self.account_id,
            amount=self.amount,
            date=self.date,
            name=self.name,
            merchant_name=self.merchant_name,
            category=tuple(self.category),
            category_id=self.category_id,
            pending=self.pending,
            personal_finance_category=pfc,
            user_corrected_category=self.user_corrected_category,
            user_validated=self.user_validated,
        )


class AccountSchema(BaseModel):
    account_id: str = Field(..., min_length=1)
    item_id: str = ""
    name: str
    type: str = Field(..., description="depository | credit | loan | investment | brokerage")
    subtype: Optional[str] = None
    current_balance: Optional[float] = None
    available_balance: Optional[float] = None
    limit: Optional[float] = None
    apr: Optional[float] = Field(None, ge=0, description="Annual rate as a fraction, e.g. 0.24")
    minimum_payment: Optional[float] = Field(None, ge=0)

    def to_domain(self) -> Account:
        return Account(**self.model_dump())


class HealthMetricsSchema(BaseModel):
    health_score: float = Field(..., ge=0, le=100)
    savings_rate: float = 0.0
    emergency_fund_months_covered: float = Field(0.0, ge=0)
    debt_to_income_ratio: float = Field(0.0, ge=0)
    income_stability: IncomeStability = IncomeStability.VARIABLE

    def to_domain(self) -> HealthMetrics:
        return HealthMetrics(**self.model_dump())


class AccountBalancesSchema(BaseModel):
    """Balances of accounts tagged to each bucket; omitted means untagged"""

    emergency: Optional[float] = Field(None, ge=0)
    investments: Optional[float] = Field(None, ge=0)
    discretionary: Optional[float] = Field(None, ge=0)
    essential: Optional[float] = Field(None, ge=0)
    debt: Optional[float] = Field(None, ge=0)

    def to_domain(self) -> AccountBalances:
        return AccountBalances(**self.model_dump())


# ---------------------------------------------------------------------------
# Categorization and analysis
# ---------------------------------------------------------------------------


class CategorizeRequest(BaseModel):
    """Request body for POST /v1/categorize"""

    transactions: List[TransactionSchema]


class CategorizedTransaction(BaseModel):
    transaction_id: str
    bucket: BucketCategory
    expense_category: Optional[str] = None
    needs_validation: bool


class CategorizeResponse(BaseModel):
    """Response for POST /v1/categorize"""

    transactions: List[CategorizedTransaction]


class AnalysisRequest(BaseModel):
    """Request body for POST /v1/analysis"""

    transactions: List[TransactionSchema]
    accounts: List[AccountSchema] = Field(default_factory=list)
    as_of: Optional[date] = None
    window_months: Optional[int] = Field(None, ge=1, description="Defaults to the configured window")


class FinancialSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    avg_monthly_income: float
    avg_monthly_expenses: float
    monthly_investment_contributions: float
    net_monthly_income: float
    disposable_income: float
    has_shortfall: bool
    total_debt: float
    total_invested: float
    total_cash_available: float
    net_worth: float
    months_analyzed: int
    total_transactions: int
    analysis_start_date: Optional[date] = None
    analysis_end_date: Optional[date] = None


class ExpenseBreakdownSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    housing: float
    food: float
    transportation: float
    utilities: float
    insurance: float
    subscriptions: float
    healthcare: float
    other: float
    total: float
    confidence: float
    confidence_level: str


class MonthlyFlowSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    income: float
    essential_expenses: float
    debt_minimums: float
    discretionary_income: float
    is_positive: bool


class FinancialPositionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    emergency_cash: float
    total_debt: float
    investment_balances: float
    monthly_investment_contributions: float
    net_worth: float


class AnalysisMetadataSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    months_analyzed: int
    accounts_connected: int
    transactions_analyzed: int
    transactions_needing_validation: int
    needs_validation_review: bool


class AnalysisResponse(BaseModel):
    """Response for POST /v1/analysis"""

    summary: FinancialSummarySchema
    expense_breakdown: ExpenseBreakdownSchema
    monthly_flow: MonthlyFlowSchema
    position: FinancialPositionSchema
    metadata: AnalysisMetadataSchema
    average_debt_apr: float = Field(..., description="Balance-weighted APR to pass to /v1/allocation as debt_apr")
    is_ready_for_plan: bool


# ---------------------------------------------------------------------------
# Planner outputs
# ---------------------------------------------------------------------------


class PresetValueSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    amount: int
    percentage: float


class PresetOptionsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    low: PresetValueSchema
    recommended: PresetValueSchema
    high: PresetValueSchema


class DurationOptionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    months: int
    target_amount: int
    shortfall: float
    monthly_contribution: PresetOptionsSchema
    is_recommended: bool
    is_goal_met: bool


class EmergencyFundPlanSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    target_months: int
    target_amount: int
    current_balance: float
    shortfall: float
    savings_period_months: int
    monthly_contribution: int
    months_to_target: int
    is_on_track: bool
    duration_options: List[DurationOptionSchema]


class ProjectionTimelineSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    monthly_contribution: float
    values: Dict[int, int] = Field(..., description="Projected balance keyed by years")


class InvestmentProjectionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current_balance: float
    low: ProjectionTimelineSchema
    recommended: ProjectionTimelineSchema
    high: ProjectionTimelineSchema


class PayoffResultSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    months: int
    total_paid: int
    interest_paid: int
    interest_saved: int
    capped: bool


class DebtPayoffTimelineSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    low: PayoffResultSchema
    recommended: PayoffResultSchema
    high: PayoffResultSchema


# ---------------------------------------------------------------------------
# Allocation
# ---------------------------------------------------------------------------


class AllocationRequest(BaseModel):
    """Request body for POST /v1/allocation"""

    monthly_income: float = Field(..., gt=0, description="Monthly take-home income in dollars")
    monthly_expenses: float = Field(0.0, ge=0)
    current_savings: float = Field(0.0, ge=0)
    total_debt: float = Field(0.0, ge=0)
    category_breakdown: Optional[Dict[str, float]] = Field(
        None, description="Monthly spending keyed by category name"
    )
    health_metrics: Optional[HealthMetricsSchema] = None
    account_balances: Optional[AccountBalancesSchema] = None
    debt_apr: Optional[float] = Field(None, ge=0, description="Defaults to the configured APR")


class AllocationBucketSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: AllocationBucketType
    amount: int
    percentage: float
    current_balance: float
    categories: List[str]
    preset_options: Optional[PresetOptionsSchema] = None
    target_amount: Optional[int] = None
    months_to_target: Optional[int] = None
    duration_options: List[DurationOptionSchema] = Field(default_factory=list)
    projection: Optional[InvestmentProjectionSchema] = None
    total_debt: Optional[float] = None
    average_apr: Optional[float] = None
    payoff_timeline: Optional[DebtPayoffTimelineSchema] = None


class AllocationResponse(BaseModel):
    """Response for POST /v1/allocation"""

    model_config = ConfigDict(from_attributes=True)

    monthly_income: int
    total_allocated: int
    rounding_adjustment: int
    includes_debt_paydown: bool
    based_on: str
    buckets: List[AllocationBucketSchema]
    emergency_fund: EmergencyFundPlanSchema


# ---------------------------------------------------------------------------
# Individual planners
# ---------------------------------------------------------------------------


class EmergencyFundRequest(BaseModel):
    """Request body for POST /v1/emergency-fund"""

    essential_monthly_spend: float = Field(..., ge=0)
    current_balance: float = Field(0.0, ge=0)
    income_stability: IncomeStability = IncomeStability.VARIABLE
    monthly_income: float = Field(0.0, ge=0)
    health_metrics: Optional[HealthMetricsSchema] = None
    total_debt: float = Field(0.0, ge=0)


class ContributionTiersSchema(BaseModel):
    low: float = Field(..., ge=0)
    recommended: float = Field(..., ge=0)
    high: float = Field(..., ge=0)


class InvestmentProjectionRequest(BaseModel):
    """Request body for POST /v1/investment-projection"""

    current_balance: float = Field(0.0, ge=0)
    monthly_contributions: ContributionTiersSchema
    horizons: List[int] = Field(default_factory=lambda: [10, 20, 30])
    annual_return: Optional[float] = Field(None, ge=0, description="Defaults to the configured rate")


class DebtPayoffRequest(BaseModel):
    """Request body for POST /v1/debt-payoff"""

    total_debt: float = Field(..., ge=0)
    monthly_payment: float = Field(..., ge=0)
    apr: Optional[float] = Field(None, ge=0, description="Defaults to the configured APR")
