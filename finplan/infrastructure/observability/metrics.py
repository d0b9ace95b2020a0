"""Prometheus metrics for allocation outcomes, payoff timelines, and request latency"""

from prometheus_client import Counter, Histogram

from finplan.domain.models import AllocationPlan, PayoffResult

# Allocation metrics
allocation_counter = Counter(
    "finplan_allocation_total",
    "Total allocation plans generated",
    ["debt_paydown"],  # included | excluded
)

emergency_savings_period_counter = Counter(
    "finplan_emergency_savings_period_total",
    "Emergency fund savings periods chosen",
    ["months"],  # 12 | 18 | 24
)

rounding_adjustment_histogram = Histogram(
    "finplan_rounding_adjustment_dollars",
    "Absolute rounding drift absorbed by the largest flexible bucket",
    buckets=[0, 1, 2, 3, 5, 10],
)

# Debt metrics
capped_payoff_counter = Counter(
    "finplan_capped_payoff_total",
    "Payoff calculations where the payment never covered interest",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_allocation(plan: AllocationPlan) -> None:
    """Record allocation metrics for monitoring debt inclusion and savings pacing"""
    debt_paydown = "included" if plan.includes_debt_paydown else "excluded"
    allocation_counter.labels(debt_paydown=debt_paydown).inc()
    emergency_savings_period_counter.labels(months=str(plan.emergency_fund.savings_period_months)).inc()
    rounding_adjustment_histogram.observe(abs(plan.rounding_adjustment))


def record_payoff(result: PayoffResult) -> None:
    """Count payoffs that hit the 600 month cap"""
    if result.capped:
        capped_payoff_counter.inc()
