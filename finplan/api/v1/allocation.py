"""POST /v1/allocation - monthly budget allocation endpoint"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from finplan.api.v1.schemas import AllocationRequest, AllocationResponse
from finplan.api.dependencies import get_request_id, get_settings
from finplan.config import Settings
from finplan.domain.allocation import allocate
from finplan.domain.exceptions import DomainException
from finplan.infrastructure.observability.metrics import record_allocation, record_payoff
from finplan.infrastructure.observability.logging import log_allocation

router = APIRouter()


@router.post("/allocation", response_model=AllocationResponse)
def create_allocation(
    request_body: AllocationRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """
    Split monthly income into essential, emergency, discretionary,
    investment and (when debt is over $1,000) debt paydown buckets.

    Bucket amounts always sum exactly to the whole-dollar income.
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        plan = allocate(
            monthly_income=request_body.monthly_income,
            monthly_expenses=request_body.monthly_expenses,
            current_savings=request_body.current_savings,
            total_debt=request_body.total_debt,
            category_breakdown=request_body.category_breakdown,
            health_metrics=(
                request_body.health_metrics.to_domain() if request_body.health_metrics else None
            ),
            account_balances=(
                request_body.account_balances.to_domain() if request_body.account_balances else None
            ),
            debt_apr=request_body.debt_apr if request_body.debt_apr is not None else settings.default_apr,
            annual_return=settings.annual_return_rate,
        )

        duration_ms = (time.perf_counter() - start_time) * 1000
        record_allocation(plan)
        for bucket in plan.buckets:
            if bucket.payoff_timeline is not None:
                record_payoff(bucket.payoff_timeline.recommended)
        log_allocation(
            request_id,
            plan.monthly_income,
            plan.includes_debt_paydown,
            plan.emergency_fund.savings_period_months,
            plan.rounding_adjustment,
            duration_ms,
        )

        return AllocationResponse.model_validate(plan)

    except DomainException as e:
        logging.warning(f"Invalid allocation input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
