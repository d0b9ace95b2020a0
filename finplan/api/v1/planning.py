"""Standalone planner endpoints: emergency fund, investment projection, debt payoff"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from finplan.api.v1.schemas import (
    DebtPayoffRequest,
    EmergencyFundPlanSchema,
    EmergencyFundRequest,
    InvestmentProjectionRequest,
    InvestmentProjectionSchema,
    PayoffResultSchema,
)
from finplan.api.dependencies import get_request_id, get_settings
from finplan.config import Settings
from finplan.domain.debt import calculate_debt_payoff
from finplan.domain.emergency_fund import plan_emergency_fund
from finplan.domain.exceptions import DomainException
from finplan.domain.models import PresetTier
from finplan.domain.projections import project_investment_growth
from finplan.infrastructure.observability.metrics import record_payoff

router = APIRouter()


def _invalid_input(e: DomainException, request_id: str) -> HTTPException:
    logging.warning(f"Invalid planner input: {e}", extra={"request_id": request_id})
    return HTTPException(status_code=422, detail=str(e))


def _unexpected(e: Exception, request_id: str) -> HTTPException:
    logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
    return HTTPException(status_code=500, detail="Internal server error")


@router.post("/emergency-fund", response_model=EmergencyFundPlanSchema)
def emergency_fund(request_body: EmergencyFundRequest, request: Request):
    """Emergency fund target, monthly contribution and 3/6/12 month options"""
    request_id = get_request_id(request)
    try:
        plan = plan_emergency_fund(
            essential_monthly_spend=request_body.essential_monthly_spend,
            current_balance=request_body.current_balance,
            income_stability=request_body.income_stability,
            monthly_income=request_body.monthly_income,
            health_metrics=(
                request_body.health_metrics.to_domain() if request_body.health_metrics else None
            ),
            total_debt=request_body.total_debt,
        )
        return EmergencyFundPlanSchema.model_validate(plan)
    except DomainException as e:
        raise _invalid_input(e, request_id)
    except Exception as e:
        raise _unexpected(e, request_id)


@router.post("/investment-projection", response_model=InvestmentProjectionSchema)
def investment_projection(
    request_body: InvestmentProjectionRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """Projected balances for low / recommended / high monthly contributions"""
    request_id = get_request_id(request)
    annual_return = (
        request_body.annual_return
        if request_body.annual_return is not None
        else settings.annual_return_rate
    )
    tiers = {
        PresetTier.LOW: request_body.monthly_contributions.low,
        PresetTier.RECOMMENDED: request_body.monthly_contributions.recommended,
        PresetTier.HIGH: request_body.monthly_contributions.high,
    }
    try:
        projection = project_investment_growth(
            request_body.current_balance,
            tiers,
            horizons=request_body.horizons,
            annual_return=annual_return,
        )
        return InvestmentProjectionSchema.model_validate(projection)
    except DomainException as e:
        raise _invalid_input(e, request_id)
    except Exception as e:
        raise _unexpected(e, request_id)


@router.post("/debt-payoff", response_model=PayoffResultSchema)
def debt_payoff(
    request_body: DebtPayoffRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """
    Months, total paid and interest for a fixed monthly payment.

    Returns:
        capped=True with months=600 when the payment never covers interest
    """
    request_id = get_request_id(request)
    apr = request_body.apr if request_body.apr is not None else settings.default_apr
    try:
        result = calculate_debt_payoff(request_body.total_debt, request_body.monthly_payment, apr)
        record_payoff(result)
        return PayoffResultSchema.model_validate(result)
    except DomainException as e:
        raise _invalid_input(e, request_id)
    except Exception as e:
        raise _unexpected(e, request_id)
