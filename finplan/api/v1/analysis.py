"""POST /v1/categorize and /v1/analysis - transaction categorization and cash flow analysis"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from finplan.api.v1.schemas import (
    AnalysisRequest,
    AnalysisResponse,
    AnalysisMetadataSchema,
    CategorizedTransaction,
    CategorizeRequest,
    CategorizeResponse,
    ExpenseBreakdownSchema,
    FinancialPositionSchema,
    FinancialSummarySchema,
    MonthlyFlowSchema,
)
from finplan.api.dependencies import get_request_id, get_settings
from finplan.config import Settings
from finplan.domain.categorizer import categorize, expense_category_for
from finplan.domain.exceptions import DomainException
from finplan.domain.summary import build_snapshot, summarize, weighted_average_apr

router = APIRouter()


@router.post("/categorize", response_model=CategorizeResponse)
def categorize_transactions(request_body: CategorizeRequest):
    """Bucket, expense category and validation flag for each transaction"""
    results = []
    for item in request_body.transactions:
        txn = item.to_domain()
        results.append(
            CategorizedTransaction(
                transaction_id=txn.transaction_id,
                bucket=categorize(txn),
                expense_category=expense_category_for(txn),
                needs_validation=txn.needs_validation,
            )
        )
    return CategorizeResponse(transactions=results)


@router.post("/analysis", response_model=AnalysisResponse)
def analyze(
    request_body: AnalysisRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
):
    """
    Summarize a trailing window of transactions against current balances.

    Flow:
    1. Filter to the window ending at as_of (defaults to today)
    2. Aggregate monthly income, spending and balances
    3. Build the cash flow snapshot used for plan creation
    4. Weight account APRs by balance for the debt paydown timeline
    """
    request_id = get_request_id(request)
    window_months = request_body.window_months or settings.analysis_window_months

    try:
        transactions = [t.to_domain() for t in request_body.transactions]
        accounts = [a.to_domain() for a in request_body.accounts]

        summary = summarize(transactions, accounts, as_of=request_body.as_of, window_months=window_months)
        snapshot = build_snapshot(
            transactions, accounts, as_of=request_body.as_of, window_months=window_months
        )

        return AnalysisResponse(
            summary=FinancialSummarySchema.model_validate(summary),
            expense_breakdown=ExpenseBreakdownSchema.model_validate(
                snapshot.monthly_flow.expense_breakdown
            ),
            monthly_flow=MonthlyFlowSchema.model_validate(snapshot.monthly_flow),
            position=FinancialPositionSchema.model_validate(snapshot.position),
            metadata=AnalysisMetadataSchema.model_validate(snapshot.metadata),
            average_debt_apr=weighted_average_apr(accounts, default=settings.default_apr),
            is_ready_for_plan=snapshot.is_ready_for_plan,
        )

    except DomainException as e:
        logging.warning(f"Invalid analysis input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
