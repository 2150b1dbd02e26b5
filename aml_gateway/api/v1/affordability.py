"""POST /v1/affordability - mortgage affordability from statement income and spending"""

import logging
from fastapi import APIRouter, Depends, HTTPException

from aml_gateway.api.v1.schemas import AffordabilityRequest, AffordabilityResponse, AffordabilityReportSchema
from aml_gateway.api.v1.risk import check_statement_size
from aml_gateway.api.dependencies import get_request_id
from aml_gateway.config import settings
from aml_gateway.domain.affordability import assess_affordability
from aml_gateway.domain.exceptions import InvalidTransactionDataError
from aml_gateway.infrastructure.observability.metrics import record_affordability
from aml_gateway.infrastructure.observability.logging import log_affordability

router = APIRouter()


@router.post("/affordability", response_model=AffordabilityResponse)
def assess_statement_affordability(body: AffordabilityRequest, request_id: str = Depends(get_request_id)):
    """
    Average monthly surplus and debt-to-income ratio with a Green/Amber/Red verdict.

    mortgage_estimate defaults to the configured monthly payment when omitted.
    """
    estimate = body.mortgage_estimate if body.mortgage_estimate is not None else settings.default_mortgage_estimate

    try:
        check_statement_size(body)
        report = assess_affordability([t.to_domain() for t in body.transactions], mortgage_estimate=estimate)

    except InvalidTransactionDataError as e:
        logging.warning(f"Invalid statement payload: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_affordability(report)
    log_affordability(
        request_id,
        body.bank,
        transaction_count=len(body.transactions),
        months_analyzed=report.months_analyzed if report else 0,
        verdict=report.verdict.value if report else None,
        mortgage_estimate=estimate,
    )

    return AffordabilityResponse(
        bank=body.bank,
        report=AffordabilityReportSchema.from_domain(report) if report else None,
    )
