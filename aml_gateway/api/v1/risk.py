"""POST /v1/risk/analyze and /v1/risk/summary - statement AML risk endpoints"""

import time
import logging
from typing import List, Tuple
from fastapi import APIRouter, Depends, HTTPException

from aml_gateway.api.v1.schemas import (
    StatementRequest,
    AnalysisResponse,
    SummaryResponse,
    TransactionRiskSchema,
    MonthlyRiskScoreSchema,
)
from aml_gateway.api.dependencies import get_request_id
from aml_gateway.config import settings
from aml_gateway.domain.models import RiskAnalysis, RiskSummary
from aml_gateway.domain.scoring import analyze_risks
from aml_gateway.domain.summary import summarize
from aml_gateway.domain.severity import Severity
from aml_gateway.domain.exceptions import InvalidTransactionDataError
from aml_gateway.infrastructure.observability.metrics import record_analysis, analysis_duration_histogram
from aml_gateway.infrastructure.observability.logging import log_analysis

router = APIRouter()


def check_statement_size(body: StatementRequest) -> None:
    if len(body.transactions) > settings.max_transactions:
        raise InvalidTransactionDataError(
            f"Statement has {len(body.transactions)} transactions, limit is {settings.max_transactions}"
        )


def run_analysis(body: StatementRequest, request_id: str) -> Tuple[RiskAnalysis, RiskSummary, List[int]]:
    """
    Analyze a statement payload and record its metrics and logs.

    Flow:
    1. Validate payload size
    2. Run the risk analyzer over transactions in the order received
    3. Summarize the period
    4. Record metrics and structured log
    """
    check_statement_size(body)

    start_time = time.time()
    transactions = [t.to_domain() for t in body.transactions]

    with analysis_duration_histogram.time():
        analysis = analyze_risks(transactions)
    summary = summarize(analysis)

    skipped = [i for i in range(len(transactions)) if i not in analysis.tx_risks]
    peak = max((m.severity for m in analysis.monthly.values()), default=Severity.NONE)

    duration_ms = (time.time() - start_time) * 1000
    record_analysis(analysis, summary, len(skipped))
    log_analysis(
        request_id,
        body.bank,
        transaction_count=len(transactions),
        skipped_count=len(skipped),
        flagged_count=summary.total_flagged,
        peak_month_severity=peak.value,
        duration_ms=duration_ms,
    )
    return analysis, summary, skipped


def _handle(body: StatementRequest, request_id: str) -> Tuple[RiskAnalysis, RiskSummary, List[int]]:
    try:
        return run_analysis(body, request_id)

    except InvalidTransactionDataError as e:
        logging.warning(f"Invalid statement payload: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


# Plain def: FastAPI runs CPU-bound analysis in its threadpool
@router.post("/risk/analyze", response_model=AnalysisResponse)
def analyze_statement(body: StatementRequest, request_id: str = Depends(get_request_id)):
    """
    Flag AML risks per transaction and score each calendar month.

    Returns:
        txRisks keyed by input index, monthly scores keyed by YYYY-MM,
        and the indices skipped for invalid dates
    """
    analysis, _, skipped = _handle(body, request_id)

    return AnalysisResponse(
        bank=body.bank,
        tx_risks={idx: TransactionRiskSchema.from_domain(r) for idx, r in analysis.tx_risks.items()},
        monthly={key: MonthlyRiskScoreSchema.from_domain(m) for key, m in analysis.monthly.items()},
        skipped=skipped,
    )


@router.post("/risk/summary", response_model=SummaryResponse)
def summarize_statement(body: StatementRequest, request_id: str = Depends(get_request_id)):
    """Period-level AML assessment for a statement"""
    _, summary, _ = _handle(body, request_id)
    return SummaryResponse.from_domain(summary, bank=body.bank)
