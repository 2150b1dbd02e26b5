"""Prometheus metrics for monitoring flag rates, affordability verdicts, and analysis latency"""

from prometheus_client import Counter, Histogram
from typing import Optional
from aml_gateway.domain.models import AffordabilityReport, RiskAnalysis, RiskSummary

# Analysis metrics
analysis_counter = Counter(
    "aml_analysis_total",
    "Total statement risk analyses",
    ["overall_level"],  # High | Medium | Low | None
)

flagged_transaction_counter = Counter(
    "aml_flagged_transactions_total",
    "Flagged transactions by severity",
    ["severity"],  # High | Medium | Low
)

skipped_transaction_counter = Counter(
    "aml_skipped_transactions_total",
    "Transactions skipped because their date could not be parsed",
)

affordability_counter = Counter(
    "aml_affordability_total",
    "Total affordability assessments",
    ["verdict"],  # Green | Amber | Red | none
)

analysis_duration_histogram = Histogram(
    "aml_analysis_duration_seconds",
    "Time spent in the risk analyzer",
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analysis(analysis: RiskAnalysis, summary: RiskSummary, skipped_count: int) -> None:
    """Record analysis metrics for monitoring flag distribution"""
    analysis_counter.labels(overall_level=summary.overall_level.value).inc()

    for risk in analysis.tx_risks.values():
        if risk.flagged:
            flagged_transaction_counter.labels(severity=risk.severity.value).inc()

    if skipped_count:
        skipped_transaction_counter.inc(skipped_count)


def record_affordability(report: Optional[AffordabilityReport]) -> None:
    affordability_counter.labels(verdict=report.verdict.value if report else "none").inc()
