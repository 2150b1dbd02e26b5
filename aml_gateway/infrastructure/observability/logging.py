"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger
from aml_gateway.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_analysis(
    request_id: str,
    bank: Optional[str],
    transaction_count: int,
    skipped_count: int,
    flagged_count: int,
    peak_month_severity: str,
    duration_ms: float,
) -> None:
    """Log structured analysis outcome for review dashboards"""
    logging.info(
        "Risk analysis completed",
        extra={
            "request_id": request_id,
            "bank": bank,
            "step": "analysis_complete",
            "transaction_count": transaction_count,
            "skipped_count": skipped_count,
            "flagged_count": flagged_count,
            "peak_month_severity": peak_month_severity,
            "duration_ms": duration_ms,
        },
    )


def log_affordability(
    request_id: str,
    bank: Optional[str],
    transaction_count: int,
    months_analyzed: int,
    verdict: Optional[str],
    mortgage_estimate: float,
) -> None:
    logging.info(
        "Affordability assessment completed",
        extra={
            "request_id": request_id,
            "bank": bank,
            "step": "affordability_complete",
            "transaction_count": transaction_count,
            "months_analyzed": months_analyzed,
            "verdict": verdict,
            "mortgage_estimate": mortgage_estimate,
        },
    )
