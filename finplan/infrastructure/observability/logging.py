"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "finplan-gateway"


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)


def log_allocation(
    request_id: str,
    monthly_income: int,
    includes_debt_paydown: bool,
    savings_period_months: int,
    rounding_adjustment: int,
    duration_ms: float,
) -> None:
    """Log structured allocation outcome for analysis"""
    logging.info(
        "Allocation completed",
        extra={
            "request_id": request_id,
            "step": "allocation_complete",
            "monthly_income": monthly_income,
            "debt_paydown": "included" if includes_debt_paydown else "excluded",
            "savings_period_months": savings_period_months,
            "rounding_adjustment": rounding_adjustment,
            "duration_ms": duration_ms,
        },
    )
