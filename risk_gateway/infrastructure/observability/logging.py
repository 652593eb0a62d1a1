"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from risk_gateway.config import settings


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


def log_risk_score(risk_score: Any) -> None:
    """Log a computed score with its factor breakdown"""
    logging.getLogger("risk_gateway.scoring").debug(
        "Risk score computed",
        extra={
            "customer_id": risk_score.customer_id,
            "step": "risk_score",
            "score": risk_score.score,
            "risk_level": risk_score.level.value,
            "credit_score_impact": risk_score.factors.credit_score_impact,
            "repayment_history_impact": risk_score.factors.repayment_history_impact,
            "loan_to_income_ratio_impact": risk_score.factors.loan_to_income_ratio_impact,
        },
    )


def log_transition(
    customer_id: str,
    previous_status: Optional[str],
    new_status: str,
    outcome: str,
    duration_ms: float,
    score: Optional[int] = None,
    error_kind: Optional[str] = None,
) -> None:
    """Log structured transition outcome for audit"""
    extra = {
        "customer_id": customer_id,
        "step": "transition_complete",
        "previous_status": previous_status,
        "new_status": new_status,
        "outcome": outcome,
        "score": score,
        "duration_ms": duration_ms,
    }
    if error_kind:
        extra["error_kind"] = error_kind
    level = logging.INFO if outcome == "success" else logging.ERROR
    logging.getLogger("risk_gateway.workflow").log(level, "Transition completed", extra=extra)


def log_high_risk_alert(customer_id: str, score: int, delivered: bool, notes: str = "") -> None:
    """Log the high-risk approval alert so it is reviewable even if delivery failed"""
    logging.getLogger("risk_gateway.alerts").warning(
        "High-risk customer approved",
        extra={
            "customer_id": customer_id,
            "step": "high_risk_alert",
            "score": score,
            "delivered": delivered,
            "notes": notes,
        },
    )
