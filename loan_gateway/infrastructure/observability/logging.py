"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger.json import JsonFormatter

from loan_gateway.config import settings
from loan_gateway.domain.models import Assessment


class CustomJsonFormatter(JsonFormatter):
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


def log_assessment(
    correlation_id: Optional[str],
    assessment: Assessment,
    duration_ms: float,
) -> None:
    """Log structured assessment outcome for audit and analysis"""
    logging.info(
        "Assessment completed",
        extra={
            "correlation_id": correlation_id,
            "step": "assessment_complete",
            "decision": assessment.decision.value,
            "composite_score": assessment.composite_score,
            "credit_band": assessment.credit_band,
            "dti_category": assessment.dti_category,
            "failed_checkpoints": [c.label for c in assessment.failed_checkpoints],
            "policy_version": assessment.policy_version,
            "duration_ms": duration_ms,
        },
    )
