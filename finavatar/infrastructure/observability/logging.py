"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger.json import JsonFormatter
from finavatar.config import settings


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


def log_health_score(
    request_id: str,
    user_id: str,
    archetype: str,
    financial_score: float,
    duration_ms: float,
) -> None:
    """Log structured scoring outcome for analysis"""
    logging.info(
        "Health score computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "health_score",
            "archetype": archetype,
            "financial_score": financial_score,
            "duration_ms": duration_ms,
        },
    )


def log_habit_mutation(request_id: str, user_id: str, operation: str, habit_id: str) -> None:
    logging.info(
        "Habit %s",
        operation,
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": f"habit_{operation}",
            "habit_id": habit_id,
        },
    )


def log_advisor_call(
    request_id: str,
    user_id: str,
    operation: str,
    outcome: str,
    duration_ms: float,
) -> None:
    """Log advisor round trip; outcome is ok, empty or unavailable"""
    logging.info(
        "Advisor call completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": f"advisor_{operation}",
            "outcome": outcome,
            "duration_ms": duration_ms,
        },
    )
