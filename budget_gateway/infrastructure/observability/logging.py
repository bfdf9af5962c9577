"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "budget-gateway"


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


def log_stats_computed(
    request_id: str,
    wallet_id: int,
    include_predictions: bool,
    predictions_folded: bool,
    duration_ms: float,
) -> None:
    """Log structured statistics computation for latency analysis"""
    logging.info(
        "Statistics computed",
        extra={
            "request_id": request_id,
            "wallet_id": wallet_id,
            "step": "stats_complete",
            "include_predictions": include_predictions,
            "predictions_folded": predictions_folded,
            "duration_ms": duration_ms,
        },
    )


def log_adjustment(
    request_id: str,
    wallet_id: int,
    user_id: int,
    difference: Decimal,
    transaction_created: bool,
) -> None:
    """Log structured balance adjustment outcome for auditing"""
    logging.info(
        "Balance adjustment completed",
        extra={
            "request_id": request_id,
            "wallet_id": wallet_id,
            "user_id": user_id,
            "step": "adjustment_complete",
            "difference": str(difference),
            "transaction_created": transaction_created,
        },
    )
