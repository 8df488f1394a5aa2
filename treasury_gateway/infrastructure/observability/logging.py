"""Structured JSON logging for production observability"""

import logging
import sys
from typing import Any, Dict, List
from pythonjsonlogger import jsonlogger

from treasury_gateway.config import settings
from treasury_gateway.utils.date_utils import utcnow


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = utcnow().isoformat()
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


def log_money_movement(
    transaction_id: str,
    movement_type: str,
    amount_cents: int,
    outcome: str,
    account_ids: List[str],
) -> None:
    """Log structured money movement outcome for audit"""
    logging.info(
        "Money movement recorded",
        extra={
            "transaction_id": transaction_id,
            "step": "money_movement",
            "movement_type": movement_type,
            "amount_cents": amount_cents,
            "outcome": outcome,
            "account_ids": account_ids,
        },
    )


def log_reconciliation_failure(payment_id: str, filing_id: str, event: str, error: Exception) -> None:
    """A payment changed state but its filing's paid total could not follow"""
    logging.error(
        f"Failed to reconcile filing after payment {event}: {error}",
        extra={
            "payment_id": payment_id,
            "filing_id": filing_id,
            "step": "reconciliation",
            "event": event,
        },
    )
