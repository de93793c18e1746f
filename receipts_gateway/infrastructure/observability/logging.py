"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List

from pythonjsonlogger.json import JsonFormatter

from receipts_gateway.config import settings


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


def log_combined_payment(
    request_id: str,
    receipt_number: str,
    client_id: int,
    invoice_ids: List[int],
    total_amount: Decimal,
    credit_balance_applied: Decimal,
    method: str,
    duration_ms: float,
) -> None:
    """Log structured outcome of a registered combined payment"""
    logging.info(
        "Combined payment registered",
        extra={
            "request_id": request_id,
            "step": "combined_payment_registered",
            "receipt_number": receipt_number,
            "client_id": client_id,
            "invoice_ids": invoice_ids,
            "total_amount": str(total_amount),
            "credit_balance_applied": str(credit_balance_applied),
            "method": method,
            "duration_ms": duration_ms,
        },
    )


def log_payment_rejected(request_id: str, invoice_ids: List[int], reason: str, detail: str) -> None:
    """Log a combined payment refused by validation or ledger rules"""
    logging.warning(
        "Combined payment rejected",
        extra={
            "request_id": request_id,
            "step": "combined_payment_rejected",
            "invoice_ids": invoice_ids,
            "reason": reason,
            "detail": detail,
        },
    )
