"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "proposal-gateway"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = SERVICE_NAME


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_document_rendered(
    request_id: str,
    company_name: str,
    card_fee_rows: int,
    additional_fee_rows: int,
    print_on_load: bool,
    duration_ms: float,
) -> None:
    """Log structured rendering outcome"""
    logging.info(
        "Document rendered",
        extra={
            "request_id": request_id,
            "step": "document_rendered",
            "company_name": company_name,
            "card_fee_rows": card_fee_rows,
            "additional_fee_rows": additional_fee_rows,
            "print_on_load": print_on_load,
            "duration_ms": duration_ms,
        },
    )


def log_proposal_saved(request_id: str, user_id: str, proposal_id: str, created: bool) -> None:
    logging.info(
        "Proposal saved",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "proposal_id": proposal_id,
            "step": "proposal_saved",
            "outcome": "created" if created else "updated",
        },
    )


def log_login(username_or_email: str, success: bool) -> None:
    logging.info(
        "Login attempt",
        extra={
            "step": "login",
            "login": username_or_email,
            "outcome": "success" if success else "failure",
        },
    )
