"""Structured JSON logging for the Paylike client"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from paylike_client.config import settings

logger = logging.getLogger("paylike_client")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service = service if service is not None else settings.service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service


def setup_logging(level: Optional[str] = None) -> None:
    """Configure structured JSON logging on the root logger.

    Not called on import; applications embedding the client opt in.
    """
    root = logging.getLogger()
    root.setLevel(level or settings.log_level)

    # Remove existing handlers
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    root.addHandler(handler)


def log_request(
    method: str,
    route: str,
    status: Optional[int],
    duration_ms: float,
    outcome: str,
) -> None:
    """Log structured outcome of a single API call"""
    logger.debug(
        "Paylike request completed",
        extra={
            "method": method,
            "route": route,
            "status": status,
            "outcome": outcome,
            "duration_ms": duration_ms,
        },
    )


def log_response_body(route: str, raw: bytes) -> None:
    """Dump a raw response body, used while exploring undocumented payloads"""
    if settings.log_response_bodies:
        logger.debug("Paylike response body", extra={"route": route, "body": raw.decode("utf-8", "replace")})
