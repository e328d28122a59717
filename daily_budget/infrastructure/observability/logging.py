"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from daily_budget.config import settings

LOG_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"

# Libraries that log every statement or connection at INFO
QUIET_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")


class BudgetJsonFormatter(jsonlogger.JsonFormatter):
    """Adds UTC timestamp, level and service name to every record"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(BudgetJsonFormatter(LOG_FORMAT))
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_request_outcome(
    request_id: str,
    user_id: Optional[int],
    operation: str,
    duration_ms: float,
) -> None:
    """One line per completed budget operation, keyed by request id"""
    logging.getLogger("daily_budget.api").info(
        "%s completed",
        operation,
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "operation": operation,
            "duration_ms": round(duration_ms, 2),
        },
    )
