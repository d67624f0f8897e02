"""Structured logging with correlation IDs for request tracing.

Log records go to stderr only: stdout carries the MCP stdio protocol.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import UTC, datetime

from jira_test_readiness.config import Settings

LOGGER_NAME = "jira_test_readiness"

# Correlation ID for request tracing across one tool call
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


class StructuredFormatter(logging.Formatter):
    """JSON log formatter with correlation ID support."""

    def format(self, record: logging.LogRecord) -> str:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            message = str(record.msg)

        payload = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "message": message,
            "correlation_id": correlation_id.get(),
            "module": record.module,
            "function": record.funcName,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure logging based on settings.

    Returns the 'jira_test_readiness' logger with a stderr handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level))

    # Remove existing handlers to avoid duplicates on repeated calls
    logger.handlers.clear()
    logger.propagate = False

    handler = logging.StreamHandler(sys.stderr)

    if settings.log_format == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )

    logger.addHandler(handler)

    return logger
