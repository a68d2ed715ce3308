"""
Structured JSON logging for the storefront service.

Customer email addresses never reach the log stream in clear text; use
hash_email() when an address needs to be correlated across log lines.
"""

import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict


def hash_email(email: str) -> str:
    """
    Hash email for privacy-safe logging.

    Args:
        email: Email address

    Returns:
        First 12 characters of SHA256 hash
    """
    if not email:
        return ""
    return hashlib.sha256(email.strip().lower().encode()).hexdigest()[:12]


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage()
        }

        if hasattr(record, 'extra_data'):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> logging.Logger:
    """
    Get configured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger with JSON formatting on stderr, plus LOG_FILE when set
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        from storefront.config import Config

        logger.setLevel(getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO))

        console = logging.StreamHandler()
        console.setFormatter(JSONFormatter())
        logger.addHandler(console)

        if Config.LOG_FILE:
            file_handler = logging.FileHandler(Config.LOG_FILE)
            file_handler.setFormatter(JSONFormatter())
            logger.addHandler(file_handler)

    return logger


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context
) -> None:
    """
    Log message with structured context.

    Args:
        logger: Logger instance
        level: Log level (INFO, WARNING, ERROR)
        message: Log message
        **context: Additional context fields
    """
    log_method = getattr(logger, level.lower())
    extra = {"extra_data": context}
    log_method(message, extra=extra)
