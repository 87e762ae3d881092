"""Logging setup for the API process and queue workers."""
import json
import logging
from datetime import datetime


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record):
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Attach a single console handler to the package logger.

    Safe to call more than once; an existing handler is replaced.
    """
    logger = logging.getLogger("expense_tracker")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
