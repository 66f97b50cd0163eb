# bouncer_relay/logging.py
"""
Structured logging for the bouncer relay.

Every line is a JSON object:
- timestamp: ISO 8601
- level: DEBUG/INFO/WARNING/ERROR/CRITICAL
- logger: Module name
- message: Event name (snake_case)
- **fields: Additional structured fields

Usage:
    from bouncer_relay.logging import get_logger
    logger = get_logger(__name__)
    logger.info("bouncer_delivery_complete", comment_id="abc", status_code=202)
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Header values that must never reach a log line
REDACTED_FIELDS = {"handshake_token", "auth_token", "authorization"}


class StructuredLogFormatter(logging.Formatter):
    """JSON formatter, one object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "structured_data"):
            for key, value in record.structured_data.items():
                log_data[key] = "[REDACTED]" if key.lower() in REDACTED_FIELDS else value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if record.levelno >= logging.ERROR:
            log_data["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_data, default=str)


class StructuredLogger:
    """
    Thin wrapper that turns keyword arguments into structured fields.

    Example:
        logger = get_logger(__name__)
        logger.debug("flag_skipped", reason="not_first_flag", comment_id=cid)
    """

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs):
        self._logger.log(
            level, message, exc_info=exc_info, extra={"structured_data": kwargs}
        )

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, exc_info: bool = False, **kwargs):
        self._log(logging.WARNING, message, exc_info=exc_info, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs):
        self._log(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log at ERROR with the active traceback attached."""
        self._log(logging.ERROR, message, exc_info=True, **kwargs)


_configured = False


def configure_logging(
    level: str = "INFO",
    json_output: bool = True,
    log_file: Optional[str] = None,
    force: bool = False,
):
    """
    Configure the root logger.

    Args:
        level: Log level name
        json_output: Use JSON lines (True) or plain text (False)
        log_file: Optional file path, always written as JSON
        force: Reconfigure even if already configured
    """
    global _configured
    if _configured and not force:
        return
    _configured = True

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    if json_output:
        console_handler.setFormatter(StructuredLogFormatter())
    else:
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredLogFormatter())
        root_logger.addHandler(file_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger.

    Never touches handlers: an embedding host keeps its own logging setup,
    and the standalone app calls configure_logging at startup.
    """
    return StructuredLogger(name)
