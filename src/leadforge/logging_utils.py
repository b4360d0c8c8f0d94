"""Structured logging utilities for LeadForge."""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, MutableMapping, Optional, Tuple

# Lead fields echoed by the human-readable formatter when present on a record
LEAD_CONTEXT_FIELDS = ("lead_id", "channel", "action")


class StructuredFormatter(logging.Formatter):
    """Custom formatter that outputs JSON-structured log messages."""

    # Standard LogRecord attributes excluded from the "extra" block
    STANDARD_ATTRS = {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "taskName",
    }

    def __init__(
        self,
        service_name: str = "leadforge",
        include_timestamp: bool = True,
        include_extra: bool = True,
    ):
        """Initialize the structured formatter.

        Args:
            service_name: Name of the service to include in logs
            include_timestamp: Whether to include timestamp in output
            include_extra: Whether to include extra fields from log record
        """
        super().__init__()
        self.service_name = service_name
        self.include_timestamp = include_timestamp
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string."""
        log_data: Dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "service": self.service_name,
        }

        if self.include_timestamp:
            log_data["timestamp"] = datetime.now(timezone.utc).isoformat()

        log_data["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            extra_fields = {}
            for key, value in record.__dict__.items():
                if key in self.STANDARD_ATTRS or key.startswith("_"):
                    continue
                try:
                    json.dumps(value)
                    extra_fields[key] = value
                except (TypeError, ValueError):
                    extra_fields[key] = str(value)

            if extra_fields:
                log_data["extra"] = extra_fields

        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter for development environments."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record in a human-readable format."""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname

        if self.use_colors:
            color = self.COLORS.get(level, "")
            level_str = f"{color}{level:8}{self.RESET}"
        else:
            level_str = f"{level:8}"

        formatted = f"[{timestamp}] {level_str} [{record.name}] {record.getMessage()}"

        context = " ".join(
            f"{key}={getattr(record, key)}"
            for key in LEAD_CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        )
        if context:
            formatted += f" ({context})"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


def setup_logging(
    level: Optional[str] = None,
    structured: Optional[bool] = None,
    service_name: str = "leadforge",
) -> logging.Logger:
    """Set up logging configuration for LeadForge.

    Configures the root logger and returns the ``leadforge`` package logger.
    Production environments get JSON lines, development gets coloured text.

    Args:
        level: Log level name. Defaults to LOG_LEVEL env var or INFO.
        structured: Whether to use structured JSON logging.
                   Defaults to True when APP_ENV is not 'dev'.
        service_name: Service name to include in structured logs.

    Returns:
        Logger instance for leadforge

    Example:
        >>> logger = setup_logging(level="DEBUG", structured=False)
        >>> logger.info("Ranking leads", extra={"count": 42})
    """
    if level is None:
        level = os.environ.get("LOG_LEVEL", "INFO")
    level = level.upper()
    log_level = getattr(logging, level, logging.INFO)

    if structured is None:
        structured = os.environ.get("APP_ENV", "dev") != "dev"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)

    if structured:
        formatter: logging.Formatter = StructuredFormatter(service_name=service_name)
    else:
        formatter = HumanReadableFormatter(use_colors=True)

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logger = logging.getLogger("leadforge")
    logger.debug(
        "Logging initialized",
        extra={"log_level": level, "structured": structured},
    )

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the leadforge namespace.

    Args:
        name: The name of the logger (will be prefixed with 'leadforge.')

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Processing started")
    """
    if not name.startswith("leadforge"):
        name = f"leadforge.{name}"
    return logging.getLogger(name)


class LeadLogAdapter(logging.LoggerAdapter):
    """Logger adapter that stamps every record with a lead's context.

    Fields passed in ``extra`` at the call site win over the bound ones.

    Example:
        >>> log = lead_logger(get_logger("board"), "lead-42", channel="GULF")
        >>> log.info("Pinned")  # includes lead_id and channel
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs


def lead_logger(logger: logging.Logger, lead_id: str, **fields: Any) -> LeadLogAdapter:
    """Bind a lead id, plus any other fields, to a logger."""
    return LeadLogAdapter(logger, {"lead_id": lead_id, **fields})
