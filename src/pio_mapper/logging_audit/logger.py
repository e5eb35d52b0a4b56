"""Logging configuration for the PIO resource mapper.

Console and rotating file handlers share a PII-redacting formatter. The
per-area operation loggers are the package loggers of the converters, the
terminology layer and the backend transport, so setting their level
controls every module logger below them.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from .formatters import PIIRedactingFormatter

if TYPE_CHECKING:
    from ..config.schema import OperationLoggingConfig

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_FILE = Path("logs") / "pio-mapper.log"
MAX_LOG_FILE_SIZE = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5

_logging_configured = False

OPERATION_LOGGERS = {
    "converters": "pio_mapper.converters",
    "terminology": "pio_mapper.terminology",
    "backend": "pio_mapper.transport",
}

logger = logging.getLogger(__name__)


def _numeric_level(level: str, what: str = "log level") -> int:
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(
            f"Invalid {what}: {level}. "
            f"Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
    return numeric_level


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    redact_pii: bool = False,
) -> None:
    """Configure console and file logging.

    Idempotent: calling it again replaces the handlers installed before.

    Args:
        level: Console log level; the file handler always logs DEBUG
        log_file: Log file path. Defaults to ``PIO_MAPPER_LOG_FILE`` or
            ``logs/pio-mapper.log``.
        redact_pii: Redact names, phone numbers and e-mail addresses

    Raises:
        ValueError: If the log level is invalid
        RuntimeError: If the log directory cannot be created

    Example:
        >>> configure_logging(level="DEBUG", redact_pii=True)
    """
    global _logging_configured

    numeric_level = _numeric_level(level)

    if log_file is None:
        env_log_file = os.environ.get("PIO_MAPPER_LOG_FILE")
        log_file = Path(env_log_file) if env_log_file else DEFAULT_LOG_FILE

    log_dir = log_file.parent
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(
            f"Failed to create log directory: {log_dir}. "
            f"Ensure write permissions are available. Error: {e}"
        ) from e

    root_logger = logging.getLogger()
    if _logging_configured:
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(logging.DEBUG)

    formatter = PIIRedactingFormatter(fmt=DEFAULT_LOG_FORMAT, redact_pii=redact_pii)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    try:
        file_handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=MAX_LOG_FILE_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    except OSError as e:
        root_logger.warning(
            f"Failed to create file handler for {log_file}: {e}. Logging to console only."
        )

    _logging_configured = True


def get_logger(module_name: str) -> logging.Logger:
    """Return the logger for ``module_name`` (pass ``__name__``)."""
    return logging.getLogger(module_name)


def get_operation_logger(operation: str) -> logging.Logger:
    """Return the logger of one area: converters, terminology or backend.

    Raises:
        ValueError: If the area is unknown
    """
    if operation not in OPERATION_LOGGERS:
        raise ValueError(
            f"Unknown operation: {operation}. "
            f"Must be one of: {', '.join(OPERATION_LOGGERS.keys())}"
        )
    return logging.getLogger(OPERATION_LOGGERS[operation])


def configure_operation_logging(
    converters_log_level: str = "INFO",
    terminology_log_level: str = "INFO",
    backend_log_level: str = "WARNING",
) -> None:
    """Set the log level of each area.

    Raises:
        ValueError: If any log level is invalid

    Example:
        >>> configure_operation_logging(converters_log_level="DEBUG")
    """
    levels = {
        "converters": converters_log_level,
        "terminology": terminology_log_level,
        "backend": backend_log_level,
    }
    for operation, level in levels.items():
        numeric_level = _numeric_level(level, what=f"log level for {operation}")
        get_operation_logger(operation).setLevel(numeric_level)
        logger.debug("Set %s logger level to %s", OPERATION_LOGGERS[operation], level.upper())


def configure_operation_logging_from_config(config: "OperationLoggingConfig") -> None:
    configure_operation_logging(
        converters_log_level=config.converters_log_level,
        terminology_log_level=config.terminology_log_level,
        backend_log_level=config.backend_log_level,
    )
