"""Audit trail for conversions and backend requests."""

import time
import uuid
from typing import Any, Dict

from .logger import get_logger

logger = get_logger(__name__)

FIELD_ORDER = [
    "status",
    "resource_kind",
    "direction",
    "input_file",
    "item_count",
    "ignored_count",
    "duration",
    "error_message",
    "correlation_id",
]


def log_audit_event(event_type: str, details: Dict[str, Any]) -> None:
    """Log a structured audit line.

    Failures (``status == "failure"``) are logged at ERROR, everything else
    at INFO. A timestamp and a correlation id are added when missing.

    Args:
        event_type: Event name, e.g. ``CONVERSION_COMPLETED``
        details: Event fields; see ``FIELD_ORDER`` for the common ones

    Example:
        >>> log_audit_event("CONVERSION_COMPLETED", {
        ...     "status": "success",
        ...     "resource_kind": "practitioner",
        ...     "direction": "to-object",
        ...     "item_count": 2,
        ...     "ignored_count": 1,
        ... })
    """
    details.setdefault("timestamp", time.time())
    details.setdefault("correlation_id", str(uuid.uuid4()))

    message_parts = [f"AUDIT [{event_type}]"]
    for field in FIELD_ORDER:
        if field in details:
            value = details[field]
            if field == "duration" and isinstance(value, (int, float)):
                message_parts.append(f"{field}={value:.2f}s")
            else:
                message_parts.append(f"{field}={value}")
    for key, value in details.items():
        if key not in FIELD_ORDER and key != "timestamp":
            message_parts.append(f"{key}={value}")

    audit_message = " | ".join(message_parts)
    if details.get("status") == "failure":
        logger.error(audit_message)
    else:
        logger.info(audit_message)


def log_transaction(
    transaction_type: str,
    request: str,
    response: str,
    status: str = "success",
) -> None:
    """Log one backend request and its response.

    The summary is logged at INFO, the full request and response at DEBUG.

    Example:
        >>> log_transaction("GET_SUBTREE", "GET /getSubTree?paths=...", '{"success": true}')
    """
    correlation_id = str(uuid.uuid4())
    logger.info(
        f"TRANSACTION [{transaction_type}] | "
        f"status={status} | "
        f"correlation_id={correlation_id} | "
        f"request_size={len(request)} bytes | "
        f"response_size={len(response)} bytes"
    )
    logger.debug(
        f"TRANSACTION REQUEST [{transaction_type}] | correlation_id={correlation_id}\n{request}"
    )
    logger.debug(
        f"TRANSACTION RESPONSE [{transaction_type}] | correlation_id={correlation_id}\n{response}"
    )
