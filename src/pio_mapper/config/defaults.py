"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "terminology": {
        # None selects the value set table shipped with the package
        "value_set_file": None,
    },
    "backend": {
        # Offline by default; unresolved codes stay unresolved
        "enabled": False,
        "base_url": "http://localhost:8080/api/",
        "connect_timeout": 5.0,
        "read_timeout": 30.0,
        "max_retries": 3,
        "backoff_factor": 0.3,
        "verify_tls": True,
    },
    "logging": {
        "level": "INFO",
        "log_file": "logs/pio-mapper.log",
        # Do not redact PII by default (user must opt-in for privacy)
        "redact_pii": False,
    },
    "operation_logging": {
        "converters_log_level": "INFO",
        "terminology_log_level": "INFO",
        "backend_log_level": "WARNING",
    },
}

DEFAULT_CONFIG_PATH = "config/config.json"
