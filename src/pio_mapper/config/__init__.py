"""Config module.

This module provides configuration management functionality.
"""

from pio_mapper.config.manager import (
    build_resolver,
    get_backend_config,
    get_logging_config,
    load_config,
)
from pio_mapper.config.schema import (
    BackendConfig,
    Config,
    LoggingConfig,
    OperationLoggingConfig,
    TerminologyConfig,
)

__all__ = [
    # Main configuration loading
    "load_config",
    "build_resolver",
    # Helper functions
    "get_backend_config",
    "get_logging_config",
    # Configuration models
    "Config",
    "TerminologyConfig",
    "BackendConfig",
    "LoggingConfig",
    "OperationLoggingConfig",
]
