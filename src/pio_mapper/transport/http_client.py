"""Pooled HTTP session for document backend requests.

The backend fallback of the terminology resolver may run from worker
threads, so the session is created lazily under a lock and shared.
"""

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONNECTIONS = 4
DEFAULT_RETRY_COUNT = 3
DEFAULT_BACKOFF_FACTOR = 0.3
RETRY_STATUS_CODES = [429, 500, 502, 503, 504]


@dataclass
class ConnectionPoolConfig:
    """Configuration of the backend connection pool.

    Attributes:
        max_connections: Maximum number of pooled connections (>= 1)
        retry_count: Retries for failed idempotent requests (>= 0)
        backoff_factor: Exponential backoff factor between retries (>= 0)
        verify_tls: Verify the backend's TLS certificate

    Example:
        >>> pool = ConnectionPool(ConnectionPoolConfig(retry_count=5))
        >>> session = pool.get_session()
    """

    max_connections: int = DEFAULT_MAX_CONNECTIONS
    retry_count: int = DEFAULT_RETRY_COUNT
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    verify_tls: bool = True

    def __post_init__(self) -> None:
        if self.max_connections < 1:
            raise ValueError(f"max_connections must be >= 1, got {self.max_connections}")
        if self.retry_count < 0:
            raise ValueError(f"retry_count must be >= 0, got {self.retry_count}")
        if self.backoff_factor < 0:
            raise ValueError(f"backoff_factor must be >= 0, got {self.backoff_factor}")


class ConnectionPool:
    """Lazily created, thread-safe ``requests`` session with retries.

    Example:
        >>> with ConnectionPool() as pool:
        ...     response = pool.get_session().get(url, timeout=10)
    """

    def __init__(self, config: Optional[ConnectionPoolConfig] = None) -> None:
        self.config = config or ConnectionPoolConfig()
        self._session: Optional[requests.Session] = None
        self._lock = Lock()

    def get_session(self) -> requests.Session:
        """Return the shared session, creating it on first use."""
        with self._lock:
            if self._session is None:
                self._session = self._create_session()
            return self._session

    def _create_session(self) -> requests.Session:
        retry_strategy = Retry(
            total=self.config.retry_count,
            backoff_factor=self.config.backoff_factor,
            status_forcelist=RETRY_STATUS_CODES,
            allowed_methods=["HEAD", "GET", "OPTIONS"],
        )
        adapter = HTTPAdapter(
            pool_connections=self.config.max_connections,
            pool_maxsize=self.config.max_connections,
            max_retries=retry_strategy,
        )

        session = requests.Session()
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.verify = self.config.verify_tls

        logger.info(
            "Created HTTP session with pool_maxsize=%d, retry_count=%d, verify_tls=%s",
            self.config.max_connections,
            self.config.retry_count,
            self.config.verify_tls,
        )
        return session

    def close(self) -> None:
        """Close the session; the next ``get_session`` creates a new one."""
        with self._lock:
            if self._session is not None:
                self._session.close()
                self._session = None
                logger.debug("ConnectionPool session closed")

    def __enter__(self) -> "ConnectionPool":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
