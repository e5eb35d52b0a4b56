"""Client for the document backend.

The backend holds the open document and answers sub-tree queries:

    GET {base_url}getSubTree?paths=<path>&paths=<path>...

    {"success": true, "message": "...", "data": {"subTrees": [<tree JSON>, ...]}}

One sub-tree is returned per requested path, in request order; an absent
path yields a tree without children.
"""

import json
import logging
from typing import Any, Optional

import requests

from pio_mapper.document.tree import SubTree
from pio_mapper.logging_audit import log_transaction
from pio_mapper.models.common import Coding
from pio_mapper.terminology.codes import read_coding
from pio_mapper.transport.http_client import ConnectionPool, ConnectionPoolConfig
from pio_mapper.utils.exceptions import BackendError, TransportError, ValidationError

logger = logging.getLogger(__name__)


class DocumentBackendClient:
    """Synchronous document backend client.

    Satisfies the coding backend protocol of the terminology resolver, which
    calls ``fetch_coding`` from a worker thread.

    Example:
        >>> with DocumentBackendClient("http://localhost:8080/api/") as client:
        ...     trees = client.get_sub_trees(["3f1c...e2.KBV_PR_MIO_ULB_Organization"])
    """

    def __init__(
        self,
        base_url: str,
        pool: Optional[ConnectionPool] = None,
        connect_timeout: float = 5.0,
        read_timeout: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Backend API URL; a trailing slash is added if missing
            pool: Connection pool to use (a default pool if None)
            connect_timeout: Connect timeout in seconds
            read_timeout: Read timeout in seconds
        """
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.pool = pool or ConnectionPool()
        self.timeout = (connect_timeout, read_timeout)

    @classmethod
    def from_config(cls, backend_config: Any) -> "DocumentBackendClient":
        """Build a client from the ``backend`` configuration section."""
        pool = ConnectionPool(
            ConnectionPoolConfig(
                retry_count=backend_config.max_retries,
                backoff_factor=backend_config.backoff_factor,
                verify_tls=backend_config.verify_tls,
            )
        )
        return cls(
            str(backend_config.base_url),
            pool=pool,
            connect_timeout=backend_config.connect_timeout,
            read_timeout=backend_config.read_timeout,
        )

    def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        url = self.base_url + endpoint
        try:
            response = self.pool.get_session().get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise TransportError(
                f"Backend request timed out: {url}. "
                f"Check that the backend is running or raise backend.read_timeout."
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise TransportError(
                f"Cannot connect to backend at {self.base_url}. "
                f"Check backend.base_url and that the backend is running."
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Backend request failed: {url}: {e}") from e

        log_transaction(endpoint.upper(), f"GET {response.url}", response.text)
        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise BackendError(f"Backend returned a non-JSON response for {url}") from e
        if not isinstance(body, dict) or not body.get("success"):
            message = body.get("message") if isinstance(body, dict) else None
            raise BackendError(f"Backend reported a failure for {url}: {message or 'no message'}")
        return body

    def get_sub_trees(self, paths: list[str]) -> list[SubTree]:
        """Fetch the sub-trees at ``paths``.

        Returns:
            One tree per path, in request order

        Raises:
            TransportError: If the request fails
            BackendError: If the backend reports a failure or answers malformed data
        """
        body = self._get("getSubTree", {"paths": paths})
        raw_trees = (body.get("data") or {}).get("subTrees")
        if not isinstance(raw_trees, list):
            raise BackendError("Backend response carries no data.subTrees list")
        try:
            trees = [SubTree.from_dict(raw) for raw in raw_trees]
        except ValidationError as e:
            raise BackendError(f"Backend returned a malformed sub-tree: {e}") from e
        logger.debug(f"Fetched {len(trees)} sub-trees for {len(paths)} paths")
        return trees

    def fetch_coding(self, path: str, alternate_path: str) -> Optional[Coding]:
        """Return the coding stored at ``path``, else at ``alternate_path``.

        Returns:
            The first coding found, or None if neither path holds one
        """
        for tree in self.get_sub_trees([path, alternate_path]):
            if tree.children:
                return read_coding(tree, "")
        logger.debug(f"No stored coding at {path} or {alternate_path}")
        return None

    def close(self) -> None:
        self.pool.close()

    def __enter__(self) -> "DocumentBackendClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
