"""Transport to the document backend."""

from pio_mapper.transport.backend_client import DocumentBackendClient
from pio_mapper.transport.http_client import ConnectionPool, ConnectionPoolConfig

__all__ = ["ConnectionPool", "ConnectionPoolConfig", "DocumentBackendClient"]
