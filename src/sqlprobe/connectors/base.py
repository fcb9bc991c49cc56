"""Abstract base connector for database connections."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from sqlprobe.config import ConnectionConfig

logger = logging.getLogger(__name__)


class QueryError(RuntimeError):
    """Raised when a query fails on an open connection."""


class BaseConnector(ABC):
    """Abstract base class for database connectors.

    Connectors only run the read-only diagnostic queries issued by the
    probe; they never modify the database.
    """

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._connection: Any = None

    @abstractmethod
    def connect(self) -> None:
        """Establish a connection to the database."""

    @abstractmethod
    def disconnect(self) -> None:
        """Close the database connection."""

    @abstractmethod
    def execute_query(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> list[dict[str, Any]]:
        """Execute a SELECT query and return results as list of dicts."""

    @property
    def is_connected(self) -> bool:
        """Check if the connector has an active connection."""
        return self._connection is not None

    def __enter__(self) -> BaseConnector:
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.disconnect()
