"""SQL Server database connector using pyodbc."""

from __future__ import annotations

import logging
from typing import Any

from sqlprobe.config import ConnectionConfig, ProbeSettings
from sqlprobe.connectors.base import BaseConnector, QueryError

logger = logging.getLogger(__name__)

_SPECIAL_CHARS = set(";{}=")


def quote_odbc_value(value: str) -> str:
    """Brace an ODBC attribute value when it contains reserved characters."""
    if value != value.strip() or any(ch in _SPECIAL_CHARS for ch in value):
        return "{" + value.replace("}", "}}") + "}"
    return value


class SQLServerConnector(BaseConnector):
    """Connector for Microsoft SQL Server databases.

    Uses pyodbc for database connectivity. All operations are read-only.
    """

    def __init__(self, config: ConnectionConfig, settings: ProbeSettings | None = None) -> None:
        super().__init__(config)
        self.settings = settings or ProbeSettings()

    def _build_connection_string(self) -> str:
        """Build ODBC connection string from config."""
        parts = [
            f"DRIVER={{{self.settings.odbc_driver}}}",
            f"SERVER={quote_odbc_value(self.config.server)},{self.config.port}",
            f"DATABASE={quote_odbc_value(self.config.database)}",
            f"UID={quote_odbc_value(self.config.user)}",
            f"PWD={quote_odbc_value(self.config.password)}",
            f"Encrypt={'yes' if self.config.encrypt else 'no'}",
            f"TrustServerCertificate={'yes' if self.config.trust_server_certificate else 'no'}",
        ]
        return ";".join(parts)

    def connect(self) -> None:
        """Establish connection to SQL Server."""
        import pyodbc

        conn_str = self._build_connection_string()
        logger.info("Connecting to SQL Server: %s", self.config.get_masked_connection_info())
        try:
            self._connection = pyodbc.connect(
                conn_str, readonly=True, timeout=self.settings.login_timeout
            )
        except pyodbc.Error as exc:
            raise ConnectionError(
                f"Failed to connect to {self.config.server}:{self.config.port}: {exc}"
            ) from exc
        logger.info("Connected successfully")

    def disconnect(self) -> None:
        """Close SQL Server connection.

        The handle is dropped even when closing fails; a driver error on
        close is raised as ConnectionError.
        """
        if self._connection is None:
            return

        import pyodbc

        connection, self._connection = self._connection, None
        try:
            connection.close()
        except pyodbc.Error as exc:
            raise ConnectionError(
                f"Failed to close connection to {self.config.server}:{self.config.port}: {exc}"
            ) from exc
        logger.info("Disconnected from SQL Server")

    def execute_query(
        self, query: str, params: tuple[Any, ...] | None = None
    ) -> list[dict[str, Any]]:
        """Execute a read-only query and return results as list of dicts."""
        if self._connection is None:
            raise ConnectionError("Not connected to database")

        import pyodbc

        cursor = self._connection.cursor()
        try:
            if params:
                cursor.execute(query, params)
            else:
                cursor.execute(query)

            columns = [desc[0] for desc in cursor.description] if cursor.description else []
            rows = cursor.fetchall()
            return [dict(zip(columns, row)) for row in rows]
        except pyodbc.Error as exc:
            raise QueryError(str(exc)) from exc
        finally:
            cursor.close()
