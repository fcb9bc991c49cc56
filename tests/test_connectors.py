"""Tests for BaseConnector and the pyodbc-backed SQLServerConnector."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from sqlprobe.config import ConnectionConfig, ProbeSettings
from sqlprobe.connectors.base import BaseConnector, QueryError
from sqlprobe.connectors.sqlserver import SQLServerConnector, quote_odbc_value


class ConcreteConnector(BaseConnector):
    """Minimal concrete implementation for testing the base class."""

    def connect(self) -> None:
        self._connection = "active"

    def disconnect(self) -> None:
        self._connection = None

    def execute_query(self, query, params=None):  # type: ignore[override]
        return []


class FakeOdbcError(Exception):
    """Stands in for pyodbc.Error."""


def _mock_pyodbc() -> MagicMock:
    mock_pyodbc = MagicMock()
    mock_pyodbc.Error = FakeOdbcError
    return mock_pyodbc


@pytest.fixture
def config() -> ConnectionConfig:
    return ConnectionConfig(
        user="sa",
        password="secret",
        server="myhost",
        port=1500,
        database="TestDB",
    )


class TestBaseConnector:
    def test_is_connected_false_initially(self, config: ConnectionConfig) -> None:
        assert ConcreteConnector(config).is_connected is False

    def test_context_manager_connects_and_disconnects(self, config: ConnectionConfig) -> None:
        conn = ConcreteConnector(config)
        with conn:
            assert conn.is_connected is True
        assert conn.is_connected is False

    def test_context_manager_disconnects_on_exception(self, config: ConnectionConfig) -> None:
        conn = ConcreteConnector(config)
        with pytest.raises(ValueError):
            with conn:
                raise ValueError("test error")
        assert conn.is_connected is False

    def test_config_stored(self, config: ConnectionConfig) -> None:
        assert ConcreteConnector(config).config.database == "TestDB"


class TestQuoteOdbcValue:
    def test_plain_value_unchanged(self) -> None:
        assert quote_odbc_value("myhost") == "myhost"

    def test_reserved_characters_braced(self) -> None:
        assert quote_odbc_value("p;w=d") == "{p;w=d}"

    def test_closing_brace_doubled(self) -> None:
        assert quote_odbc_value("a}b") == "{a}}b}"

    def test_surrounding_spaces_braced(self) -> None:
        assert quote_odbc_value(" pw ") == "{ pw }"


class TestSQLServerConnector:
    def test_build_connection_string(self, config: ConnectionConfig) -> None:
        conn_str = SQLServerConnector(config)._build_connection_string()
        parts = conn_str.split(";")

        assert parts[0] == "DRIVER={ODBC Driver 17 for SQL Server}"
        assert "SERVER=myhost,1500" in parts
        assert "DATABASE=TestDB" in parts
        assert "UID=sa" in parts
        assert "PWD=secret" in parts
        assert "Encrypt=no" in parts
        assert "TrustServerCertificate=yes" in parts

    def test_build_connection_string_flags_and_driver(self) -> None:
        config = ConnectionConfig(server="h", encrypt=True, trust_server_certificate=False)
        settings = ProbeSettings(odbc_driver="ODBC Driver 18 for SQL Server")
        conn_str = SQLServerConnector(config, settings)._build_connection_string()

        assert "DRIVER={ODBC Driver 18 for SQL Server}" in conn_str
        assert "Encrypt=yes" in conn_str
        assert "TrustServerCertificate=no" in conn_str

    def test_build_connection_string_quotes_password(self) -> None:
        config = ConnectionConfig(server="h", password="p;w")
        conn_str = SQLServerConnector(config)._build_connection_string()
        assert "PWD={p;w}" in conn_str

    def test_connect_passes_timeout(self, config: ConnectionConfig) -> None:
        connector = SQLServerConnector(config, ProbeSettings(login_timeout=5))
        mock_pyodbc = _mock_pyodbc()
        with patch.dict("sys.modules", {"pyodbc": mock_pyodbc}):
            connector.connect()

        mock_pyodbc.connect.assert_called_once_with(
            connector._build_connection_string(), readonly=True, timeout=5
        )
        assert connector.is_connected is True

    def test_connection_error_wraps_exception(self, config: ConnectionConfig) -> None:
        connector = SQLServerConnector(config)
        mock_pyodbc = _mock_pyodbc()
        mock_pyodbc.connect.side_effect = FakeOdbcError("Connection refused")
        with patch.dict("sys.modules", {"pyodbc": mock_pyodbc}):
            with pytest.raises(ConnectionError, match="Failed to connect"):
                connector.connect()
        assert connector.is_connected is False

    def test_execute_query_without_connection_raises(self, config: ConnectionConfig) -> None:
        with pytest.raises(ConnectionError, match="Not connected"):
            SQLServerConnector(config).execute_query("SELECT 1")

    def test_execute_query_returns_dicts(self, config: ConnectionConfig) -> None:
        connector = SQLServerConnector(config)
        cursor = MagicMock()
        cursor.description = [("count",), ("status",)]
        cursor.fetchall.return_value = [(3, "running")]
        connector._connection = MagicMock()
        connector._connection.cursor.return_value = cursor

        with patch.dict("sys.modules", {"pyodbc": _mock_pyodbc()}):
            rows = connector.execute_query("SELECT 1")

        assert rows == [{"count": 3, "status": "running"}]
        cursor.execute.assert_called_once_with("SELECT 1")
        cursor.close.assert_called_once()

    def test_execute_query_wraps_driver_error(self, config: ConnectionConfig) -> None:
        connector = SQLServerConnector(config)
        cursor = MagicMock()
        cursor.execute.side_effect = FakeOdbcError("Invalid object name")
        connector._connection = MagicMock()
        connector._connection.cursor.return_value = cursor

        with patch.dict("sys.modules", {"pyodbc": _mock_pyodbc()}):
            with pytest.raises(QueryError, match="Invalid object name"):
                connector.execute_query("SELECT * FROM nope")

        cursor.close.assert_called_once()

    def test_disconnect_closes_connection(self, config: ConnectionConfig) -> None:
        connector = SQLServerConnector(config)
        handle = MagicMock()
        connector._connection = handle
        with patch.dict("sys.modules", {"pyodbc": _mock_pyodbc()}):
            connector.disconnect()

        handle.close.assert_called_once()
        assert connector.is_connected is False

    def test_disconnect_wraps_driver_error(self, config: ConnectionConfig) -> None:
        connector = SQLServerConnector(config)
        handle = MagicMock()
        handle.close.side_effect = FakeOdbcError("link down")
        connector._connection = handle

        with patch.dict("sys.modules", {"pyodbc": _mock_pyodbc()}):
            with pytest.raises(ConnectionError, match="link down"):
                connector.disconnect()

        assert connector.is_connected is False

    def test_disconnect_without_connection_is_noop(self, config: ConnectionConfig) -> None:
        connector = SQLServerConnector(config)
        connector.disconnect()
        assert connector.is_connected is False
