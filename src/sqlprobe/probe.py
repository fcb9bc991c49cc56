"""Connection probe: parse, connect, and run diagnostic queries per server."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from sqlprobe.config import ConnectionConfig, ProbeSettings, ServerTarget
from sqlprobe.connectors.base import BaseConnector, QueryError
from sqlprobe.connectors.sqlserver import SQLServerConnector
from sqlprobe.parsers.connection_string import parse_connection_string
from sqlprobe.utils.formatting import connection_preview, truncate

logger = logging.getLogger(__name__)

STATUS_OK = "OK"
STATUS_FAILED = "FAILED"
STATUS_INVALID = "INVALID"
STATUS_NOT_CONFIGURED = "NOT_CONFIGURED"

VERSION_QUERY = "SELECT @@VERSION AS version, @@SERVERNAME AS server_name"

ACTIVE_SESSIONS_QUERY = """
    SELECT COUNT(*) AS count
    FROM sys.dm_exec_sessions
    WHERE is_user_process = 1 AND status = 'running'
"""

CPU_QUERY = """
    SELECT TOP 1
        SQLProcessUtilization AS sql_cpu,
        100 - SystemIdle - SQLProcessUtilization AS other_cpu
    FROM (
        SELECT
            record.value('(./Record/@id)[1]', 'int') AS record_id,
            record.value('(./Record/SchedulerMonitorEvent/SystemHealth/SystemIdle)[1]', 'int')
                AS SystemIdle,
            record.value(
                '(./Record/SchedulerMonitorEvent/SystemHealth/ProcessUtilization)[1]', 'int'
            ) AS SQLProcessUtilization
        FROM (
            SELECT CAST(record AS xml) AS record
            FROM sys.dm_os_ring_buffers
            WHERE ring_buffer_type = N'RING_BUFFER_SCHEDULER_MONITOR'
              AND record LIKE '%<SystemHealth>%'
        ) AS x
    ) AS y
    ORDER BY record_id DESC
"""

TROUBLESHOOTING_HINTS = [
    "Check if SQL Server is running",
    "Check if username/password are correct",
    "Check if server accepts remote connections",
    "Check if firewall allows the configured port",
    "Check if SQL Server Authentication is enabled",
]

ConnectorFactory = Callable[[ConnectionConfig, ProbeSettings], BaseConnector]


@dataclass
class ProbeResult:
    """Outcome of probing one server slot."""

    number: int = 0
    name: str = ""
    status: str = STATUS_NOT_CONFIGURED
    preview: str = ""
    config: ConnectionConfig | None = None
    server_name: str = ""
    version: str = ""
    active_sessions: int | None = None
    sql_cpu: int | None = None
    other_cpu: int | None = None
    cpu_supported: bool = False
    error: str = ""
    errors: list[str] = field(default_factory=list)
    hints: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status == STATUS_OK

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly dict with the password masked."""
        return {
            "number": self.number,
            "name": self.name,
            "status": self.status,
            "connection_preview": self.preview,
            "config": self.config.to_dict() if self.config else None,
            "server_name": self.server_name,
            "version": self.version,
            "active_sessions": self.active_sessions,
            "cpu": {
                "supported": self.cpu_supported,
                "sql": self.sql_cpu,
                "other": self.other_cpu,
            },
            "error": self.error,
            "errors": self.errors,
        }


class ConnectionProbe:
    """Runs the connection check for configured server slots.

    Per-server failures are captured in the ProbeResult; they never abort
    the run.

    Args:
        settings: Probe settings (timeouts, driver name, preview length).
        connector_factory: Builds a connector from a parsed config; defaults
            to SQLServerConnector.
    """

    def __init__(
        self,
        settings: ProbeSettings | None = None,
        connector_factory: ConnectorFactory | None = None,
    ) -> None:
        self.settings = settings or ProbeSettings()
        self.connector_factory = connector_factory or SQLServerConnector

    def probe_all(self, targets: list[ServerTarget]) -> list[ProbeResult]:
        """Probe each target in order."""
        return [self.probe(target) for target in targets]

    def probe(self, target: ServerTarget) -> ProbeResult:
        """Parse the target's connection string, connect, and query diagnostics."""
        result = ProbeResult(number=target.number, name=target.name)

        config = parse_connection_string(target.raw) if target.is_configured else None
        if config is None:
            logger.info("%s: connection string not configured", target.name)
            return result

        result.preview = connection_preview(target.raw or "", self.settings.preview_length)
        result.config = config

        errors = config.validate()
        if errors:
            logger.warning("%s: invalid connection settings: %s", target.name, "; ".join(errors))
            result.status = STATUS_INVALID
            result.errors = errors
            return result

        connector = self.connector_factory(config, self.settings)
        try:
            with connector:
                self._run_diagnostics(connector, result)
        except (ConnectionError, QueryError) as exc:
            logger.warning("%s: connection check failed: %s", target.name, exc)
            result.status = STATUS_FAILED
            result.error = str(exc)
            result.hints = list(TROUBLESHOOTING_HINTS)
            return result

        result.status = STATUS_OK
        return result

    def _run_diagnostics(self, connector: BaseConnector, result: ProbeResult) -> None:
        rows = connector.execute_query(VERSION_QUERY)
        if rows:
            result.server_name = str(rows[0].get("server_name") or "")
            result.version = truncate(str(rows[0].get("version") or ""), 100)

        rows = connector.execute_query(ACTIVE_SESSIONS_QUERY)
        result.active_sessions = int(rows[0]["count"]) if rows else 0

        # Ring buffer XML is not available on every edition/version.
        try:
            rows = connector.execute_query(CPU_QUERY)
        except QueryError as exc:
            logger.info("CPU query not supported: %s", exc)
            result.cpu_supported = False
            return

        result.cpu_supported = True
        if rows:
            result.sql_cpu = rows[0].get("sql_cpu") or 0
            result.other_cpu = rows[0].get("other_cpu")
        else:
            result.sql_cpu = 0
