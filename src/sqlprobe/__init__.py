"""SQLProbe — SQL Server connection tester.

Parses SQL Server connection strings in URL (``mssql://user:pw@host/db``)
or key-value (``Server=host,1433;Database=db;...``) form into a normalized
ConnectionConfig, then checks each configured server with a few
diagnostic queries.
"""

from __future__ import annotations

__version__ = "1.0.0"

from sqlprobe.config import ConnectionConfig, ProbeSettings, ServerTarget
from sqlprobe.parsers.connection_string import ConnectionStringParser, parse_connection_string

__all__ = [
    "ConnectionConfig",
    "ConnectionStringParser",
    "ProbeSettings",
    "ServerTarget",
    "__version__",
    "parse_connection_string",
]
