"""Database connectors for SQLProbe."""

from sqlprobe.connectors.base import BaseConnector, QueryError
from sqlprobe.connectors.sqlserver import SQLServerConnector

__all__ = ["BaseConnector", "QueryError", "SQLServerConnector"]
