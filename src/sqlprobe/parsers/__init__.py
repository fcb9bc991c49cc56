"""Connection string parsers for SQLProbe."""

from sqlprobe.parsers.connection_string import (
    ConnectionStringParser,
    Dialect,
    KeyValueForm,
    UrlForm,
    detect_dialect,
    parse_connection_string,
)

__all__ = [
    "ConnectionStringParser",
    "Dialect",
    "KeyValueForm",
    "UrlForm",
    "detect_dialect",
    "parse_connection_string",
]
