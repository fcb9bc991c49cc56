"""Configuration records for SQLProbe connections and probe runs."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

DEFAULT_PORT = 1433
DEFAULT_DATABASE = "master"

# Stand-in for an unparseable port fragment; outside the valid 1-65535 range.
INVALID_PORT = 0


@dataclass(frozen=True)
class ConnectionConfig:
    """Normalized SQL Server connection configuration.

    Produced by the connection string parser. Every field always carries a
    value; a degraded parse shows up as defaults (empty server) or as
    ``INVALID_PORT``, never as a missing field.

    Attributes:
        user: Login name.
        password: Login password (never logged).
        server: Server hostname or address.
        port: TCP port, ``INVALID_PORT`` when the port fragment was malformed.
        database: Initial database.
        encrypt: Request an encrypted connection.
        trust_server_certificate: Skip server certificate validation.
    """

    user: str = ""
    password: str = ""
    server: str = ""
    port: int = DEFAULT_PORT
    database: str = DEFAULT_DATABASE
    encrypt: bool = False
    trust_server_certificate: bool = True

    def __repr__(self) -> str:
        """Return string representation with password masked."""
        return (
            f"ConnectionConfig(user={self.user!r}, password='***', server={self.server!r}, "
            f"port={self.port}, database={self.database!r}, encrypt={self.encrypt}, "
            f"trust_server_certificate={self.trust_server_certificate})"
        )

    @property
    def has_valid_port(self) -> bool:
        return 1 <= self.port <= 65535

    def get_masked_connection_info(self) -> str:
        """Return connection info with password masked for logging."""
        return f"{self.user}:***@{self.server}:{self.port}/{self.database}"

    def validate(self) -> list[str]:
        """Validate configuration before connecting and return list of errors."""
        errors: list[str] = []
        if not self.server:
            errors.append("Server is required")
        if not self.has_valid_port:
            errors.append(f"Port must be between 1 and 65535, got {self.port}")
        return errors

    def to_dict(self, mask_password: bool = True) -> dict[str, Any]:
        """Return a plain dict of the fields, password masked by default."""
        data = asdict(self)
        if mask_password:
            data["password"] = "***" if self.password else ""
        return data


@dataclass(frozen=True)
class ServerTarget:
    """One configured server slot.

    Attributes:
        number: Slot number (1-based).
        name: Display name for reports.
        raw: Unparsed connection string, or None if the slot is not configured.
    """

    number: int
    name: str
    raw: str | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.raw)


@dataclass
class ProbeSettings:
    """Settings for a probe run.

    Attributes:
        max_servers: Highest slot number scanned when no slot is given.
        connection_var: Config key template for a slot's connection string.
        name_var: Config key template for a slot's display name.
        login_timeout: Login timeout in seconds passed to the ODBC driver.
        odbc_driver: ODBC driver name used in the generated connection string.
        preview_length: Characters of the raw connection string shown in reports.
    """

    max_servers: int = 6
    connection_var: str = "SQL_SERVER_{n}_CONNECTION"
    name_var: str = "SQL_SERVER_{n}_NAME"
    login_timeout: int = 15
    odbc_driver: str = "ODBC Driver 17 for SQL Server"
    preview_length: int = 50

    def connection_key(self, number: int) -> str:
        return self.connection_var.format(n=number)

    def name_key(self, number: int) -> str:
        return self.name_var.format(n=number)
