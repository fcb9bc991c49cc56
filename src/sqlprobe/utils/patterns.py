"""Regex patterns and key tables for connection string parsing.

Patterns are stored as raw strings for use with re.search/re.match.
"""

from __future__ import annotations

# Prefix that selects the URL dialect (case-sensitive, matched untrimmed)
URL_DIALECT_PREFIX = "mssql"

# mssql[+driver]://user:password@host[:port][/database]
URL_PATTERN = r"mssql\+?[^:]*://([^:]+):([^@]+)@([^:/]+)(?::([0-9]+))?(?:/(.+))?"

# Leading integer of a port fragment, e.g. " 1500" or "1500x"
PORT_PREFIX_PATTERN = r"\s*\+?([0-9]+)"

# Ports are at most 65535
MAX_PORT_DIGITS = 5

# Query parameters recognized in the URL dialect (case-sensitive)
URL_QUERY_FLAGS = {
    "Encrypt": "encrypt",
    "TrustServerCertificate": "trust_server_certificate",
}

# Key-value dialect aliases, lowercased
KEY_ALIASES = {
    "server": "server",
    "data source": "server",
    "database": "database",
    "initial catalog": "database",
    "user id": "user",
    "uid": "user",
    "user": "user",
    "password": "password",
    "pwd": "password",
    "encrypt": "encrypt",
    "trustservercertificate": "trust_server_certificate",
}

URL_TRUTHY = frozenset({"yes"})
KEY_VALUE_TRUTHY = frozenset({"true", "yes"})

# Password assignments in either dialect, for masking in logs and reports
PASSWORD_KV_PATTERN = r"((?:password|pwd)\s*=\s*)[^;]*"
PASSWORD_URL_PATTERN = r"(://[^:/@]+:)[^@]+(@)"
