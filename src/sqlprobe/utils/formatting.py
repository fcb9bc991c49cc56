"""Output formatting helpers for SQLProbe."""

from __future__ import annotations

import re

from sqlprobe.utils.patterns import PASSWORD_KV_PATTERN, PASSWORD_URL_PATTERN


def mask_connection_string(raw: str) -> str:
    """Mask passwords in a connection string of either dialect.

    Args:
        raw: URL-style or key-value connection string.

    Returns:
        The string with password values replaced by '***'.
    """
    masked = re.sub(PASSWORD_KV_PATTERN, r"\1***", raw, flags=re.IGNORECASE)
    return re.sub(PASSWORD_URL_PATTERN, r"\1***\2", masked)


def connection_preview(raw: str, length: int = 50) -> str:
    """Return the masked head of a connection string, e.g. for report headers."""
    masked = mask_connection_string(raw)
    if len(masked) <= length:
        return masked
    return masked[:length] + "..."


def truncate(text: str, max_length: int = 80) -> str:
    """Truncate text with ellipsis if longer than max_length."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def status_color(status: str) -> str:
    """Return Rich color name for a probe status."""
    colors = {
        "OK": "bold green",
        "FAILED": "bold red",
        "INVALID": "yellow",
        "NOT_CONFIGURED": "dim",
    }
    return colors.get(status.upper(), "white")


def status_symbol(status: str) -> str:
    """Return a one-character marker for a probe status."""
    symbols = {
        "OK": "✅",
        "FAILED": "❌",
        "INVALID": "⚠️",
        "NOT_CONFIGURED": "➖",
    }
    return symbols.get(status.upper(), "")


def format_percent(value: int | None) -> str:
    """Format a CPU percentage, 'N/A' when unknown."""
    if value is None:
        return "N/A"
    return f"{value}%"
