"""Configuration sources for server connection strings.

The probe never reads process state directly; it is handed a
``ConfigSource``. ``EnvironmentSource`` covers the usual case of
``SQL_SERVER_<n>_CONNECTION`` variables, optionally loaded from a ``.env``
file.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Mapping

from dotenv import dotenv_values, find_dotenv

from sqlprobe.config import ProbeSettings, ServerTarget

logger = logging.getLogger(__name__)


class ConfigSource(ABC):
    """Abstract key lookup for probe configuration."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value for ``key``, or None if it is not set."""


class MappingSource(ConfigSource):
    """Config source backed by a plain mapping."""

    def __init__(self, values: Mapping[str, str]) -> None:
        self._values = dict(values)

    def get(self, key: str) -> str | None:
        return self._values.get(key)


class EnvironmentSource(ConfigSource):
    """Config source backed by environment variables.

    Values from a .env file fill in keys the environment does not set; the
    process environment itself is not modified.

    Args:
        env_file: Path to a .env file. When omitted and ``environ`` is not
            given, a .env file is searched for from the working directory.
        environ: Mapping to read from; defaults to ``os.environ``.
    """

    def __init__(
        self, env_file: str | None = None, environ: Mapping[str, str] | None = None
    ) -> None:
        if env_file is None and environ is None:
            env_file = find_dotenv(usecwd=True) or None

        file_values: dict[str, str] = {}
        if env_file is not None:
            file_values = {k: v for k, v in dotenv_values(env_file).items() if v is not None}
            logger.debug("Loaded %d value(s) from %s", len(file_values), env_file)

        self._values = {**file_values, **(os.environ if environ is None else environ)}

    def get(self, key: str) -> str | None:
        return self._values.get(key)


def discover_targets(
    source: ConfigSource,
    settings: ProbeSettings | None = None,
    only: int | None = None,
) -> list[ServerTarget]:
    """Collect the server slots to probe.

    Args:
        source: Where connection strings and names are read from.
        settings: Key templates and slot limit.
        only: A single slot number. When given, the slot is returned even
            if it has no connection string so that it can be reported as
            not configured.

    Returns:
        ServerTargets in slot order. When scanning, unconfigured slots are
        skipped.
    """
    settings = settings or ProbeSettings()
    numbers = [only] if only is not None else list(range(1, settings.max_servers + 1))

    targets: list[ServerTarget] = []
    for number in numbers:
        raw = source.get(settings.connection_key(number)) or None
        name = source.get(settings.name_key(number)) or f"Server {number}"
        target = ServerTarget(number=number, name=name, raw=raw)
        if only is None and not target.is_configured:
            continue
        targets.append(target)

    logger.debug("Discovered %d server target(s)", len(targets))
    return targets
