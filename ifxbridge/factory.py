"""Build adapters from the on-disk configuration."""

from __future__ import annotations

import logging
from pathlib import Path

from .config import AdapterConfig, load_config
from .connection import InformixConnection
from .native import NativeClient

LOG = logging.getLogger(__name__)

PACKAGE_LOGGER = "ifxbridge"


def open_connection(
    name: str | None = None,
    *,
    config: AdapterConfig | None = None,
    path: Path | None = None,
    client: NativeClient | None = None,
    connect: bool = True,
) -> InformixConnection:
    """Create an adapter for the named (or default) connection entry.

    ``config`` wins over ``path``; with neither, the user config file is read.
    """

    settings = config if config is not None else load_config(path)
    logging.getLogger(PACKAGE_LOGGER).setLevel(settings.log_level)
    entry = settings.connection(name)
    LOG.debug("Using connection entry", extra={"connection": entry.name})
    adapter = InformixConnection(entry, client=client)
    if connect:
        adapter.initialize()
    return adapter


__all__ = ["PACKAGE_LOGGER", "open_connection"]
