"""Adapter configuration loading helpers."""

from __future__ import annotations

from pathlib import Path

import tomllib

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILE = Path.home() / ".config" / "ifxbridge" / "config.toml"


class ConnectionConfig(BaseModel):
    """Connection parameters supplied by the caller; never mutated by the adapter."""

    model_config = ConfigDict(frozen=True)

    hostname: str = ""
    port: int | None = None
    database: str = ""
    username: str = ""
    password: str = Field(default="", repr=False)
    charset: str | None = None
    server: str | None = None
    dsn: str | None = None
    db_prefix: str = ""
    delete_hack: bool = True
    debug: bool = False

    @field_validator("port")
    @classmethod
    def _non_positive_port_is_unset(cls, value: int | None) -> int | None:
        # The DSN carries a port only when it is positive.
        if value is not None and value <= 0:
            return None
        return value


class NamedConnectionConfig(ConnectionConfig):
    """Connection entry stored in config.toml."""

    name: str


class AdapterConfig(BaseModel):
    """Shape of the configuration file."""

    connections: list[NamedConnectionConfig] = Field(default_factory=list)
    default_connection: str | None = None
    log_level: str = "WARNING"

    def connection(self, name: str | None = None) -> NamedConnectionConfig:
        """Return the named connection, else the default, else the first entry."""

        wanted = name or self.default_connection
        if wanted is None:
            if not self.connections:
                raise ValueError("No connections configured.")
            return self.connections[0]
        for entry in self.connections:
            if entry.name == wanted:
                return entry
        raise ValueError(f"Connection '{wanted}' not found.")

    def with_default_connection(self, name: str) -> AdapterConfig:
        """Return a copy with the default connection updated."""

        return self.model_copy(update={"default_connection": name})


def load_config(path: Path | None = None) -> AdapterConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file(path or CONFIG_FILE)
    except FileNotFoundError:
        return AdapterConfig()
    except (tomllib.TOMLDecodeError, OSError):
        return AdapterConfig()

    return AdapterConfig(
        connections=[NamedConnectionConfig(**entry) for entry in data.get("connections", [])],
        default_connection=data.get("default_connection"),
        log_level=data.get("log_level", AdapterConfig.model_fields["log_level"].default),
    )


_STRING_KEYS = ("name", "hostname", "database", "username", "password", "charset", "server", "dsn", "db_prefix")
_BOOL_KEYS = ("delete_hack", "debug")


def _read_config_file(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    default = raw.get("default_connection")
    if isinstance(default, str):
        data["default_connection"] = default
    log_level = raw.get("log_level")
    if isinstance(log_level, str):
        data["log_level"] = log_level.upper()
    connections = raw.get("connections")
    if isinstance(connections, list):
        parsed_connections: list[dict[str, object]] = []
        for entry in connections:
            if not isinstance(entry, dict):
                continue
            parsed: dict[str, object] = {}
            for key in _STRING_KEYS:
                value = entry.get(key)
                if isinstance(value, str):
                    parsed[key] = value
            for key in _BOOL_KEYS:
                value = entry.get(key)
                if isinstance(value, bool):
                    parsed[key] = value
            port = entry.get("port")
            if isinstance(port, int) and not isinstance(port, bool) and port > 0:
                parsed["port"] = port
            if parsed.get("name"):
                parsed_connections.append(parsed)
        data["connections"] = parsed_connections
    return data


__all__ = [
    "AdapterConfig",
    "CONFIG_FILE",
    "ConnectionConfig",
    "NamedConnectionConfig",
    "load_config",
]
