"""Native client protocol and a bridge to PEP 249 Informix drivers."""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from enum import Enum
from types import ModuleType
from typing import Any, Protocol, runtime_checkable

from .dsn import DsnParts, parse_dsn
from .models import ErrorInfo

LOG = logging.getLogger(__name__)

DEFAULT_DRIVER = "IfxPyDbi"


class NativeDriverError(RuntimeError):
    """Error raised by a native client, normalized to a code and message."""

    def __init__(self, code: int | str | None, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


class Case(str, Enum):
    """How result column names are cased."""

    NATURAL = "natural"
    LOWER = "lower"
    UPPER = "upper"


@dataclass(frozen=True, slots=True)
class OpenOptions:
    """Options passed to :meth:`NativeClient.open`."""

    raise_on_error: bool = True
    case: Case = Case.NATURAL
    persistent: bool = False
    server: str | None = None


@runtime_checkable
class NativeResult(Protocol):
    """Result handle returned by :meth:`NativeConnection.query`."""

    def row_count(self) -> int:
        """Rows affected by the statement."""

    def fetch_all(self) -> list[dict[str, Any]]:
        """Remaining rows keyed by column name."""

    def fetch_one(self) -> dict[str, Any] | None:
        """Next row, or ``None`` when exhausted."""


@runtime_checkable
class NativeConnection(Protocol):
    """A live native connection."""

    connect_error: ErrorInfo | None
    last_error: ErrorInfo | None

    def query(self, sql: str) -> NativeResult: ...

    def error_code(self) -> int | str | None: ...

    def autocommit(self, enabled: bool) -> None: ...

    def begin_transaction(self) -> bool: ...

    def commit(self) -> bool: ...

    def rollback(self) -> bool: ...

    def close(self) -> None: ...


@runtime_checkable
class NativeClient(Protocol):
    """Factory for native connections."""

    def open(self, dsn: str, username: str, password: str, options: OpenOptions) -> NativeConnection:
        """Open a connection or raise :class:`NativeDriverError`."""


class DbapiResult:
    """Wraps a DB-API cursor."""

    def __init__(self, cursor: Any, case: Case = Case.NATURAL) -> None:
        self._cursor = cursor
        self._case = case

    def row_count(self) -> int:
        count = getattr(self._cursor, "rowcount", -1)
        return count if isinstance(count, int) and count > 0 else 0

    def fetch_all(self) -> list[dict[str, Any]]:
        if not self._cursor.description:
            return []
        names = self._column_names()
        return [dict(zip(names, row)) for row in self._cursor.fetchall()]

    def fetch_one(self) -> dict[str, Any] | None:
        if not self._cursor.description:
            return None
        row = self._cursor.fetchone()
        if row is None:
            return None
        return dict(zip(self._column_names(), row))

    def _column_names(self) -> list[str]:
        names = [str(column[0]) for column in self._cursor.description]
        if self._case is Case.LOWER:
            return [name.lower() for name in names]
        if self._case is Case.UPPER:
            return [name.upper() for name in names]
        return names


class DbapiConnection:
    """:class:`NativeConnection` over a DB-API connection object."""

    def __init__(self, module: ModuleType, connection: Any, options: OpenOptions) -> None:
        self._module = module
        self._connection = connection
        self._options = options
        self._in_transaction = False
        self.connect_error: ErrorInfo | None = None
        self.last_error: ErrorInfo | None = None

    def query(self, sql: str) -> DbapiResult:
        cursor = self._connection.cursor()
        try:
            cursor.execute(sql)
        except self._module.Error as exc:
            cursor.close()
            raise self._record(exc) from exc
        self.last_error = None
        return DbapiResult(cursor, self._options.case)

    def error_code(self) -> int | str | None:
        return self.last_error.code if self.last_error else None

    def autocommit(self, enabled: bool) -> None:
        try:
            if hasattr(self._connection, "set_autocommit"):
                self._connection.set_autocommit(enabled)
            else:
                self._connection.autocommit = enabled
        except self._module.Error as exc:
            raise self._record(exc) from exc

    def begin_transaction(self) -> bool:
        # DB-API opens transactions implicitly once autocommit is off.
        if self._in_transaction:
            raise NativeDriverError(None, "There is already an active transaction")
        self._in_transaction = True
        return True

    def commit(self) -> bool:
        try:
            self._connection.commit()
        except self._module.Error as exc:
            raise self._record(exc) from exc
        self._in_transaction = False
        return True

    def rollback(self) -> bool:
        try:
            self._connection.rollback()
        except self._module.Error as exc:
            raise self._record(exc) from exc
        self._in_transaction = False
        return True

    def close(self) -> None:
        try:
            self._connection.close()
        except self._module.Error as exc:
            raise self._record(exc) from exc

    def _record(self, exc: Exception) -> NativeDriverError:
        error = NativeDriverError(_error_code(exc), str(exc))
        self.last_error = ErrorInfo(code=error.code, message=error.message)
        return error


class DbapiNativeClient:
    """Opens connections through a PEP 249 Informix driver module.

    The module is imported on the first :meth:`open` so the adapter can be
    configured without the driver installed.
    """

    def __init__(self, module: str | ModuleType = DEFAULT_DRIVER) -> None:
        self._module_ref = module
        self._module: ModuleType | None = module if isinstance(module, ModuleType) else None

    def open(self, dsn: str, username: str, password: str, options: OpenOptions) -> DbapiConnection:
        module = self._load_module()
        try:
            parts = parse_dsn(dsn)
        except ValueError as exc:
            raise NativeDriverError(None, str(exc)) from exc
        connection_string = build_connection_string(parts, username, password, server=options.server)
        LOG.debug("Opening DB-API connection", extra={"driver": module.__name__, "dsn": dsn})
        try:
            connection = module.connect(connection_string, "", "")
        except module.Error as exc:
            raise NativeDriverError(_error_code(exc), str(exc)) from exc
        return DbapiConnection(module, connection, options)

    def _load_module(self) -> ModuleType:
        if self._module is None:
            name = str(self._module_ref)
            try:
                self._module = importlib.import_module(name)
            except ImportError as exc:
                raise NativeDriverError(None, f"Informix driver module '{name}' is not installed") from exc
        return self._module


def build_connection_string(parts: DsnParts, username: str, password: str, *, server: str | None = None) -> str:
    """Render the ``KEY=value;`` string Informix DB-API drivers accept."""

    fields: list[tuple[str, object]] = [
        ("SERVER", server),
        ("DATABASE", parts.database),
        ("HOST", parts.host),
        ("SERVICE", parts.port),
        ("UID", username),
        ("PWD", password),
        ("CLIENT_LOCALE", parts.charset),
    ]
    return "".join(f"{key}={_quote_value(value)};" for key, value in fields if value)


def _quote_value(value: object) -> str:
    # Values holding separators or braces go inside braces, with "}" doubled.
    text = str(value)
    if any(char in text for char in ";={}"):
        return "{" + text.replace("}", "}}") + "}"
    return text


def _error_code(exc: BaseException) -> int | str | None:
    for attribute in ("sqlcode", "errno", "code"):
        value = getattr(exc, attribute, None)
        if value is not None:
            return value
    return None


__all__ = [
    "Case",
    "DEFAULT_DRIVER",
    "DbapiConnection",
    "DbapiNativeClient",
    "DbapiResult",
    "NativeClient",
    "NativeConnection",
    "NativeDriverError",
    "NativeResult",
    "OpenOptions",
    "build_connection_string",
]
