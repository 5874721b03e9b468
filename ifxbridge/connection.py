"""Informix connection adapter used by the generic query layer."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from typing import Any, Iterator

from . import escaping
from .config import ConnectionConfig
from .dsn import build_dsn
from .errors import (
    FAIL_GET_FIELD_DATA,
    FAIL_GET_FOREIGN_KEY_DATA,
    FAIL_GET_INDEX_DATA,
    FAIL_GET_INSERT_ID,
    ConnectError,
    DatabaseError,
    MetadataQueryError,
    QueryExecutionError,
    redact_credentials,
)
from .introspection import queries
from .introspection.typecodes import TypeCodeTable
from .models import ColumnDescriptor, ErrorInfo, ForeignKeyDescriptor, IndexDescriptor, Row
from .native import (
    Case,
    DbapiNativeClient,
    NativeClient,
    NativeConnection,
    NativeDriverError,
    NativeResult,
    OpenOptions,
)

LOG = logging.getLogger(__name__)

# Informix reports zero affected rows for an unconditional DELETE.
_BARE_DELETE = re.compile(r"^\s*DELETE\s+FROM\s+(\S+)\s*$", re.IGNORECASE)

# The server has no session-level switch for foreign key checks.
_FOREIGN_KEY_CHECKS_SQL = ""


class InformixConnection:
    """One Informix session: a native handle, its DSN and a small metadata cache.

    Not safe for concurrent use; callers serialize access to an instance.
    """

    driver = "Informix"
    like_escape_char = escaping.LIKE_ESCAPE_CHAR

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        client: NativeClient | None = None,
        type_table: TypeCodeTable | None = None,
    ) -> None:
        self._config = config
        self._client = client or DbapiNativeClient()
        self._types = type_table or TypeCodeTable.default()
        self._handle: NativeConnection | None = None
        self._result: NativeResult | None = None
        self._connect_error: ErrorInfo | None = None
        self.database = config.database
        self.dsn: str | None = config.dsn or None
        self.data_cache: dict[str, Any] = {}
        self.persistent = False
        self.in_transaction = False

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def handle(self) -> NativeConnection | None:
        """The live native connection, if any."""

        return self._handle

    @property
    def connected(self) -> bool:
        return self._handle is not None

    @property
    def username(self) -> str:
        return self._config.username

    @property
    def db_prefix(self) -> str:
        return self._config.db_prefix

    def __enter__(self) -> InformixConnection:
        self.initialize()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Lifecycle

    def connect(self, persistent: bool = False) -> NativeConnection:
        """Open the native connection, replacing any open one."""

        if self._handle is not None:
            self.close()
        if not self.dsn:
            self.build_dsn()
        assert self.dsn is not None
        options = OpenOptions(
            raise_on_error=True,
            case=Case.NATURAL,
            persistent=persistent,
            server=self._config.server,
        )
        try:
            self._handle = self._client.open(self.dsn, self._config.username, self._config.password, options)
        except NativeDriverError as exc:
            message = self._scrub(f"{exc.message} DSN: {self.dsn}", connecting=True)
            self._connect_error = ErrorInfo(code=exc.code, message=message)
            self._log_failure("Connection failed", exc, dsn=self.dsn)
            raise ConnectError(message, exc.code) from exc
        self._connect_error = None
        self.persistent = persistent
        LOG.debug("Connected", extra={"dsn": self.dsn, "persistent": persistent})
        return self._handle

    def initialize(self) -> None:
        """Connect unless a connection is already open."""

        if self._handle is None:
            self.connect(self.persistent)

    def reconnect(self) -> None:
        """Drop and reopen the connection, e.g. after a server idle timeout."""

        LOG.debug("Reconnecting", extra={"dsn": self.dsn})
        self.close()
        self.initialize()

    def close(self) -> None:
        """Release the native connection. Safe to call when already closed."""

        handle, self._handle = self._handle, None
        self._result = None
        self.in_transaction = False
        if handle is None:
            return
        try:
            handle.close()
        except NativeDriverError as exc:
            self._log_failure("Error while closing connection", exc, dsn=self.dsn)
        LOG.debug("Closed connection", extra={"dsn": self.dsn})

    def set_database(self, name: str = "") -> bool:
        """Switch the active database; an empty name re-selects the current one."""

        name = name or self.database
        self.initialize()
        try:
            self.execute(f"DATABASE {escaping.escape_string(name)}")
        except DatabaseError:
            LOG.warning("Could not switch database", extra={"database": name})
            return False
        self.database = name
        self.data_cache.clear()
        if not self._config.dsn:
            self.build_dsn()
        return True

    def build_dsn(self) -> str:
        """Build, store and return the DSN for the current settings."""

        self.dsn = build_dsn(self._config.hostname, self._config.port, self.database, self._config.charset)
        return self.dsn

    # Execution

    def execute(self, sql: str) -> NativeResult:
        """Run ``sql`` on the open connection and return the native result."""

        handle = self._handle
        if handle is None:
            raise QueryExecutionError("No open connection.", sql=sql)
        statement = self.prep_query(sql)
        if self._config.debug:
            LOG.debug("Executing statement", extra={"sql": self._scrub(statement)})
        try:
            result = handle.query(statement)
        except NativeDriverError as exc:
            self._result = None
            code = exc.code if exc.code is not None else handle.error_code()
            message = self._scrub(f"{code} Failed to execute query:\n{sql}\nWith Error:\n{exc.message}")
            self._log_failure("Query failed", exc, sql=self._scrub(sql))
            raise QueryExecutionError(message, code, sql=self._scrub(sql)) from exc
        self._result = result
        return result

    def query(self, sql: str) -> NativeResult:
        """Execute ``sql``, connecting first if needed."""

        self.initialize()
        return self.execute(sql)

    def prep_query(self, sql: str) -> str:
        if self._config.delete_hack and _BARE_DELETE.match(sql):
            return sql.strip() + " WHERE 1=1"
        return sql

    def affected_rows(self) -> int:
        if self._result is None:
            return 0
        return self._result.row_count()

    def insert_id(self, name: str | None = None) -> int:
        """Return the last serial, serial8 or bigserial value generated.

        ``name`` is accepted for interface compatibility and ignored. When
        several counters are positive the later one in sc, s, bs order wins.
        """

        try:
            result = self.query(queries.INSERT_ID_SQL)
        except DatabaseError as exc:
            raise MetadataQueryError(FAIL_GET_INSERT_ID) from exc
        row = result.fetch_one() or {}
        insert_id = 0
        for key in ("sc", "s", "bs"):
            value = _as_int(row.get(key))
            if value > 0:
                insert_id = value
        return insert_id

    def get_version(self) -> str:
        if "version" in self.data_cache:
            return self.data_cache["version"]
        try:
            result = self.query(queries.VERSION_SQL)
        except QueryExecutionError as exc:
            raise QueryExecutionError(
                f"Error getting Informix version:\n{exc}", exc.code, sql=queries.VERSION_SQL
            ) from exc
        row = result.fetch_one() or {}
        version = str(row.get("version") or "").strip()
        self.data_cache["version"] = version
        return version

    # Escaping

    def escape(self, value: object) -> object:
        return escaping.escape(value)

    def escape_string(self, text: str) -> str:
        return escaping.escape_string(text)

    def escape_like_string_direct(self, value: Any) -> Any:
        return escaping.escape_like_string_direct(value, self.like_escape_char)

    # Introspection

    def list_tables_sql(self, prefix_limit: bool = False, table_name: str | None = None) -> str:
        prefix = self.db_prefix if prefix_limit else ""
        return queries.list_tables_sql(self.username, prefix, table_name)

    def list_columns_sql(self, table: str) -> str:
        owner, name = queries.split_owner(table, self.username)
        return queries.list_columns_sql(owner, name, self._types)

    def list_tables(self, prefix_limit: bool = False, table_name: str | None = None) -> list[str]:
        rows = self.query(self.list_tables_sql(prefix_limit, table_name)).fetch_all()
        return [str(row.get("tabname") or "").strip() for row in rows]

    def table_exists(self, name: str) -> bool:
        return bool(self.list_tables(table_name=name))

    def list_columns(self, table: str) -> list[str]:
        """Column names of ``table``, which may be given as ``owner.table``."""

        return [column.name for column in self.field_data(table)]

    def field_data(self, table: str) -> list[ColumnDescriptor]:
        rows = self._catalog_rows(self.list_columns_sql(table), FAIL_GET_FIELD_DATA)
        return [ColumnDescriptor.from_row(row, self._types) for row in rows]

    def index_data(self, table: str) -> list[IndexDescriptor]:
        rows = self._catalog_rows(queries.index_data_sql(table), FAIL_GET_INDEX_DATA)
        return [IndexDescriptor.from_row(row) for row in rows]

    def foreign_key_data(self, table: str) -> list[ForeignKeyDescriptor]:
        rows = self._catalog_rows(queries.foreign_key_data_sql(table), FAIL_GET_FOREIGN_KEY_DATA)
        return [ForeignKeyDescriptor.from_row(row) for row in rows]

    def disable_foreign_key_checks(self) -> bool:
        return self._run_optional(_FOREIGN_KEY_CHECKS_SQL)

    def enable_foreign_key_checks(self) -> bool:
        return self._run_optional(_FOREIGN_KEY_CHECKS_SQL)

    # Transactions

    def begin_transaction(self) -> bool:
        """Turn autocommit off and start a transaction.

        On failure autocommit is switched back on so the session stays idle.
        """

        if self.in_transaction:
            LOG.warning("Transaction already in progress")
            return False
        self.initialize()
        assert self._handle is not None
        if not self._set_autocommit(False):
            return False
        try:
            started = self._handle.begin_transaction()
        except NativeDriverError as exc:
            self._log_failure("Failed to begin transaction", exc)
            started = False
        if not started:
            self._set_autocommit(True)
            return False
        self.in_transaction = True
        return True

    def commit(self) -> bool:
        return self._finish_transaction("commit")

    def rollback(self) -> bool:
        return self._finish_transaction("rollback")

    @contextmanager
    def transaction(self) -> Iterator[InformixConnection]:
        """Commit on normal exit, roll back and re-raise on error."""

        if not self.begin_transaction():
            raise DatabaseError("Failed to begin transaction.")
        try:
            yield self
        except BaseException:
            if not self.rollback():
                LOG.warning("Rollback failed after error in transaction block")
            raise
        if not self.commit():
            raise DatabaseError("Failed to commit transaction.")

    # Errors

    def error(self) -> ErrorInfo:
        """Last native error with credentials masked; connect errors take precedence."""

        handle = self._handle
        info = handle.connect_error if handle is not None else self._connect_error
        if info is None or not info.code:
            info = handle.last_error if handle is not None else None
        if info is None:
            return ErrorInfo()
        message = self._scrub(info.message, connecting=True) if info.message else info.message
        return ErrorInfo(code=info.code, message=message)

    # Helpers

    def _catalog_rows(self, sql: str, failure: str) -> list[Row]:
        try:
            result = self.query(sql)
        except DatabaseError as exc:
            raise MetadataQueryError(failure) from exc
        if result is None:
            raise MetadataQueryError(failure)
        return result.fetch_all()

    def _run_optional(self, sql: str) -> bool:
        if not sql:
            return True
        self.query(sql)
        return True

    def _set_autocommit(self, enabled: bool) -> bool:
        assert self._handle is not None
        try:
            self._handle.autocommit(enabled)
        except NativeDriverError as exc:
            self._log_failure("Failed to change autocommit", exc, autocommit=enabled)
            return False
        return True

    def _finish_transaction(self, action: str) -> bool:
        handle = self._handle
        if handle is None:
            return False
        try:
            done = handle.commit() if action == "commit" else handle.rollback()
        except NativeDriverError as exc:
            self._log_failure(f"Transaction {action} failed", exc)
            return False
        if not done:
            return False
        self.in_transaction = False
        self._set_autocommit(True)
        return True

    def _scrub(self, text: str, *, connecting: bool = False) -> str:
        # Catalog SQL legitimately carries the username; only connect-time
        # text gets it masked.
        if connecting:
            return redact_credentials(text, self._config.username, self._config.password)
        return redact_credentials(text, self._config.password)

    def _log_failure(self, message: str, exc: NativeDriverError, **extra: object) -> None:
        extra["code"] = exc.code
        if self._config.debug:
            extra["detail"] = self._scrub(exc.message, connecting=True)
            LOG.error(message, extra=extra)
        else:
            LOG.warning(message, extra=extra)


def _as_int(value: object) -> int:
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return 0


__all__ = ["InformixConnection"]
