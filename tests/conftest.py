"""Shared fakes standing in for the native Informix client."""

from __future__ import annotations

from typing import Any

import pytest

from ifxbridge.config import ConnectionConfig
from ifxbridge.connection import InformixConnection
from ifxbridge.models import ErrorInfo
from ifxbridge.native import NativeDriverError, OpenOptions


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]] | None = None, row_count: int = 0) -> None:
        self._rows = list(rows or [])
        self._row_count = row_count

    def row_count(self) -> int:
        return self._row_count

    def fetch_all(self) -> list[dict[str, Any]]:
        return list(self._rows)

    def fetch_one(self) -> dict[str, Any] | None:
        return self._rows[0] if self._rows else None


class FakeNativeConnection:
    def __init__(self, responses: list[tuple[str, Any]]) -> None:
        self._responses = responses
        self.statements: list[str] = []
        self.autocommit_calls: list[bool] = []
        self.begin_result: bool | Exception = True
        self.commit_result: bool | Exception = True
        self.rollback_result: bool | Exception = True
        self.closed = False
        self.connect_error: ErrorInfo | None = None
        self.last_error: ErrorInfo | None = None

    def query(self, sql: str) -> FakeResult:
        self.statements.append(sql)
        for fragment, outcome in self._responses:
            if fragment in sql:
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
        return FakeResult()

    def error_code(self) -> int | str | None:
        return self.last_error.code if self.last_error else None

    def autocommit(self, enabled: bool) -> None:
        self.autocommit_calls.append(enabled)

    def begin_transaction(self) -> bool:
        return self._outcome(self.begin_result)

    def commit(self) -> bool:
        return self._outcome(self.commit_result)

    def rollback(self) -> bool:
        return self._outcome(self.rollback_result)

    def close(self) -> None:
        self.closed = True

    @staticmethod
    def _outcome(value: bool | Exception) -> bool:
        if isinstance(value, Exception):
            raise value
        return value


class FakeNativeClient:
    def __init__(self) -> None:
        self.responses: list[tuple[str, Any]] = []
        self.opened: list[FakeNativeConnection] = []
        self.calls: list[tuple[str, str, str, OpenOptions]] = []
        self.open_error: NativeDriverError | None = None

    def respond(self, fragment: str, outcome: Any) -> None:
        """Answer statements containing ``fragment`` with a result or an error."""

        self.responses.append((fragment, outcome))

    def open(self, dsn: str, username: str, password: str, options: OpenOptions) -> FakeNativeConnection:
        self.calls.append((dsn, username, password, options))
        if self.open_error is not None:
            raise self.open_error
        connection = FakeNativeConnection(self.responses)
        self.opened.append(connection)
        return connection

    @property
    def current(self) -> FakeNativeConnection:
        return self.opened[-1]


@pytest.fixture
def client() -> FakeNativeClient:
    return FakeNativeClient()


@pytest.fixture
def config() -> ConnectionConfig:
    return ConnectionConfig(
        hostname="srv1",
        database="mydb",
        username="admin",
        password="s3cret",
        db_prefix="app_",
    )


@pytest.fixture
def adapter(config: ConnectionConfig, client: FakeNativeClient) -> InformixConnection:
    return InformixConnection(config, client=client)
