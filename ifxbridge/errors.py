"""Error types raised by the adapter and credential scrubbing for their messages."""

from __future__ import annotations

REDACTED = "****"


class DatabaseError(RuntimeError):
    """Base error for adapter failures; the native error, if any, is the ``__cause__``."""

    def __init__(self, message: str, code: int | str | None = None) -> None:
        super().__init__(message)
        self.code = code


class ConnectError(DatabaseError):
    """Raised when the native connection cannot be opened."""


class QueryExecutionError(DatabaseError):
    """Raised when a statement fails to execute."""

    def __init__(self, message: str, code: int | str | None = None, *, sql: str | None = None) -> None:
        super().__init__(message, code)
        self.sql = sql


class MetadataQueryError(DatabaseError):
    """Raised when a catalog lookup fails."""


FAIL_GET_FIELD_DATA = "Failed to get field data from database."
FAIL_GET_INDEX_DATA = "Failed to get index data from database."
FAIL_GET_FOREIGN_KEY_DATA = "Failed to get foreign key data from database."
FAIL_GET_INSERT_ID = "Failed to get the last inserted id from database."


def redact_credentials(message: str, *secrets: str | None) -> str:
    """Replace every non-empty secret in ``message`` with a fixed mask."""

    # Longest first so a secret containing another is masked whole.
    for secret in sorted((s for s in secrets if s), key=len, reverse=True):
        message = message.replace(secret, REDACTED)
    return message


__all__ = [
    "ConnectError",
    "DatabaseError",
    "FAIL_GET_FIELD_DATA",
    "FAIL_GET_FOREIGN_KEY_DATA",
    "FAIL_GET_INDEX_DATA",
    "FAIL_GET_INSERT_ID",
    "MetadataQueryError",
    "QueryExecutionError",
    "REDACTED",
    "redact_credentials",
]
