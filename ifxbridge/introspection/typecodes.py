"""Static decode tables for Informix catalog codes.

``syscolumns.coltype`` packs the base type into the low byte and flags above
it: ``0x100`` marks NOT NULL columns, while extended types such as named
rows keep a distinct full code. :meth:`TypeCodeTable.decode` tries the full
code first, then the code without the NOT NULL flag, then the low byte.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence, Tuple

NOT_NULL_FLAG = 0x100


class ColumnType(str, Enum):
    """Column types reported by ``syscolumns.coltype``."""

    CHAR = "CHAR"
    SMALLINT = "SMALLINT"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    SMALLFLOAT = "SMALLFLOAT"
    DECIMAL = "DECIMAL"
    SERIAL = "SERIAL"
    DATE = "DATE"
    MONEY = "MONEY"
    NULL = "NULL"
    DATETIME = "DATETIME"
    BYTE = "BYTE"
    TEXT = "TEXT"
    VARCHAR = "VARCHAR"
    INTERVAL = "INTERVAL"
    NCHAR = "NCHAR"
    NVARCHAR = "NVARCHAR"
    INT8 = "INT8"
    SERIAL8 = "SERIAL8"
    SET = "SET"
    MULTISET = "MULTISET"
    LIST = "LIST"
    ROW_UNNAMED = "ROW (unnamed)"
    COLLECTION = "COLLECTION"
    FIXED_OPAQUE = "LVARCHAR fixed-length opaque types"
    VARIABLE_OPAQUE = "BLOB, BOOLEAN, CLOB variable-length opaque types"
    CLIENT_LVARCHAR = "LVARCHAR (client-side only)"
    BOOLEAN = "BOOLEAN"
    BIGINT = "BIGINT"
    BIGSERIAL = "BIGSERIAL"
    IDSSECURITYLABEL = "IDSSECURITYLABEL"
    ROW_NAMED = "ROW (named)"
    UNKNOWN = "UNKNOWN"


class IndexType(str, Enum):
    """Index kinds reported by ``sysindexes.idxtype``."""

    UNIQUE = "UNIQUE"
    DUPLICATES = "DUPLICATES ALLOWED"
    GENERALIZED_KEY = "NONBITMAP GENERALIZED-KEY INDEX"
    BITMAP_GENERALIZED_KEY = "BITMAP GENERALIZED-KEY INDEX"
    UNIQUE_BITMAP = "UNIQUE, BITMAP"
    NONUNIQUE_BITMAP = "NONUNIQUE, BITMAP"
    UNKNOWN = "UNKNOWN"


class DeleteRule(str, Enum):
    """Referential delete rules reported by ``sysreferences.delrule``."""

    CASCADE = "Cascading Delete"
    RESTRICT = "Restrict"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True, slots=True)
class TypeCodeEntry:
    """One row of the column type table."""

    code: int
    type: ColumnType


class TypeCodeTable:
    """Ordered, read-only mapping from ``coltype`` codes to column types."""

    def __init__(self, entries: Sequence[TypeCodeEntry]) -> None:
        self._entries = tuple(entries)
        self._by_code: Mapping[int, ColumnType] = MappingProxyType(
            {entry.code: entry.type for entry in self._entries}
        )

    @classmethod
    def default(cls) -> "TypeCodeTable":
        return cls(_DEFAULT_ENTRIES)

    @property
    def entries(self) -> Tuple[TypeCodeEntry, ...]:
        return self._entries

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def __len__(self) -> int:
        return len(self._entries)

    def decode(self, code: int | None) -> ColumnType:
        """Return the column type for a raw ``coltype`` value."""

        if code is None:
            return ColumnType.UNKNOWN
        for candidate in (code, code & ~NOT_NULL_FLAG, code % 256):
            found = self._by_code.get(candidate)
            if found is not None:
                return found
        return ColumnType.UNKNOWN

    def case_expression(self, column: str) -> str:
        """Render a SQL ``CASE`` decoding ``column`` into type labels.

        Extended codes are matched on the whole value (with and without the
        NOT NULL flag) ahead of the low-byte matches they would otherwise
        fall into.
        """

        extended = [entry for entry in self._entries if entry.code >= 256]
        base = [entry for entry in self._entries if entry.code < 256]
        whens: list[tuple[str, str]] = []
        for entry in extended:
            whens.append((f"{column} IN ({entry.code}, {entry.code | NOT_NULL_FLAG})", entry.type.value))
        for entry in base:
            whens.append((f"MOD({column}, 256) = {entry.code}", entry.type.value))
        return case_expression(whens)


def is_nullable(code: int | None) -> bool:
    """``coltype`` carries the NOT NULL flag in its second byte."""

    if code is None:
        return True
    return not code & NOT_NULL_FLAG


INDEX_TYPE_CODES: Mapping[str, IndexType] = MappingProxyType(
    {
        "U": IndexType.UNIQUE,
        "D": IndexType.DUPLICATES,
        "G": IndexType.GENERALIZED_KEY,
        "g": IndexType.BITMAP_GENERALIZED_KEY,
        "u": IndexType.UNIQUE_BITMAP,
        "d": IndexType.NONUNIQUE_BITMAP,
    }
)

DELETE_RULE_CODES: Mapping[str, DeleteRule] = MappingProxyType(
    {
        "C": DeleteRule.CASCADE,
        "R": DeleteRule.RESTRICT,
    }
)


def decode_index_type(code: str | None) -> IndexType:
    # Case matters: lower-case codes are the bitmap variants.
    return INDEX_TYPE_CODES.get((code or "").strip(), IndexType.UNKNOWN)


def decode_delete_rule(code: str | None) -> DeleteRule:
    return DELETE_RULE_CODES.get((code or "").strip(), DeleteRule.UNKNOWN)


def code_case_expression(column: str, codes: Mapping[str, Enum]) -> str:
    """Render a ``CASE`` comparing ``column`` against single-character codes."""

    return case_expression(
        (f"{column} = {_quote(code)}", label.value) for code, label in codes.items()
    )


def case_expression(whens: Iterable[tuple[str, str]]) -> str:
    lines = ["CASE"]
    for condition, label in whens:
        lines.append(f"    WHEN {condition} THEN {_quote(label)}")
    lines.append("END")
    return "\n".join(lines)


def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


_DEFAULT_ENTRIES: Tuple[TypeCodeEntry, ...] = (
    TypeCodeEntry(0, ColumnType.CHAR),
    TypeCodeEntry(1, ColumnType.SMALLINT),
    TypeCodeEntry(2, ColumnType.INTEGER),
    TypeCodeEntry(3, ColumnType.FLOAT),
    TypeCodeEntry(4, ColumnType.SMALLFLOAT),
    TypeCodeEntry(5, ColumnType.DECIMAL),
    TypeCodeEntry(6, ColumnType.SERIAL),
    TypeCodeEntry(7, ColumnType.DATE),
    TypeCodeEntry(8, ColumnType.MONEY),
    TypeCodeEntry(9, ColumnType.NULL),
    TypeCodeEntry(10, ColumnType.DATETIME),
    TypeCodeEntry(11, ColumnType.BYTE),
    TypeCodeEntry(12, ColumnType.TEXT),
    TypeCodeEntry(13, ColumnType.VARCHAR),
    TypeCodeEntry(14, ColumnType.INTERVAL),
    TypeCodeEntry(15, ColumnType.NCHAR),
    TypeCodeEntry(16, ColumnType.NVARCHAR),
    TypeCodeEntry(17, ColumnType.INT8),
    TypeCodeEntry(18, ColumnType.SERIAL8),
    TypeCodeEntry(19, ColumnType.SET),
    TypeCodeEntry(20, ColumnType.MULTISET),
    TypeCodeEntry(21, ColumnType.LIST),
    TypeCodeEntry(22, ColumnType.ROW_UNNAMED),
    TypeCodeEntry(23, ColumnType.COLLECTION),
    TypeCodeEntry(40, ColumnType.FIXED_OPAQUE),
    TypeCodeEntry(41, ColumnType.VARIABLE_OPAQUE),
    TypeCodeEntry(43, ColumnType.CLIENT_LVARCHAR),
    TypeCodeEntry(45, ColumnType.BOOLEAN),
    TypeCodeEntry(52, ColumnType.BIGINT),
    TypeCodeEntry(53, ColumnType.BIGSERIAL),
    TypeCodeEntry(2061, ColumnType.IDSSECURITYLABEL),
    TypeCodeEntry(4118, ColumnType.ROW_NAMED),
)


__all__ = [
    "ColumnType",
    "DELETE_RULE_CODES",
    "DeleteRule",
    "INDEX_TYPE_CODES",
    "IndexType",
    "NOT_NULL_FLAG",
    "TypeCodeEntry",
    "TypeCodeTable",
    "case_expression",
    "code_case_expression",
    "decode_delete_rule",
    "decode_index_type",
    "is_nullable",
]
