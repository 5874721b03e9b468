"""Record shapes returned by the adapter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .introspection.queries import KEY_PART_COUNT
from .introspection.typecodes import (
    ColumnType,
    DeleteRule,
    IndexType,
    TypeCodeTable,
    decode_delete_rule,
    decode_index_type,
    is_nullable,
)

Row = Mapping[str, Any]

_DEFAULT_TYPES = TypeCodeTable.default()


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    """Code/message pair describing the last native error."""

    code: int | str | None = None
    message: str | None = None


@dataclass(frozen=True, slots=True)
class ColumnDescriptor:
    """One column of a table, decoded from ``syscolumns``."""

    name: str
    type: ColumnType
    type_code: int | None = None
    nullable: bool = True
    max_length: int | None = None
    precision: int | None = None
    scale: int | None = None

    @classmethod
    def from_row(cls, row: Row, types: TypeCodeTable = _DEFAULT_TYPES) -> "ColumnDescriptor":
        code = _as_int(row.get("coltype"))
        length = _as_int(row.get("collength"))
        column_type = types.decode(code)
        precision = scale = None
        if column_type in (ColumnType.DECIMAL, ColumnType.MONEY) and length is not None:
            # collength packs precision in the high byte, scale in the low one; 255 means floating.
            precision, scale = (length & 0xFF00) >> 8, length & 0xFF
            if scale == 255:
                scale = 0
        return cls(
            name=_text(row.get("name")),
            type=column_type,
            type_code=code,
            nullable=is_nullable(code),
            max_length=length,
            precision=precision,
            scale=scale,
        )


@dataclass(frozen=True, slots=True)
class IndexDescriptor:
    """An index and its ordered key columns."""

    name: str
    fields: tuple[str, ...]
    type: IndexType

    @property
    def fieldname(self) -> str:
        """Key columns joined with commas."""

        return ",".join(self.fields)

    @classmethod
    def from_row(cls, row: Row) -> "IndexDescriptor":
        parts = (row.get(f"part{n}") for n in range(1, KEY_PART_COUNT + 1))
        return cls(
            name=_text(row.get("indexname")),
            fields=tuple(_text(part) for part in parts if part is not None and _text(part)),
            type=decode_index_type(row.get("idxtype")),
        )


@dataclass(frozen=True, slots=True)
class ForeignKeyDescriptor:
    """A referencing column and the column it points at."""

    constraint_name: str
    table_name: str
    column_name: str
    foreign_table_name: str
    foreign_column_name: str
    delete_rule: DeleteRule
    update_rule: str | None = None
    match_option: str | None = None

    @classmethod
    def from_row(cls, row: Row) -> "ForeignKeyDescriptor":
        return cls(
            constraint_name=_text(row.get("constraint_name")),
            table_name=_text(row.get("table_name")),
            column_name=_text(row.get("column_name")),
            foreign_table_name=_text(row.get("foreign_table_name")),
            foreign_column_name=_text(row.get("foreign_column_name")),
            delete_rule=decode_delete_rule(row.get("delrule")),
            update_rule=_optional_text(row.get("update_rule")),
            match_option=_optional_text(row.get("match_option")),
        )


def _text(value: object) -> str:
    return "" if value is None else str(value).strip()


def _optional_text(value: object) -> str | None:
    return None if value is None else str(value).strip()


def _as_int(value: object) -> int | None:
    if value is None:
        return None
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return None


__all__ = [
    "ColumnDescriptor",
    "ErrorInfo",
    "ForeignKeyDescriptor",
    "IndexDescriptor",
    "Row",
]
