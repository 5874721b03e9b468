"""System catalog query builders and decode tables."""

from __future__ import annotations

from .queries import (
    INSERT_ID_SQL,
    KEY_PART_COUNT,
    VERSION_SQL,
    foreign_key_data_sql,
    index_data_sql,
    list_columns_sql,
    list_tables_sql,
    split_owner,
)
from .typecodes import (
    ColumnType,
    DeleteRule,
    IndexType,
    TypeCodeEntry,
    TypeCodeTable,
    decode_delete_rule,
    decode_index_type,
)

__all__ = [
    "ColumnType",
    "DeleteRule",
    "INSERT_ID_SQL",
    "IndexType",
    "KEY_PART_COUNT",
    "TypeCodeEntry",
    "TypeCodeTable",
    "VERSION_SQL",
    "decode_delete_rule",
    "decode_index_type",
    "foreign_key_data_sql",
    "index_data_sql",
    "list_columns_sql",
    "list_tables_sql",
    "split_owner",
]
