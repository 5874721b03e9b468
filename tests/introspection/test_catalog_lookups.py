"""Tests for the adapter's catalog lookups."""

from __future__ import annotations

import pytest

from ifxbridge.connection import InformixConnection
from ifxbridge.errors import (
    FAIL_GET_FIELD_DATA,
    FAIL_GET_FOREIGN_KEY_DATA,
    FAIL_GET_INDEX_DATA,
    MetadataQueryError,
    QueryExecutionError,
)
from ifxbridge.introspection.typecodes import ColumnType, DeleteRule, IndexType
from ifxbridge.models import ColumnDescriptor, ForeignKeyDescriptor
from ifxbridge.native import NativeDriverError

from conftest import FakeNativeClient, FakeResult


def test_list_tables_sql_honours_prefix_limit(adapter: InformixConnection) -> None:
    assert "LIKE" not in adapter.list_tables_sql()
    assert "tabname LIKE 'app\\_%'" in adapter.list_tables_sql(prefix_limit=True)
    assert "LOWER(owner) = 'admin'" in adapter.list_tables_sql()


def test_list_tables_returns_trimmed_names(adapter: InformixConnection, client: FakeNativeClient) -> None:
    client.respond("FROM systables WHERE tabid > 99", FakeResult([{"tabname": "orders   "}, {"tabname": "items"}]))

    assert adapter.list_tables() == ["orders", "items"]


def test_table_exists(adapter: InformixConnection, client: FakeNativeClient) -> None:
    client.respond("tabname = 'orders'", FakeResult([{"tabname": "orders"}]))

    assert adapter.table_exists("orders") is True
    assert adapter.table_exists("missing") is False


def test_list_columns_sql_uses_session_user_for_bare_names(adapter: InformixConnection) -> None:
    assert "LOWER(t.owner) = 'admin'" in adapter.list_columns_sql("Orders")
    assert "LOWER(t.owner) = 'sales'" in adapter.list_columns_sql("sales.orders")


def test_field_data_decodes_columns(adapter: InformixConnection, client: FakeNativeClient) -> None:
    client.respond(
        "FROM systables t\nJOIN syscolumns",
        FakeResult(
            [
                {"name": "id", "type": "SERIAL", "coltype": 262, "collength": 4, "colno": 1},
                {"name": "label ", "type": "VARCHAR", "coltype": 13, "collength": 40, "colno": 2},
                {"name": "amount", "type": "DECIMAL", "coltype": 5, "collength": 0x0A02, "colno": 3},
                {"name": "ratio", "type": "DECIMAL", "coltype": 5, "collength": 0x10FF, "colno": 4},
            ]
        ),
    )

    columns = adapter.field_data("orders")

    assert columns[0] == ColumnDescriptor(
        name="id", type=ColumnType.SERIAL, type_code=262, nullable=False, max_length=4
    )
    assert columns[1].name == "label"
    assert columns[1].nullable is True
    assert (columns[2].precision, columns[2].scale) == (10, 2)
    assert (columns[3].precision, columns[3].scale) == (16, 0)
    assert adapter.list_columns("orders") == ["id", "label", "amount", "ratio"]


def test_field_data_failure(adapter: InformixConnection, client: FakeNativeClient) -> None:
    client.respond("syscolumns", NativeDriverError(-206, "no such table"))

    with pytest.raises(MetadataQueryError, match=FAIL_GET_FIELD_DATA) as info:
        adapter.field_data("orders")

    assert isinstance(info.value.__cause__, QueryExecutionError)


def test_index_data_collects_key_parts(adapter: InformixConnection, client: FakeNativeClient) -> None:
    row = {f"part{n}": None for n in range(1, 17)}
    row.update({"indexname": " ix_orders ", "part1": "customer", "part2": "placed_at", "idxtype": "U"})
    client.respond("sysfragments", FakeResult([row]))

    (index,) = adapter.index_data("orders")

    assert index.name == "ix_orders"
    assert index.fields == ("customer", "placed_at")
    assert index.fieldname == "customer,placed_at"
    assert index.type is IndexType.UNIQUE


def test_index_data_failure(adapter: InformixConnection, client: FakeNativeClient) -> None:
    client.respond("sysfragments", NativeDriverError(-1, "boom"))

    with pytest.raises(MetadataQueryError, match=FAIL_GET_INDEX_DATA):
        adapter.index_data("orders")


def test_foreign_key_data(adapter: InformixConnection, client: FakeNativeClient) -> None:
    client.respond(
        "sysreferences",
        FakeResult(
            [
                {
                    "constraint_name": "fk_customer",
                    "table_name": "orders",
                    "column_name": "customer_id",
                    "foreign_table_name": "customers",
                    "foreign_column_name": "id",
                    "delrule": "C",
                    "delete_rule": "Cascading Delete",
                    "update_rule": "R",
                    "match_option": "N",
                }
            ]
        ),
    )

    assert adapter.foreign_key_data("orders") == [
        ForeignKeyDescriptor(
            constraint_name="fk_customer",
            table_name="orders",
            column_name="customer_id",
            foreign_table_name="customers",
            foreign_column_name="id",
            delete_rule=DeleteRule.CASCADE,
            update_rule="R",
            match_option="N",
        )
    ]


def test_foreign_key_data_failure(adapter: InformixConnection, client: FakeNativeClient) -> None:
    client.respond("sysreferences", NativeDriverError(-1, "boom"))

    with pytest.raises(MetadataQueryError, match=FAIL_GET_FOREIGN_KEY_DATA):
        adapter.foreign_key_data("orders")


def test_foreign_key_checks_are_noops(adapter: InformixConnection, client: FakeNativeClient) -> None:
    assert adapter.disable_foreign_key_checks() is True
    assert adapter.enable_foreign_key_checks() is True
    assert client.opened == []
