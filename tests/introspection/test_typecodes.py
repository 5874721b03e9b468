"""Tests for the catalog decode tables."""

from __future__ import annotations

import pytest

from ifxbridge.introspection.typecodes import (
    ColumnType,
    DeleteRule,
    IndexType,
    TypeCodeEntry,
    TypeCodeTable,
    decode_delete_rule,
    decode_index_type,
    is_nullable,
)

MAPPED = set(range(24)) | {40, 41, 43, 45, 52, 53, 2061, 4118}


def test_table_covers_every_documented_code() -> None:
    table = TypeCodeTable.default()

    assert {entry.code for entry in table.entries} == MAPPED
    assert len(table) == len(MAPPED)
    assert [entry.code for entry in table.entries] == sorted(MAPPED)


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        (0, ColumnType.CHAR),
        (13, ColumnType.VARCHAR),
        (45, ColumnType.BOOLEAN),
        (52, ColumnType.BIGINT),
        (262, ColumnType.SERIAL),
        (269, ColumnType.VARCHAR),
        (2061, ColumnType.IDSSECURITYLABEL),
        (2317, ColumnType.IDSSECURITYLABEL),
        (4118, ColumnType.ROW_NAMED),
    ],
)
def test_decode_known_codes(code: int, expected: ColumnType) -> None:
    assert TypeCodeTable.default().decode(code) is expected


@pytest.mark.parametrize("code", [24, 39, 42, 44, 54, 255, 300, None])
def test_decode_unmapped_codes_is_unknown(code: int | None) -> None:
    assert TypeCodeTable.default().decode(code) is ColumnType.UNKNOWN


def test_nullability_comes_from_the_flag_byte() -> None:
    assert is_nullable(13) is True
    assert is_nullable(269) is False
    assert is_nullable(None) is True


def test_case_expression_matches_extended_codes_first() -> None:
    sql = TypeCodeTable.default().case_expression("c.coltype")

    assert sql.startswith("CASE\n")
    assert sql.endswith("END")
    assert sql.index("c.coltype IN (2061, 2317)") < sql.index("MOD(c.coltype, 256) = 0 ")
    assert "WHEN MOD(c.coltype, 256) = 13 THEN 'VARCHAR'" in sql
    assert "WHEN MOD(c.coltype, 256) = 45 THEN 'BOOLEAN'" in sql
    assert "THEN 'ROW (named)'" in sql


def test_custom_table_is_respected() -> None:
    table = TypeCodeTable([TypeCodeEntry(13, ColumnType.VARCHAR)])

    assert table.decode(13) is ColumnType.VARCHAR
    assert table.decode(0) is ColumnType.UNKNOWN
    assert 13 in table


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        ("U", IndexType.UNIQUE),
        ("D", IndexType.DUPLICATES),
        ("G", IndexType.GENERALIZED_KEY),
        ("g", IndexType.BITMAP_GENERALIZED_KEY),
        ("u", IndexType.UNIQUE_BITMAP),
        ("d", IndexType.NONUNIQUE_BITMAP),
        ("X", IndexType.UNKNOWN),
        (None, IndexType.UNKNOWN),
    ],
)
def test_decode_index_type(code: str | None, expected: IndexType) -> None:
    assert decode_index_type(code) is expected


def test_decode_delete_rule() -> None:
    assert decode_delete_rule("C") is DeleteRule.CASCADE
    assert decode_delete_rule("R ") is DeleteRule.RESTRICT
    assert decode_delete_rule("N") is DeleteRule.UNKNOWN
