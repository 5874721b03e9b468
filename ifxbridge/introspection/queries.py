"""SQL synthesis for system catalog lookups.

Every builder returns plain SQL text; literals are escaped here, so the
results are safe to hand straight to the native client.

Case handling differs per lookup: table and column listings compare owner
and table names lower-cased, while index and foreign key lookups compare
``tabname`` exactly as given.
"""

from __future__ import annotations

from ..escaping import escape, escape_like_string_direct
from .typecodes import DELETE_RULE_CODES, INDEX_TYPE_CODES, TypeCodeTable, code_case_expression

KEY_PART_COUNT = 16
SYSTEM_TABID_LIMIT = 99
SYSTEM_INFO_TABID = 1

VERSION_SQL = f"SELECT DBINFO('version', 'full') AS version FROM systables WHERE tabid = {SYSTEM_INFO_TABID}"

INSERT_ID_SQL = (
    "SELECT DBINFO('sqlca.sqlerrd1') AS sc, DBINFO('serial8') AS s, DBINFO('bigserial') AS bs "
    f"FROM systables WHERE tabid = {SYSTEM_INFO_TABID}"
)


def split_owner(table: str, default_owner: str) -> tuple[str, str]:
    """Split ``owner.table``; bare names belong to ``default_owner``."""

    if "." in table:
        owner, name = table.split(".", 1)
        return owner, name
    return default_owner, table


def list_tables_sql(owner: str, prefix: str = "", table_name: str | None = None) -> str:
    sql = (
        "SELECT tabname FROM systables"
        f" WHERE tabid > {SYSTEM_TABID_LIMIT} AND tabtype = 'T'"
        f" AND LOWER(owner) = {escape(owner.lower())}"
    )
    if prefix:
        sql += f" AND tabname LIKE '{escape_like_string_direct(prefix)}%'"
    if table_name:
        sql += f" AND tabname = {escape(table_name)}"
    return sql


def list_columns_sql(owner: str, table: str, type_table: TypeCodeTable | None = None) -> str:
    decode = (type_table or TypeCodeTable.default()).case_expression("c.coltype")
    return (
        "SELECT TRIM(c.colname) AS name,\n"
        f"{decode} AS type,\n"
        "c.coltype AS coltype, c.collength AS collength, c.colno AS colno\n"
        "FROM systables t\n"
        "JOIN syscolumns c ON t.tabid = c.tabid\n"
        "WHERE t.tabtype = 'T'\n"
        f"AND LOWER(t.owner) = {escape(owner.lower())}\n"
        f"AND LOWER(t.tabname) = {escape(table.lower())}\n"
        "ORDER BY c.colno"
    )


def index_data_sql(table: str) -> str:
    parts = ",\n".join(f"TRIM(c{n}.colname) AS part{n}" for n in _slots())
    joins = "\n".join(_part_join(n) for n in _slots())
    return (
        "SELECT TRIM(f.indexname) AS indexname,\n"
        f"{parts},\n"
        "i.idxtype AS idxtype,\n"
        f"{code_case_expression('i.idxtype', INDEX_TYPE_CODES)} AS indextype\n"
        "FROM sysfragments f\n"
        "JOIN sysindexes i ON i.idxname = f.indexname\n"
        "JOIN systables t ON t.tabid = i.tabid\n"
        f"{joins}\n"
        f"WHERE t.tabname = {escape(table)}"
    )


def foreign_key_data_sql(table: str) -> str:
    slots = ", ".join(f"si.part{n}" for n in _slots())
    return (
        "SELECT TRIM(sc.constrname) AS constraint_name,\n"
        "TRIM(st.tabname) AS table_name,\n"
        "TRIM(scol.colname) AS column_name,\n"
        "TRIM(fk_st.tabname) AS foreign_table_name,\n"
        "TRIM(fk_scol.colname) AS foreign_column_name,\n"
        "sr.delrule AS delrule,\n"
        f"{code_case_expression('sr.delrule', DELETE_RULE_CODES)} AS delete_rule,\n"
        "sr.updrule AS update_rule,\n"
        "sr.matchtype AS match_option\n"
        "FROM systables st\n"
        "JOIN sysconstraints sc ON sc.tabid = st.tabid\n"
        "JOIN sysreferences sr ON sr.constrid = sc.constrid\n"
        "JOIN sysindexes si ON si.idxname = sc.idxname\n"
        "JOIN syscolumns scol ON scol.tabid = st.tabid\n"
        "JOIN systables fk_st ON fk_st.tabid = sr.ptabid\n"
        "JOIN sysconstraints fk_sc ON fk_sc.constrid = sr.primary\n"
        "JOIN sysindexes fk_si ON fk_si.tabid = fk_sc.tabid AND fk_si.idxname = fk_sc.idxname\n"
        "JOIN syscolumns fk_scol ON fk_scol.tabid = fk_sc.tabid AND fk_scol.colno = fk_si.part1\n"
        f"WHERE st.tabname = {escape(table)} AND sc.constrtype = 'R'\n"
        f"AND scol.colno IN ({slots})\n"
        "ORDER BY scol.colname"
    )


def _slots() -> range:
    return range(1, KEY_PART_COUNT + 1)


def _part_join(n: int) -> str:
    # The first key part always exists; later ones are optional.
    kind = "JOIN" if n == 1 else "LEFT JOIN"
    return f"{kind} syscolumns c{n} ON c{n}.tabid = i.tabid AND c{n}.colno = i.part{n}"


__all__ = [
    "INSERT_ID_SQL",
    "KEY_PART_COUNT",
    "SYSTEM_TABID_LIMIT",
    "VERSION_SQL",
    "foreign_key_data_sql",
    "index_data_sql",
    "list_columns_sql",
    "list_tables_sql",
    "split_owner",
]
