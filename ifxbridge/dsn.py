"""Data source name assembly for the ``informix:`` protocol marker."""

from __future__ import annotations

from dataclasses import dataclass

PROTOCOL = "informix:"


@dataclass(frozen=True, slots=True)
class DsnParts:
    """Fields encoded in a DSN, in their fixed order."""

    host: str = ""
    port: int | None = None
    database: str = ""
    charset: str | None = None


def build_dsn(
    host: str,
    port: int | str | None = None,
    database: str = "",
    charset: str | None = None,
) -> str:
    """Return ``informix:dbname=<host>[:<port>][:<database>][;charset:<charset>]``.

    Fields are emitted only when their values are non-empty; the port only when
    it is a positive integer. Values are not escaped.
    """

    dsn = PROTOCOL
    if host:
        dsn += f"dbname={host}"
    if _positive_port(port):
        dsn += f":{port}"
    if database:
        dsn += f":{database}"
    if charset:
        dsn += f";charset:{charset}"
    return dsn.rstrip()


def parse_dsn(dsn: str) -> DsnParts:
    """Split a DSN produced by :func:`build_dsn` back into its fields."""

    if not dsn.startswith(PROTOCOL):
        raise ValueError(f"DSN must start with '{PROTOCOL}'")
    body = dsn[len(PROTOCOL):].strip()
    charset: str | None = None
    if ";charset:" in body:
        body, charset = body.split(";charset:", 1)
    if body.startswith("dbname="):
        body = body[len("dbname="):]
    fields = body.split(":") if body else []
    host = fields.pop(0) if fields else ""
    port: int | None = None
    if fields and fields[0].isdigit():
        port = int(fields.pop(0))
    database = fields[0] if fields else ""
    return DsnParts(host=host, port=port, database=database, charset=charset or None)


def _positive_port(port: int | str | None) -> bool:
    if isinstance(port, bool) or port is None:
        return False
    if isinstance(port, str):
        return port.isdigit() and int(port) > 0
    return port > 0


__all__ = ["DsnParts", "PROTOCOL", "build_dsn", "parse_dsn"]
