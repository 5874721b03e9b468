"""String and literal escaping for Informix SQL text."""

from __future__ import annotations

import re
from typing import Mapping, TypeVar

LIKE_ESCAPE_CHAR = "!"

# Control characters other than tab, newline and carriage return.
_INVISIBLE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]+")

T = TypeVar("T")


def remove_invisible_characters(text: str) -> str:
    return _INVISIBLE.sub("", text)


def escape_string(text: str) -> str:
    """Escape a value for use inside a single-quoted literal."""

    return remove_invisible_characters(text).replace("'", "''")


def escape(value: object) -> object:
    """Render a Python value as an SQL literal.

    Lists and tuples are escaped element-wise and keep their shape.
    """

    if isinstance(value, (list, tuple)):
        return type(value)(escape(item) for item in value)
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    return f"'{escape_string(str(value))}'"


def escape_like_string_direct(value: T, escape_char: str = LIKE_ESCAPE_CHAR) -> T:
    """Escape LIKE wildcards with a backslash instead of an ``ESCAPE`` clause.

    Some Informix statements reject ``ESCAPE x`` after ``LIKE``; backslash is
    the server's default escape character there. Lists, tuples and mappings
    are escaped per item and returned in the same shape.
    """

    if isinstance(value, Mapping):
        return type(value)((key, escape_like_string_direct(item, escape_char)) for key, item in value.items())  # type: ignore[return-value, call-arg]
    if isinstance(value, (list, tuple)):
        return type(value)(escape_like_string_direct(item, escape_char) for item in value)  # type: ignore[return-value]
    text = escape_string(str(value))
    for char in (escape_char, "%", "_"):
        text = text.replace(char, "\\" + char)
    return text  # type: ignore[return-value]


__all__ = [
    "LIKE_ESCAPE_CHAR",
    "escape",
    "escape_like_string_direct",
    "escape_string",
    "remove_invisible_characters",
]
