"""
Database compatibility helpers for SQLite and PostgreSQL.
"""
import json
from enum import Enum
from typing import Type

from sqlalchemy import String, cast, func, Enum as SQLEnum
from breakfast4u.database import is_sqlite

LIKE_ESCAPE = "\\"


def enum_type(enum_cls: Type[Enum]) -> SQLEnum:
    """Non-native enum column that stores member values ("Out for Delivery"), not names."""
    return SQLEnum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def icontains(column, text: str):
    """Filter: case-insensitive substring match (works on both backends)."""
    return func.lower(column).like(f"%{escape_like(text.lower())}%", escape=LIKE_ESCAPE)


def json_array_contains(column, value: str):
    """Filter: JSON list column holds the exact string value."""
    needle = f"%{escape_like(json.dumps(value))}%"
    return cast(column, String).like(needle, escape=LIKE_ESCAPE)


def json_array_icontains(column, text: str):
    """Filter: some element of a JSON list column contains text, case-insensitively."""
    return icontains(cast(column, String), text)


def format_day(column):
    """Render a datetime column as YYYY-MM-DD."""
    if is_sqlite:
        return func.strftime("%Y-%m-%d", column)
    return func.to_char(column, "YYYY-MM-DD")
