"""
Database-agnostic column types for pawpalace-core.

This module provides column types that work across different database backends,
particularly for the vaccination arrays stored on pet documents in both
PostgreSQL and SQLite.
"""

from datetime import date, datetime
from typing import Any

from sqlalchemy import JSON, TypeDecorator
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Dialect
from sqlalchemy.sql.type_api import TypeEngine

DATE_FIELDS = ("date",)


def _format_dates(item: Any) -> Any:
    """Return a copy of a dict with date/datetime values in DATE_FIELDS made JSON-safe."""
    if not isinstance(item, dict):
        return item

    formatted = item.copy()
    for field_name in DATE_FIELDS:
        value = formatted.get(field_name)
        if isinstance(value, (date, datetime)):
            formatted[field_name] = value.isoformat()
    return formatted


class JSONType(TypeDecorator):
    """
    Database-agnostic JSON column type.

    Uses JSONB for PostgreSQL and JSON for other databases (like SQLite).
    ``date``/``datetime`` objects under the ``date`` key of stored entries are
    serialized to ISO strings; string values are stored untouched so that
    the evaluator sees exactly what was written.
    """

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        """Load the appropriate JSON type based on the database dialect."""
        if dialect.name == "postgresql":
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        """Process value when storing to database."""
        if value is None:
            return None

        if isinstance(value, list):
            return [_format_dates(item) for item in value]
        if isinstance(value, dict):
            return _format_dates(value)
        return value
