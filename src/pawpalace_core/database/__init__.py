"""
Database connection and session management utilities.

This module provides async SQLAlchemy engine configuration, session management,
and column types for the PawPalace document store.
"""

from .connection import DatabaseConfig, create_engine, get_database_url
from .session import SessionManager
from .types import JSONType

__all__ = [
    # Connection utilities
    "DatabaseConfig",
    "create_engine",
    "get_database_url",
    # Session management
    "SessionManager",
    # Column types
    "JSONType",
]
