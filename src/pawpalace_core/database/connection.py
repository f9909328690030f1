"""
Database connection utilities for the pawpalace-core package.

This module provides async SQLAlchemy engine configuration and connection
management for the PostgreSQL document store, with SQLite (aiosqlite)
supported for local runs and tests.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool, StaticPool

from ..utils.config import ConfigError, DatabaseURLValidator

logger = logging.getLogger(__name__)


class DatabaseConfig:
    """Configuration class for database connections."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 10,
        max_overflow: int = 20,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        echo: bool = False,
    ):
        """
        Initialize database configuration.

        Args:
            database_url: PostgreSQL or SQLite connection URL
            pool_size: Number of connections to maintain in the pool
            max_overflow: Maximum number of connections that can overflow the pool
            pool_timeout: Timeout for getting connection from pool
            pool_recycle: Time in seconds to recycle connections
            echo: Whether to echo SQL statements

        Raises:
            ValueError: If the URL is not a supported database URL
        """
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.echo = echo

        try:
            DatabaseURLValidator.validate_url(database_url)
        except ConfigError as e:
            raise ValueError(f"Invalid database URL: {e.message}")

    @property
    def is_sqlite(self) -> bool:
        return urlparse(self.database_url).scheme.startswith("sqlite")

    @property
    def is_memory(self) -> bool:
        return self.is_sqlite and (
            ":memory:" in self.database_url
            or self.database_url.rstrip("/").endswith(":")
        )

    def get_async_url(self) -> str:
        """Convert database URL to its async driver form if needed."""
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace(
                "postgresql://", "postgresql+asyncpg://", 1
            )
        if self.database_url.startswith("sqlite://"):
            return self.database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return self.database_url


def create_engine(
    database_url: str,
    pool_size: int = 10,
    max_overflow: int = 20,
    pool_timeout: int = 30,
    pool_recycle: int = 3600,
    pool_pre_ping: bool = True,
    echo: bool = False,
    use_null_pool: bool = False,
    connect_args: Optional[dict] = None,
) -> AsyncEngine:
    """
    Create an async SQLAlchemy engine with proper configuration.

    SQLite URLs never get a queue pool: in-memory databases share one
    connection through ``StaticPool`` and file databases use ``NullPool``.

    Args:
        database_url: PostgreSQL or SQLite connection URL
        pool_size: Number of connections to maintain in the pool
        max_overflow: Maximum number of connections that can overflow the pool
        pool_timeout: Timeout for getting connection from pool
        pool_recycle: Time in seconds to recycle connections
        pool_pre_ping: Whether to validate connections before use
        echo: Whether to echo SQL statements
        use_null_pool: Whether to use NullPool (useful for testing)
        connect_args: Additional connection arguments

    Returns:
        Configured async SQLAlchemy engine

    Raises:
        ValueError: If database URL is invalid
    """
    config = DatabaseConfig(
        database_url=database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout,
        pool_recycle=pool_recycle,
        echo=echo,
    )

    async_url = config.get_async_url()

    engine_kwargs: Dict[str, Any] = {"echo": config.echo}

    if connect_args:
        engine_kwargs["connect_args"] = connect_args

    if config.is_memory:
        engine_kwargs["poolclass"] = StaticPool
        engine_kwargs.setdefault("connect_args", {})["check_same_thread"] = False
    elif use_null_pool or config.is_sqlite:
        engine_kwargs["poolclass"] = NullPool
    else:
        engine_kwargs.update(
            {
                "poolclass": AsyncAdaptedQueuePool,
                "pool_size": config.pool_size,
                "max_overflow": config.max_overflow,
                "pool_timeout": config.pool_timeout,
                "pool_recycle": config.pool_recycle,
                "pool_pre_ping": pool_pre_ping,
            }
        )

    try:
        engine = create_async_engine(async_url, **engine_kwargs)
        logger.info(
            f"Created async database engine for {urlparse(async_url).hostname or 'sqlite'}"
        )
        return engine
    except Exception as e:
        logger.error(f"Failed to create database engine: {e}")
        raise


def get_database_url(
    host: str,
    port: int = 5432,
    database: str = "pawpalace",
    username: str = "postgres",
    password: str = "",  # nosec B107
    driver: str = "asyncpg",
    **kwargs: Any,
) -> str:
    """
    Construct a PostgreSQL database URL.

    Args:
        host: Database host
        port: Database port
        database: Database name
        username: Database username
        password: Database password
        driver: Database driver (asyncpg for async)
        **kwargs: Additional URL parameters

    Returns:
        Formatted database URL
    """
    auth = f"{username}:{password}" if password else username
    base_url = f"postgresql+{driver}://{auth}@{host}:{port}/{database}"

    if kwargs:
        params = "&".join(f"{k}={v}" for k, v in kwargs.items())
        base_url += f"?{params}"

    return base_url
