"""
Database session management for the pawpalace-core package.

``SessionManager`` hands out async sessions to the reminder store: plain
sessions for the per-query snapshot reads of a reminder pass, and
transactions for the adoption and purchase writes.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns the session factory bound to one engine."""

    def __init__(
        self, engine: AsyncEngine, session_config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize session manager with database engine.

        Store results are returned detached, so sessions default to
        ``expire_on_commit=False``.

        Args:
            engine: SQLAlchemy async engine
            session_config: Optional overrides for ``expire_on_commit``/``autoflush``
        """
        self.engine = engine

        config = {"expire_on_commit": False, "autoflush": True}
        if session_config:
            config.update(session_config)

        self.session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            autoflush=config["autoflush"],
            expire_on_commit=config["expire_on_commit"],
        )

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session for reads; rolled back and closed on error.

        Example:
            async with session_manager.get_session() as session:
                result = await session.execute(select(Pet))
        """
        session = self.session_factory()
        try:
            yield session
        except Exception as e:
            await session.rollback()
            logger.error(f"Session error, rolling back: {e}")
            raise
        finally:
            await session.close()

    @asynccontextmanager
    async def get_transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Session inside a transaction, committed on normal exit.

        Example:
            async with session_manager.get_transaction() as session:
                session.add(AdoptionRequest(pet_id=pet.id, ...))
        """
        async with self.get_session() as session:
            async with session.begin():
                yield session

    async def health_check(self) -> Dict[str, Any]:
        """
        Run a round-trip query for the ``/health`` endpoint.

        Returns:
            Dictionary with ``status`` of ``healthy`` or ``unhealthy`` and the
            query timing in milliseconds
        """
        health_status: Dict[str, Any] = {"status": "healthy", "checks": {}}

        start_time = time.time()
        try:
            async with self.get_session() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            health_status["status"] = "unhealthy"
            health_status["checks"]["database"] = {
                "status": "fail",
                "error": str(e),
                "error_type": type(e).__name__,
            }
            logger.error(f"Database error during health check: {e}")
            return health_status

        health_status["checks"]["basic_query"] = {
            "status": "pass",
            "response_time": round((time.time() - start_time) * 1000, 2),
        }
        return health_status

    async def close_all_sessions(self) -> None:
        """Dispose of the engine and its pooled connections."""
        try:
            await self.engine.dispose()
            logger.info("All database sessions and connections closed")
        except Exception as e:
            logger.error(f"Error closing database sessions: {e}")
