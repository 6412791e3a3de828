"""Async database engine and session management.

Configures the SQLAlchemy async engine with connection pooling and
provides dependency injection for database sessions.

Every store call carries the driver's own timeouts: the pool checkout
timeout and asyncpg's per-statement ``command_timeout``. Nothing here
retries; failures propagate to the request's error handler.
"""

import ssl
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import Settings, settings


def build_connect_args(config: Settings) -> dict[str, Any]:
    """Build asyncpg connect arguments from settings.

    Managed databases (Render, Heroku) present certificates that are not
    in the default trust store, so TLS is required without verification.
    """
    args: dict[str, Any] = {"command_timeout": config.database_command_timeout}
    if config.database_ssl:
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        args["ssl"] = context
    return args


engine = create_async_engine(
    settings.database_url,
    echo=settings.environment == "development" and settings.log_level == "DEBUG",
    pool_pre_ping=True,
    pool_size=settings.database_pool_size,
    pool_timeout=settings.database_pool_timeout,
    connect_args=build_connect_args(settings),
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
