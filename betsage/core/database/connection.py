"""
Async Database Connection Configuration.

Provides SQLAlchemy async engine and session factory. Persistence is optional:
nothing here runs unless DATABASE_URL is set.
"""

import logging
from typing import Any, Dict

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker
)

logger = logging.getLogger(__name__)


# ============================================================================
# Engine Configuration
# ============================================================================

def create_engine(database_url: str, production: bool = False, echo: bool = False) -> AsyncEngine:
    """
    Create Async SQLAlchemy engine.

    In production, PostgreSQL connections require TLS; local and test
    databases connect without it.
    """
    url = make_url(database_url)
    connect_args: Dict[str, Any] = {}
    if production and url.get_backend_name() == "postgresql":
        connect_args["ssl"] = "require"

    logger.info(
        f"Connecting to {url.get_backend_name()} database at "
        f"{url.host or url.database} (tls={'ssl' in connect_args})"
    )

    kwargs: Dict[str, Any] = {"echo": echo, "connect_args": connect_args}
    if url.get_backend_name() != "sqlite":
        kwargs["pool_pre_ping"] = True

    return create_async_engine(database_url, **kwargs)


# ============================================================================
# Session Factory
# ============================================================================

def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
        class_=AsyncSession
    )
