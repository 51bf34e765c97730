"""Database engine, connection pool and session management"""
import logging
import ssl
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from alertnav.config import Settings

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


def _engine_options(settings: Settings) -> dict:
    """Engine keyword arguments for the configured backend"""
    url = settings.sqlalchemy_url
    if url.startswith("sqlite"):
        # Single shared connection so in-memory databases survive between sessions
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }

    connect_args = {
        "server_settings": {"timezone": "UTC"},
        "command_timeout": 60,
    }
    if settings.postgres_ssl:
        # Managed Postgres (Aurora/RDS) certificates are not verified
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = context

    return {
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_recycle": settings.db_pool_recycle,
        "pool_timeout": settings.db_pool_timeout,
        "connect_args": connect_args,
    }


class Database:
    """Process-owned connection pool and session factory"""

    def __init__(self, settings: Settings):
        self.engine = create_async_engine(
            settings.sqlalchemy_url,
            echo=settings.debug,
            **_engine_options(settings)
        )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autocommit=False,
            autoflush=False
        )
        logger.info("Database engine initialized")

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Acquire a session; the connection goes back to the pool on exit, error or not"""
        async with self.session_factory() as session:
            yield session

    async def create_all(self):
        """Create tables from the ORM metadata"""
        # Models register themselves on Base.metadata when imported
        import alertnav.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> dict:
        """Check database connection health"""
        start = time.time()
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            latency = (time.time() - start) * 1000
            return {'healthy': True, 'latency_ms': latency, 'error': None}
        except Exception as e:
            latency = (time.time() - start) * 1000
            logger.warning(f"Database health check failed: {e}")
            return {'healthy': False, 'latency_ms': latency, 'error': 'database unreachable'}

    async def dispose(self):
        """Close every pooled connection"""
        await self.engine.dispose()
        logger.info("Database engine closed")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get a database session from the application's pool"""
    database: Database = request.app.state.db
    async with database.session() as session:
        yield session
