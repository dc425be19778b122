from typing import AsyncIterator
from fastapi import Request
from sqlmodel import SQLModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from app.core.config import Settings
import structlog

logger = structlog.get_logger()


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Build the process-wide engine and its connection pool."""
    return create_async_engine(
        settings.get_database_url(),
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,
        echo=settings.log_level == "DEBUG",
        future=True
    )


def create_session_maker(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )


async def get_async_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency for getting database session"""
    async with request.app.state.session_maker() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error("Database session error", error_type=type(e).__name__, error=str(e))
            raise


async def create_db_and_tables(engine: AsyncEngine):
    logger.info("Creating database tables")
    async with engine.begin() as conn:
        await conn.execute(text("SELECT 1"))
        await conn.run_sync(SQLModel.metadata.create_all)


async def close_db(engine: AsyncEngine):
    await engine.dispose()
