"""Async engine, session factory and declarative base for the speednet tables."""

import os
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

DATABASE_URL = os.getenv("DATABASE_URL", "")

# Hosted Postgres hands out postgres:// or postgresql:// but asyncpg needs postgresql+asyncpg://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql+asyncpg://", 1)
elif DATABASE_URL.startswith("postgresql://"):
    DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)
elif not DATABASE_URL:
    DATABASE_URL = "postgresql+asyncpg://speednet:dev_password_change_in_prod@db:5432/speednet_dev"

engine = create_async_engine(DATABASE_URL, pool_pre_ping=True)

# Shared by get_db and every UnitOfWork
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Declarative base for all speednet ORM models."""


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session for health checks; service writes use UnitOfWork."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """FastAPI dependency returning the session factory used by units of work."""
    return AsyncSessionLocal
