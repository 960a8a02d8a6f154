"""PostgreSQL Database Configuration"""
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.config import Settings


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the booking store, authenticating with the service key."""
    url = make_url(settings.BOOKING_STORE_URL)
    if url.host and url.password is None:
        url = url.set(password=settings.BOOKING_STORE_SERVICE_KEY)

    return create_async_engine(
        url,
        echo=settings.DB_ECHO,
        poolclass=NullPool,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory"""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
