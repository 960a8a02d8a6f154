import asyncio
from datetime import date, datetime
from uuid import uuid4

import pytest
import pytz
from httpx import AsyncClient, ASGITransport
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.models import Base, Booking, UserSession
from app.booking_sessions.repository import BookingSessionRepository
from app.booking_sessions.schemas import BookingSessionRecord
from app.booking_sessions.router import get_reconciliation_service, get_run_lock
from app.booking_sessions.service import ReconciliationService

# In-memory database shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"

SESSION_START = datetime(2024, 5, 1, 10, 0, tzinfo=pytz.utc)


class ReadBackRepository(BookingSessionRepository):
    """Repository with a direct read used to check what a run committed."""

    async def get_by_id(self, session_id):
        """Get session by ID, any status"""
        stmt = (
            select(UserSession)
            .where(UserSession.id == session_id)
            .options(selectinload(UserSession.booking))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        session = result.scalar_one_or_none()
        return BookingSessionRecord.model_validate(session) if session else None


class RecordingNotifier:
    """Notifier double that records every event it is given."""

    def __init__(self):
        self.events = []

    async def notify(self, event):
        self.events.append(event)
        return True


@pytest.fixture(scope="function")
async def db_engine():
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def db_session(session_factory):
    """Create a fresh database session for each test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def repository(db_session):
    return ReadBackRepository(db_session)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def seed_session(session_factory):
    """Insert a booking session (and its booking) and return the session id."""

    async def _seed(
        start_time: datetime = SESSION_START,
        duration: str | None = "2 hours",
        status: str = "active",
        session_type: str = "booking",
        with_booking: bool = True,
    ):
        async with session_factory() as db:
            booking = None
            if with_booking:
                booking = Booking(
                    id=uuid4(),
                    duration=duration,
                    customer_name="Jane Doe",
                    customer_email="jane@example.com",
                    customer_phone="+15550100",
                    customer_whatsapp="+15550100",
                    workspace_type="meeting_room",
                    date=date(2024, 5, 1),
                    time_slot="10:00-12:00",
                )
                db.add(booking)
            session = UserSession(
                id=uuid4(),
                user_id=uuid4(),
                session_type=session_type,
                start_time=start_time,
                booking_id=booking.id if booking else None,
                status=status,
            )
            db.add(session)
            await db.commit()
            return session.id

    return _seed


@pytest.fixture(scope="function")
async def client(db_session, notifier):
    """Create a test client with overridden dependencies."""

    def override_service():
        return ReconciliationService(BookingSessionRepository(db_session), notifier)

    app.dependency_overrides[get_reconciliation_service] = override_service
    app.dependency_overrides[get_run_lock] = lambda: asyncio.Lock()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
