"""Booking Session Repository Layer"""
from uuid import UUID
from datetime import datetime
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from app.db.models import UserSession
from app.booking_sessions.exceptions import SessionFetchError, SessionUpdateError
from app.booking_sessions.schemas import BookingSessionRecord

BOOKING_SESSION_TYPE = "booking"
STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"


class BookingSessionRepository:
    """Repository for booking session database operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_active_booking_sessions(self) -> List[BookingSessionRecord]:
        """Get all active booking sessions joined with their booking"""
        stmt = (
            select(UserSession)
            .where(
                and_(
                    UserSession.session_type == BOOKING_SESSION_TYPE,
                    UserSession.status == STATUS_ACTIVE,
                )
            )
            .options(selectinload(UserSession.booking))
        )
        try:
            result = await self.db.execute(stmt)
            sessions = result.scalars().all()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise SessionFetchError(str(e)) from e

        # Detach from the ORM so a later rollback cannot expire what the run is holding
        return [BookingSessionRecord.model_validate(session) for session in sessions]

    async def mark_completed(self, session_id: UUID, end_time: datetime, duration_minutes: int) -> None:
        """Complete a single session. No version check: last write wins."""
        stmt = (
            update(UserSession)
            .where(UserSession.id == session_id)
            .values(
                end_time=end_time,
                duration_minutes=duration_minutes,
                status=STATUS_COMPLETED,
                confirmation_required=True,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise SessionUpdateError(session_id, str(e)) from e
