"""Complete booking sessions whose booked time has run out"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from app.booking_sessions.exceptions import SessionUpdateError
from app.booking_sessions.expiration import ExpirationDecision
from app.booking_sessions.repository import BookingSessionRepository
from app.utils.timezone import to_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CloseResult:
    session_id: UUID
    success: bool
    duration_minutes: Optional[int] = None
    reason: Optional[str] = None


def actual_duration_minutes(start_time: datetime, end_time: datetime) -> int:
    """Elapsed time rounded up to the next whole minute."""
    elapsed = to_utc(end_time) - to_utc(start_time)
    return math.ceil(elapsed.total_seconds() / 60)


class SessionCloser:
    """Applies the active -> completed transition to one session"""

    def __init__(self, repository: BookingSessionRepository):
        self.repository = repository

    async def close(self, decision: ExpirationDecision) -> CloseResult:
        """
        Mark the session completed with its computed end time.

        A store failure is logged and returned as a failed result; the session
        stays active and is picked up again by the next run.
        """
        session = decision.session
        duration_minutes = actual_duration_minutes(session.start_time, decision.end_time)

        try:
            await self.repository.mark_completed(session.id, decision.end_time, duration_minutes)
        except SessionUpdateError as e:
            logger.error(f"Failed to update session {session.id}: {e}")
            return CloseResult(session_id=session.id, success=False, reason=str(e))
        except Exception as e:
            logger.error(f"Failed to update session {session.id}: {e}", exc_info=True)
            return CloseResult(session_id=session.id, success=False, reason=str(e))

        logger.info(f"Session {session.id} auto-ended after {duration_minutes} minutes")
        return CloseResult(session_id=session.id, success=True, duration_minutes=duration_minutes)
