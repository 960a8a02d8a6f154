import logging
from datetime import datetime
from typing import List, Optional

from app.booking_sessions.closer import SessionCloser
from app.booking_sessions.expiration import ExpirationDecision, build_decision
from app.booking_sessions.notifier import ClosureNotifier, build_closure_event
from app.booking_sessions.repository import BookingSessionRepository
from app.booking_sessions.schemas import RunSummary
from app.utils.timezone import utc_now

logger = logging.getLogger(__name__)


class ReconciliationService:
    """Service layer for one auto-end pass over active booking sessions"""

    def __init__(
        self,
        repository: BookingSessionRepository,
        notifier: ClosureNotifier,
        closer: Optional[SessionCloser] = None,
    ):
        self.repository = repository
        self.notifier = notifier
        self.closer = closer or SessionCloser(repository)

    async def run(self, now: Optional[datetime] = None) -> RunSummary:
        """
        Run one reconciliation pass.

        Steps:
        1. Fetch active booking sessions (raises SessionFetchError, nothing is modified)
        2. Keep the ones whose booked time has run out
        3. Complete each one, then notify the webhook
        4. Summarize

        Close and notification failures are contained; only the fetch is fatal.
        """
        now = now or utc_now()

        sessions = await self.repository.fetch_active_booking_sessions()

        expired: List[ExpirationDecision] = []
        for session in sessions:
            decision = build_decision(session, now)
            if decision is not None:
                expired.append(decision)

        ended_count = 0
        for decision in expired:
            result = await self.closer.close(decision)
            if not result.success:
                continue

            ended_count += 1
            event = build_closure_event(decision, result.duration_minutes, utc_now())
            await self.notifier.notify(event)

        summary = RunSummary(
            total_active_sessions=len(sessions),
            ended_sessions=ended_count,
            timestamp=utc_now(),
        )
        logger.info(summary.message)
        return summary
