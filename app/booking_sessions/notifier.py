"""Webhook notifications for auto-ended booking sessions"""
import logging
from datetime import datetime

import httpx

from app.booking_sessions.expiration import ExpirationDecision
from app.booking_sessions.schemas import (
    BookingEventDetails,
    ClosureEvent,
    CustomerData,
    SessionEventDetails,
)
from app.utils.timezone import isoformat_utc

logger = logging.getLogger(__name__)


def build_closure_event(
    decision: ExpirationDecision,
    duration_minutes: int,
    dispatched_at: datetime,
) -> ClosureEvent:
    """Build the webhook payload for a session that was just completed"""
    session = decision.session
    booking = session.booking

    return ClosureEvent(
        session_id=session.id,
        user_id=session.user_id,
        customer_data=CustomerData(
            name=booking.customer_name,
            email=booking.customer_email,
            phone=booking.customer_phone,
            whatsapp=booking.customer_whatsapp,
        ),
        booking_details=BookingEventDetails(
            workspace_type=booking.workspace_type,
            date=booking.date,
            time_slot=booking.time_slot,
            duration=booking.duration,
        ),
        session_details=SessionEventDetails(
            start_time=isoformat_utc(session.start_time),
            end_time=isoformat_utc(decision.end_time),
            duration_minutes=duration_minutes,
            booked_duration=booking.duration,
        ),
        timestamp=isoformat_utc(dispatched_at),
    )


class ClosureNotifier:
    """Fire-and-forget publisher of session closure events"""

    def __init__(self, client: httpx.AsyncClient, webhook_url: str, timeout: float = 10.0):
        self.client = client
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def notify(self, event: ClosureEvent) -> bool:
        """
        POST the event to the webhook.

        Every failure (transport error, timeout, error status) is logged and
        swallowed. Returns whether the sink accepted the event.
        """
        try:
            response = await self.client.post(
                self.webhook_url,
                json=event.model_dump(mode="json", by_alias=True),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except Exception as e:
            logger.error(f"Webhook failed for session {event.session_id}: {e}")
            return False

        return True
