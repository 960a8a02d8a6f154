"""Decide whether a booking session has run past its booked duration"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from app.booking_sessions.duration import parse_duration_minutes
from app.booking_sessions.schemas import BookingSessionRecord
from app.utils.timezone import to_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Expiration:
    end_time: datetime
    is_expired: bool


@dataclass(frozen=True)
class ExpirationDecision:
    """An expired session together with its computed end time. Lives for one run only."""
    session: BookingSessionRecord
    end_time: datetime
    duration_minutes: int


def evaluate_expiration(start_time: datetime, duration_minutes: int, now: datetime) -> Expiration:
    """end_time = start_time + duration; expired once now reaches end_time (inclusive)."""
    end_time = start_time + timedelta(minutes=duration_minutes)
    return Expiration(end_time=end_time, is_expired=now >= end_time)


def build_decision(session: BookingSessionRecord, now: datetime) -> Optional[ExpirationDecision]:
    """
    Evaluate one fetched session.

    Returns None when the session has no booking (not evaluable) or has not
    expired yet.
    """
    if session.booking is None:
        logger.debug(f"Session {session.id} has no booking, skipping")
        return None

    duration_minutes = parse_duration_minutes(session.booking.duration)
    try:
        expiration = evaluate_expiration(to_utc(session.start_time), duration_minutes, now)
    except OverflowError:
        # End time past datetime.max: the session can never expire
        logger.warning(f"Session {session.id} booked duration {session.booking.duration!r} is out of range, skipping")
        return None

    if not expiration.is_expired:
        return None

    return ExpirationDecision(
        session=session,
        end_time=expiration.end_time,
        duration_minutes=duration_minutes,
    )
