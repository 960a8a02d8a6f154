from app.booking_sessions.repository import BookingSessionRepository
from app.booking_sessions.service import ReconciliationService
from app.db.models import UserSession

__all__ = ["BookingSessionRepository", "ReconciliationService", "UserSession"]
