"""Custom exceptions for booking session reconciliation"""
from typing import Optional
from uuid import UUID


class BookingSessionError(Exception):
    """Base class for booking session store errors"""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class SessionFetchError(BookingSessionError):
    """Raised when active booking sessions cannot be read from the store"""
    def __init__(self, details: Optional[str] = None):
        super().__init__("Failed to fetch active booking sessions", details)


class SessionUpdateError(BookingSessionError):
    """Raised when a single session cannot be marked completed"""
    def __init__(self, session_id: UUID, details: Optional[str] = None):
        self.session_id = session_id
        super().__init__(f"Failed to update session {session_id}", details)
