from uuid import UUID
from datetime import datetime, date as date_type
from pydantic import BaseModel, ConfigDict, Field


class BookingDetails(BaseModel):
    """Booking row joined to a session (read-only)"""
    model_config = ConfigDict(from_attributes=True)

    duration: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    customer_whatsapp: str | None = None
    workspace_type: str | None = None
    date: date_type | None = None
    time_slot: str | None = None


class BookingSessionRecord(BaseModel):
    """Active booking session as fetched for one reconciliation run"""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    start_time: datetime
    status: str  # active | completed | cancelled
    end_time: datetime | None = None
    duration_minutes: int | None = None
    confirmation_required: bool | None = None
    booking: BookingDetails | None = None


# --------------------
# Closure notification payload
# --------------------

class CustomerData(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    whatsapp: str | None = None


class BookingEventDetails(BaseModel):
    workspace_type: str | None = None
    date: date_type | None = None
    time_slot: str | None = None
    duration: str | None = None


class SessionEventDetails(BaseModel):
    start_time: str
    end_time: str
    duration_minutes: int
    booked_duration: str | None = None


class ClosureEvent(BaseModel):
    """Webhook payload sent when a session is auto-ended"""
    model_config = ConfigDict(populate_by_name=True)

    action: str = "booking_session_auto_ended"
    session_id: UUID = Field(alias="sessionId")
    user_id: UUID = Field(alias="userId")
    customer_data: CustomerData = Field(alias="customerData")
    booking_details: BookingEventDetails = Field(alias="bookingDetails")
    session_details: SessionEventDetails = Field(alias="sessionDetails")
    timestamp: str


# --------------------
# Run results
# --------------------

class RunSummary(BaseModel):
    """Outcome of one reconciliation pass"""
    total_active_sessions: int
    ended_sessions: int
    timestamp: datetime

    @property
    def message(self) -> str:
        return (
            f"Processed {self.total_active_sessions} active sessions, "
            f"ended {self.ended_sessions} expired sessions"
        )


class RunSummaryResponse(BaseModel):
    """Reconciliation run response"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    total_active_sessions: int = Field(alias="totalActiveSessions")
    ended_sessions: int = Field(alias="endedSessions")
    timestamp: str


class RunErrorResponse(BaseModel):
    """Reconciliation run failure response"""
    success: bool = False
    error: str
    timestamp: str
