from uuid import uuid4
from sqlalchemy import Column, String, DateTime, Text, Boolean, Date, Integer, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from app.db.base import Base
from app.utils.timezone import utc_now


class Booking(Base):
    """
    Bookings table - owned by the booking flow.
    Defined here for read-only queries (duration and customer details).
    """
    __tablename__ = "bookings"
    __table_args__ = {'extend_existing': True}

    id = Column(Uuid, primary_key=True, default=uuid4)
    duration = Column(Text, nullable=True)  # free text, e.g. "2 hours", "90 minutes"
    customer_name = Column(String(255), nullable=True)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(50), nullable=True)
    customer_whatsapp = Column(String(50), nullable=True)
    workspace_type = Column(String(100), nullable=True)
    date = Column(Date, nullable=True)
    time_slot = Column(String(50), nullable=True)


class UserSession(Base):
    """
    User sessions tracked against bookings.
    Created by the booking flow; completed here when the booked time runs out.
    """
    __tablename__ = "user_sessions"
    __table_args__ = {'extend_existing': True}

    id = Column(Uuid, primary_key=True, default=uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    session_type = Column(String(50), nullable=False, default="booking", index=True)
    start_time = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    end_time = Column(DateTime(timezone=True), nullable=True)
    booking_id = Column(Uuid, ForeignKey("bookings.id"), nullable=True)
    status = Column(String(50), nullable=False, default="active", index=True)  # active | completed | cancelled
    duration_minutes = Column(Integer, nullable=True)
    confirmation_required = Column(Boolean, nullable=True)

    booking = relationship(Booking, lazy="raise")
