"""
Tests for closure webhook notifications
"""
import json
from datetime import date, datetime, timedelta
from uuid import uuid4

import httpx
import pytest
import pytz

from app.booking_sessions.expiration import build_decision
from app.booking_sessions.notifier import ClosureNotifier, build_closure_event
from app.booking_sessions.schemas import BookingDetails, BookingSessionRecord

WEBHOOK_URL = "https://hooks.example.com/booking-sessions"
START = datetime(2024, 5, 1, 10, 0, tzinfo=pytz.utc)
DISPATCHED_AT = datetime(2024, 5, 1, 12, 1, 5, 250000, tzinfo=pytz.utc)


@pytest.fixture
def closure_event():
    record = BookingSessionRecord(
        id=uuid4(),
        user_id=uuid4(),
        start_time=START,
        status="active",
        booking=BookingDetails(
            duration="2 hours",
            customer_name="Jane Doe",
            customer_email="jane@example.com",
            customer_phone="+15550100",
            customer_whatsapp="+15550101",
            workspace_type="hot_desk",
            date=date(2024, 5, 1),
            time_slot="10:00-12:00",
        ),
    )
    decision = build_decision(record, START + timedelta(minutes=121))
    return build_closure_event(decision, 120, DISPATCHED_AT)


def make_notifier(handler) -> ClosureNotifier:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ClosureNotifier(client, WEBHOOK_URL, timeout=1.0)


def test_closure_event_payload(closure_event):
    """Test the payload shape the webhook receives."""
    payload = closure_event.model_dump(mode="json", by_alias=True)

    assert payload["action"] == "booking_session_auto_ended"
    assert payload["sessionId"] == str(closure_event.session_id)
    assert payload["userId"] == str(closure_event.user_id)
    assert payload["customerData"] == {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": "+15550100",
        "whatsapp": "+15550101",
    }
    assert payload["bookingDetails"] == {
        "workspace_type": "hot_desk",
        "date": "2024-05-01",
        "time_slot": "10:00-12:00",
        "duration": "2 hours",
    }
    assert payload["sessionDetails"] == {
        "start_time": "2024-05-01T10:00:00.000Z",
        "end_time": "2024-05-01T12:00:00.000Z",
        "duration_minutes": 120,
        "booked_duration": "2 hours",
    }
    assert payload["timestamp"] == "2024-05-01T12:01:05.250Z"


@pytest.mark.asyncio
async def test_notify_posts_event(closure_event):
    requests = []

    def handler(request: httpx.Request):
        requests.append(request)
        return httpx.Response(200, json={"received": True})

    delivered = await make_notifier(handler).notify(closure_event)

    assert delivered is True
    assert len(requests) == 1
    assert requests[0].method == "POST"
    assert str(requests[0].url) == WEBHOOK_URL
    assert json.loads(requests[0].content)["action"] == "booking_session_auto_ended"


@pytest.mark.asyncio
async def test_notify_swallows_transport_errors(closure_event):
    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    assert await make_notifier(handler).notify(closure_event) is False


@pytest.mark.asyncio
async def test_notify_swallows_timeouts(closure_event):
    def handler(request: httpx.Request):
        raise httpx.ReadTimeout("sink too slow", request=request)

    assert await make_notifier(handler).notify(closure_event) is False


@pytest.mark.asyncio
async def test_notify_swallows_sink_errors(closure_event):
    def handler(request: httpx.Request):
        return httpx.Response(503, text="unavailable")

    assert await make_notifier(handler).notify(closure_event) is False
