import asyncio
import logging
from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.postgres import get_db
from app.booking_sessions.exceptions import SessionFetchError
from app.booking_sessions.notifier import ClosureNotifier
from app.booking_sessions.repository import BookingSessionRepository
from app.booking_sessions.schemas import RunErrorResponse, RunSummaryResponse
from app.booking_sessions.service import ReconciliationService
from app.utils.timezone import isoformat_utc, utc_now

logger = logging.getLogger(__name__)

CORS_ALLOW_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "Authorization"]
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
}

router = APIRouter(
    prefix="/auto-end-booking-sessions",
    tags=["booking-sessions"],
)


def get_notifier(request: Request) -> ClosureNotifier:
    settings = request.app.state.settings
    return ClosureNotifier(
        client=request.app.state.http_client,
        webhook_url=settings.NOTIFICATION_WEBHOOK_URL,
        timeout=settings.NOTIFICATION_TIMEOUT_SECONDS,
    )


def get_reconciliation_service(
    db: AsyncSession = Depends(get_db),
    notifier: ClosureNotifier = Depends(get_notifier),
) -> ReconciliationService:
    return ReconciliationService(BookingSessionRepository(db), notifier)


def get_run_lock(request: Request) -> asyncio.Lock:
    return request.app.state.run_lock


@router.options("")
async def probe():
    """Pre-flight probe: success, no body."""
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


@router.api_route(
    "",
    methods=["GET", "POST", "PUT", "DELETE"],
    response_model=RunSummaryResponse,
    response_model_by_alias=True,
    responses={500: {"model": RunErrorResponse}},
)
async def auto_end_booking_sessions(
    response: Response,
    service: ReconciliationService = Depends(get_reconciliation_service),
    run_lock: asyncio.Lock = Depends(get_run_lock),
):
    """
    Run one auto-end pass over active booking sessions.

    Workflow:
    1. Fetches active booking sessions with their bookings
    2. Completes the ones whose booked duration has elapsed
    3. Notifies the webhook for every completed session

    Concurrent calls are serialized so a session cannot be ended twice.
    """
    try:
        async with run_lock:
            summary = await service.run()
    except SessionFetchError as e:
        logger.error(f"Error in auto-end-booking-sessions: {e}")
        return _error_response(str(e))
    except Exception as e:
        logger.error(f"Unexpected error in auto-end-booking-sessions: {e}", exc_info=True)
        return _error_response(str(e))

    response.headers.update(CORS_HEADERS)
    return RunSummaryResponse(
        message=summary.message,
        total_active_sessions=summary.total_active_sessions,
        ended_sessions=summary.ended_sessions,
        timestamp=isoformat_utc(summary.timestamp),
    )


def _error_response(error: str) -> JSONResponse:
    body = RunErrorResponse(error=error, timestamp=isoformat_utc(utc_now()))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
        headers=CORS_HEADERS,
    )
