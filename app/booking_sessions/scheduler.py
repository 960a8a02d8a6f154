"""Periodic auto-end loop, for deployments without an external cron trigger"""
import asyncio
import logging
from typing import Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import Settings
from app.db.postgres import build_engine, build_session_factory
from app.booking_sessions.notifier import ClosureNotifier
from app.booking_sessions.repository import BookingSessionRepository
from app.booking_sessions.schemas import RunSummary
from app.booking_sessions.service import ReconciliationService

logger = logging.getLogger(__name__)


async def run_once(
    session_factory: async_sessionmaker[AsyncSession],
    notifier: ClosureNotifier,
) -> RunSummary:
    """Run one pass in its own database session."""
    async with session_factory() as db:
        service = ReconciliationService(BookingSessionRepository(db), notifier)
        return await service.run()


async def run_forever(settings: Settings, stop_event: Optional[asyncio.Event] = None) -> None:
    """
    Repeat run_once every RECONCILE_INTERVAL_SECONDS until stop_event is set.

    A failed pass is logged and the loop carries on with the next one.
    """
    stop_event = stop_event or asyncio.Event()
    engine = build_engine(settings)
    session_factory = build_session_factory(engine)

    logger.info("=" * 60)
    logger.info("Booking Session Service - Auto-End Scheduler")
    logger.info(f"Interval: {settings.RECONCILE_INTERVAL_SECONDS}s")
    logger.info(f"Webhook: {settings.NOTIFICATION_WEBHOOK_URL}")
    logger.info("=" * 60)

    try:
        async with httpx.AsyncClient() as client:
            notifier = ClosureNotifier(
                client=client,
                webhook_url=settings.NOTIFICATION_WEBHOOK_URL,
                timeout=settings.NOTIFICATION_TIMEOUT_SECONDS,
            )
            while not stop_event.is_set():
                try:
                    await run_once(session_factory, notifier)
                except Exception as e:
                    logger.error(f"Auto-end run failed: {e}", exc_info=True)

                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=settings.RECONCILE_INTERVAL_SECONDS)
                except asyncio.TimeoutError:
                    pass
    finally:
        await engine.dispose()
        logger.info("Scheduler stopped")
