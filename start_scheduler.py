"""
Auto-End Scheduler Entry Point
Runs the booking session auto-end pass on a fixed interval
"""
import asyncio
import logging

from dotenv import load_dotenv

from app.config import get_settings
from app.booking_sessions.scheduler import run_forever

if __name__ == "__main__":
    load_dotenv()
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)
    try:
        asyncio.run(run_forever(settings))
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Stopping scheduler...")
