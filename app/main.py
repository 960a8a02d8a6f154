import asyncio
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from dotenv import load_dotenv

from app.config import get_settings
from app.db.postgres import build_engine, build_session_factory
from app.booking_sessions.router import router as booking_sessions_router

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing store secrets abort startup here
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.session_factory = build_session_factory(engine)
    app.state.run_lock = asyncio.Lock()
    async with httpx.AsyncClient() as client:
        app.state.http_client = client
        yield
    await engine.dispose()


app = FastAPI(lifespan=lifespan)

app.include_router(booking_sessions_router)


@app.get("/health")
def health():
    return {"status": "ok"}
