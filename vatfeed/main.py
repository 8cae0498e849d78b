from __future__ import annotations

import asyncio
import contextlib
import logging
import time

from fastapi import FastAPI, Request

from vatfeed.api import api_router
from vatfeed.config import settings
from vatfeed.ingestors import RecordParser, UpdateHistory, VatsimFeedReader
from vatfeed.services import PollCycleController, TrafficTracker

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("vatfeed")


def build_poller() -> PollCycleController:
    """Wire reader, parser and tracker from the current settings."""

    return PollCycleController(
        reader=VatsimFeedReader(feed_url=settings.feed_url, timeout=settings.feed_timeout),
        parser=RecordParser(UpdateHistory(settings.update_history_size)),
        tracker=TrafficTracker(vicinity_km=settings.airport_vicinity_km),
        interval=settings.poll_interval,
    )


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown lifecycle."""

    if getattr(app.state, "poller", None) is None:
        app.state.poller = build_poller()

    if settings.poll_enabled:
        app.state.poll_task = asyncio.create_task(app.state.poller.run())
        logger.info(
            "VATSIM poller started for %s every %ss",
            settings.feed_url,
            settings.poll_interval,
        )

    try:
        yield
    finally:
        task = getattr(app.state, "poll_task", None)
        if task:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            app.state.poll_task = None


app = FastAPI(title="vatfeed", lifespan=lifespan)

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "vatfeed is running"}
