"""Feed status and manual refresh endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from vatfeed.api.deps import get_poller
from vatfeed.domain.status import status_to_info
from vatfeed.models import FeedStatusResponse
from vatfeed.services.poller import PollCycleController

router = APIRouter(prefix="/api/v1/feed", tags=["feed"])

logger = logging.getLogger("vatfeed.api.feed")


def _status_response(poller: PollCycleController) -> FeedStatusResponse:
    tracker = poller.tracker
    return FeedStatusResponse(
        status=poller.last_status,
        status_info=status_to_info(poller.last_status),
        loading=poller.loading,
        info=tracker.info,
        update=tracker.last_update,
        clients_connected=tracker.clients_connected,
        last_poll=poller.last_poll,
        last_error=poller.last_error,
        flights=len(tracker.flights),
        airports=len(tracker.airports),
        atc_units=len(tracker.atc_units),
    )


@router.get(
    "/status",
    response_model=FeedStatusResponse,
    summary="Status of the last feed poll",
)
def get_feed_status(
    poller: PollCycleController = Depends(get_poller),
) -> FeedStatusResponse:
    return _status_response(poller)


@router.post(
    "/refresh",
    response_model=FeedStatusResponse,
    summary="Poll the feed now",
)
async def refresh_feed(
    poller: PollCycleController = Depends(get_poller),
) -> FeedStatusResponse:
    """Run one poll cycle immediately; rejected while another is running."""

    result = await poller.poll_once()
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="VATSIM already loading",
        )
    return _status_response(poller)
