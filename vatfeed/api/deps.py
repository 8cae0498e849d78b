"""Request dependencies resolving the shared feed state."""

from __future__ import annotations

from fastapi import Request

from vatfeed.services.poller import PollCycleController
from vatfeed.services.tracker import TrafficTracker


def get_poller(request: Request) -> PollCycleController:
    return request.app.state.poller


def get_tracker(request: Request) -> TrafficTracker:
    return request.app.state.poller.tracker
