"""Models describing the state of the feed poller."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from vatfeed.domain.status import FeedStatus


class FeedStatusResponse(BaseModel):
    """Outcome of the most recent poll and the snapshot it produced."""

    status: FeedStatus = Field(..., description="Status code of the last poll")
    status_info: str = Field(..., description="Human readable status")
    loading: bool = Field(..., description="Whether a poll is in flight")
    info: str = Field(
        default="", description="Snapshot time and connected client count"
    )
    update: Optional[datetime] = Field(
        default=None, description="UPDATE timestamp of the applied snapshot"
    )
    clients_connected: Optional[int] = Field(
        default=None, description="Client count reported by the feed"
    )
    last_poll: Optional[datetime] = Field(
        default=None, description="When the last poll finished"
    )
    last_error: Optional[str] = Field(
        default=None, description="Error message of the last failed poll"
    )
    flights: int = Field(..., description="Number of tracked flights")
    airports: int = Field(..., description="Number of tracked airports")
    atc_units: int = Field(..., description="Number of tracked control stations")


__all__ = ["FeedStatusResponse"]
