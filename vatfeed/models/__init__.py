"""Pydantic models for vatfeed."""

from .feed import FeedStatusResponse
from .traffic import (
    AirportOut,
    AnyEntityOut,
    AtcUnitOut,
    EntityOut,
    FlightOut,
    FlightPlanOut,
    WaypointOut,
    entity_out,
)

__all__ = [
    "AirportOut",
    "AnyEntityOut",
    "AtcUnitOut",
    "EntityOut",
    "FeedStatusResponse",
    "FlightOut",
    "FlightPlanOut",
    "WaypointOut",
    "entity_out",
]
