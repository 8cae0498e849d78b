"""Domain model of the tracked network traffic."""

from .entities import (
    AIRPORT_ATC_TYPES,
    Airport,
    AtcType,
    ControlStation,
    Flight,
    FlightPlan,
    TrackedEntity,
)
from .grounded import OperatingStateClassifier
from .identity import IdentityRegistry, NetworkIdentity, normalize_callsign
from .position import Bounds, MapPosition, same_location, vicinity_bounds
from .selection import EntitySelection
from .status import FeedStatus, status_to_info
from .trail import Trail, TrailManager, Waypoint

__all__ = [
    "AIRPORT_ATC_TYPES",
    "Airport",
    "AtcType",
    "Bounds",
    "ControlStation",
    "EntitySelection",
    "FeedStatus",
    "Flight",
    "FlightPlan",
    "IdentityRegistry",
    "MapPosition",
    "NetworkIdentity",
    "OperatingStateClassifier",
    "TrackedEntity",
    "Trail",
    "TrailManager",
    "Waypoint",
    "normalize_callsign",
    "same_location",
    "status_to_info",
    "vicinity_bounds",
]
