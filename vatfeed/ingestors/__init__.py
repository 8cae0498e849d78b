"""Feed ingestion for vatfeed."""

from .vatsim import VatsimFeedReader
from .vatsim_parser import (
    ParsedAtc,
    ParsedFeed,
    ParsedFlight,
    ParsedFlightPlan,
    RecordParser,
    UpdateHistory,
)

__all__ = [
    "ParsedAtc",
    "ParsedFeed",
    "ParsedFlight",
    "ParsedFlightPlan",
    "RecordParser",
    "UpdateHistory",
    "VatsimFeedReader",
]
