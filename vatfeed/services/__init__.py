"""Service layer: reconciliation, airport aggregation and polling."""

from .airports import AirportAggregator
from .poller import PollCycleController
from .reconciler import EntityReconciler, find_by_callsign_first
from .tracker import TrafficTracker, flight_from_record, merge_entities, station_from_record

__all__ = [
    "AirportAggregator",
    "EntityReconciler",
    "PollCycleController",
    "TrafficTracker",
    "find_by_callsign_first",
    "flight_from_record",
    "merge_entities",
    "station_from_record",
]
