"""Tracked network state: flights, airports and control stations."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Iterable, Sequence, TypeVar

from vatfeed.domain.entities import (
    Airport,
    ControlStation,
    Flight,
    FlightPlan,
    TrackedEntity,
)
from vatfeed.domain.grounded import OperatingStateClassifier
from vatfeed.domain.identity import IdentityRegistry, normalize_callsign
from vatfeed.domain.position import Bounds
from vatfeed.domain.selection import EntitySelection
from vatfeed.domain.trail import TrailManager
from vatfeed.ingestors.vatsim_parser import ParsedAtc, ParsedFeed, ParsedFlight
from vatfeed.services.airports import AirportAggregator
from vatfeed.services.reconciler import EntityReconciler

logger = logging.getLogger("vatfeed.services.tracker")

E = TypeVar("E", bound=TrackedEntity)


def flight_from_record(
    record: ParsedFlight, classifier: OperatingStateClassifier | None = None
) -> Flight:
    plan = None
    if record.flight_plan is not None:
        parsed_plan = record.flight_plan
        plan = FlightPlan(
            origin=parsed_plan.origin,
            destination=parsed_plan.destination,
            alternate=parsed_plan.alternate,
            route=parsed_plan.route,
            remarks=parsed_plan.remarks,
            flight_rules=parsed_plan.flight_rules,
        )
    return Flight(
        callsign=record.callsign,
        id=record.id,
        pilot_name=record.name,
        aircraft_type=record.aircraft,
        transponder_code=record.transponder,
        flight_plan=plan,
        classifier=classifier,
        latitude=record.latitude,
        longitude=record.longitude,
        altitude=record.altitude,
        groundspeed=record.groundspeed,
        heading=record.heading,
        frequency=record.frequency,
        qnh=record.qnh,
        visibility=record.visibility,
    )


def station_from_record(record: ParsedAtc) -> ControlStation:
    return ControlStation(
        callsign=record.callsign,
        id=record.id,
        controller_name=record.name,
        atis_text=record.atis,
        latitude=record.latitude,
        longitude=record.longitude,
        altitude=record.altitude,
        frequency=record.frequency,
        qnh=record.qnh,
        visibility=record.visibility,
    )


def merge_entities(primary: Iterable[E], secondary: Iterable[E]) -> list[E]:
    """Combine two sources, dropping secondary entities already in primary.

    Used to merge this feed with a merge-compatible source (e.g. a local
    simulator) by normalized callsign.
    """

    merged = list(primary)
    for entity in secondary:
        if not any(existing.same_entity(entity) for existing in merged):
            merged.append(entity)
    return merged


class TrafficTracker:
    """Owns the tracked collections and applies parsed feeds to them.

    Collections are replaced only inside :meth:`apply`, which runs without
    yielding to the event loop; readers between polls always see a complete
    state.
    """

    def __init__(
        self,
        *,
        registry: IdentityRegistry | None = None,
        classifier: OperatingStateClassifier | None = None,
        trail_manager: TrailManager | None = None,
        vicinity_km: float | None = None,
    ) -> None:
        self.registry = registry if registry is not None else IdentityRegistry()
        self.classifier = classifier if classifier is not None else OperatingStateClassifier()
        self.trail_manager = trail_manager if trail_manager is not None else TrailManager()
        self.reconciler = EntityReconciler(self.registry)
        self.airport_aggregator = AirportAggregator(self.reconciler, vicinity_km=vicinity_km)
        self.filter = EntitySelection("filter")
        self.followed = EntitySelection("followed")
        self.reconciler.add_dispose_hook(self.filter.remove_entities)
        self.reconciler.add_dispose_hook(self.followed.remove_entities)

        self._flights: list[Flight] = []
        self._airports: list[Airport] = []
        self._atc_units: list[ControlStation] = []
        self.last_update: datetime | None = None
        self.clients_connected: int | None = None
        self.info = ""

    # read-only views

    @property
    def flights(self) -> tuple[Flight, ...]:
        return tuple(self._flights)

    @property
    def airports(self) -> tuple[Airport, ...]:
        return tuple(self._airports)

    @property
    def atc_units(self) -> tuple[ControlStation, ...]:
        return tuple(self._atc_units)

    def clients(self) -> list[TrackedEntity]:
        """Primary entities: flights and airports."""

        return [*self._flights, *self._airports]

    def all_clients(self) -> list[TrackedEntity]:
        return [*self._flights, *self._airports, *self._atc_units]

    # reconciliation

    def apply(self, parsed: ParsedFeed) -> None:
        incoming_flights = [flight_from_record(r, self.classifier) for r in parsed.flights]
        incoming_stations = [station_from_record(r) for r in parsed.atc_units]

        self._flights = self.reconciler.reconcile(self._flights, incoming_flights)
        self._atc_units = self.reconciler.reconcile(self._atc_units, incoming_stations)
        self._airports = self.airport_aggregator.fold_stations(
            self._airports, self._atc_units, self._flights
        )

        inserted = 0
        for flight in self._flights:
            if self.trail_manager.append_waypoint(flight):
                inserted += 1

        self.last_update = parsed.update
        self.clients_connected = parsed.clients_connected
        self.info = parsed.info
        logger.info(
            "Tracking %s flights, %s airports, %s ATC units (%s new waypoints)",
            len(self._flights),
            len(self._airports),
            len(self._atc_units),
            inserted,
        )

    # lookups

    def find_by_object_id(self, object_id: int | None) -> TrackedEntity | None:
        entity = self.registry.get(object_id)
        if entity is None or entity.disposed:
            return None
        return entity

    def find_by_id(self, client_id: str | None) -> list[TrackedEntity]:
        if not client_id:
            return []
        return [e for e in self.all_clients() if e.id == client_id]

    def find_by_id_first(self, client_id: str | None) -> TrackedEntity | None:
        found = self.find_by_id(client_id)
        return found[0] if found else None

    def find_by_callsign(
        self, callsign: str | None, entities: Sequence[E] | None = None
    ) -> TrackedEntity | None:
        normalized = normalize_callsign(callsign)
        if normalized is None:
            return None
        candidates = entities if entities is not None else self.all_clients()
        for entity in candidates:
            if entity.callsign == normalized:
                return entity
        return None

    def find_flight(self, callsign: str | None) -> Flight | None:
        return self.find_by_callsign(callsign, self._flights)

    def find_airport(self, code: str | None) -> Airport | None:
        return self.find_by_callsign(code, self._airports)

    def find_in_bounds(
        self, bounds: Bounds, entities: Sequence[E] | None = None
    ) -> list[TrackedEntity]:
        candidates = entities if entities is not None else self.clients()
        return [entity for entity in candidates if entity.is_in(bounds)]

    def reset(self) -> None:
        """Dispose everything, e.g. when the data source changes."""

        self.reconciler.dispose([*self._flights, *self._airports, *self._atc_units])
        self._flights = []
        self._airports = []
        self._atc_units = []
        self.last_update = None
        self.clients_connected = None
        self.info = ""


__all__ = [
    "TrafficTracker",
    "flight_from_record",
    "merge_entities",
    "station_from_record",
]
