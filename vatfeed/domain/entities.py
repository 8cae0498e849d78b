"""Tracked entities built from the network feed.

Every entity embeds a :class:`MapPosition` and a :class:`NetworkIdentity`
instead of inheriting from them. Entities are long-lived: the reconciler
updates them in place so references held elsewhere stay valid across polls.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Iterable, Optional
import weakref

from vatfeed.config import settings
from vatfeed.domain.grounded import OperatingStateClassifier
from vatfeed.domain.identity import NetworkIdentity, normalize_callsign
from vatfeed.domain.position import Bounds, MapPosition, vicinity_bounds
from vatfeed.domain.trail import Trail


@lru_cache(maxsize=1)
def default_classifier() -> OperatingStateClassifier:
    return OperatingStateClassifier()


class TrackedEntity:
    """Common state of everything that is tracked across polls."""

    kind = "entity"

    def __init__(
        self,
        *,
        callsign: str | None,
        id: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
        elevation: float | None = None,
        altitude: float | None = None,
        groundspeed: float | None = None,
        heading: float | None = None,
        frequency: float | None = None,
        qnh: float | None = None,
        visibility: float | None = None,
    ) -> None:
        self.identity = NetworkIdentity.from_callsign(callsign, id)
        self.position = MapPosition(elevation=elevation)
        self.position.set_latitude_longitude(latitude, longitude)
        self.altitude = altitude
        self.groundspeed = groundspeed
        self.heading = heading
        self.frequency = frequency
        self.qnh = qnh
        self.visibility = visibility
        self.disposed = False

    # identity

    @property
    def object_id(self) -> int | None:
        return self.identity.object_id

    @property
    def id(self) -> str | None:
        return self.identity.id

    @property
    def callsign(self) -> str | None:
        return self.identity.callsign

    @property
    def raw_callsign(self) -> str | None:
        return self.identity.raw_callsign

    def same_entity(self, other: Optional["TrackedEntity"]) -> bool:
        """Same object id, or the same normalized callsign."""

        if other is None:
            return False
        if other is self:
            return True
        return self.identity.same_as(other.identity)

    # position

    @property
    def latitude(self) -> float | None:
        return self.position.latitude

    @property
    def longitude(self) -> float | None:
        return self.position.longitude

    @property
    def elevation(self) -> float | None:
        return self.position.elevation

    def set_elevation(self, elevation: float | None) -> None:
        """Terrain elevation in feet, assigned by an elevation collaborator."""

        self.position.elevation = elevation

    def is_in(self, bounds: Bounds | None) -> bool:
        return self.position.is_in(bounds)

    # lifecycle

    def update(self, other: "TrackedEntity") -> None:
        self.identity.id = other.identity.id
        self.identity.raw_callsign = other.identity.raw_callsign or self.identity.raw_callsign
        self.position.set_latitude_longitude(other.latitude, other.longitude)
        self.altitude = other.altitude
        self.groundspeed = other.groundspeed
        self.heading = other.heading
        self.frequency = other.frequency
        self.qnh = other.qnh
        self.visibility = other.visibility

    def dispose(self) -> bool:
        """Release the entity. Returns False if it was already disposed."""

        if self.disposed:
            return False
        self.disposed = True
        return True

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} objId:{self.object_id} "
            f"{self.callsign} {self.latitude},{self.longitude}>"
        )


class FlightPlan:
    """Filed flight plan, owned by exactly one flight."""

    def __init__(
        self,
        *,
        origin: str,
        destination: str,
        alternate: str | None = None,
        route: str | None = None,
        remarks: str | None = None,
        flight_rules: str | None = None,
        flight: Optional["Flight"] = None,
    ) -> None:
        self.origin = origin
        self.destination = destination
        self.alternate = alternate
        self.route = route
        self.remarks = remarks
        self.flight_rules = flight_rules
        self.flight = flight
        self._airport_departing: weakref.ref | None = None
        self._airport_arriving: weakref.ref | None = None

    @property
    def airport_departing(self) -> Optional["Airport"]:
        return self._airport_departing() if self._airport_departing else None

    @airport_departing.setter
    def airport_departing(self, airport: Optional["Airport"]) -> None:
        self._airport_departing = weakref.ref(airport) if airport is not None else None

    @property
    def airport_arriving(self) -> Optional["Airport"]:
        return self._airport_arriving() if self._airport_arriving else None

    @airport_arriving.setter
    def airport_arriving(self, airport: Optional["Airport"]) -> None:
        self._airport_arriving = weakref.ref(airport) if airport is not None else None

    def same_endpoints(self, other: Optional["FlightPlan"]) -> bool:
        if other is None:
            return False
        return self.origin == other.origin and self.destination == other.destination


class Flight(TrackedEntity):
    """A pilot connected to the network."""

    kind = "flight"

    def __init__(
        self,
        *,
        pilot_name: str | None = None,
        aircraft_type: str | None = None,
        transponder_code: str | None = None,
        flight_plan: FlightPlan | None = None,
        classifier: OperatingStateClassifier | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.pilot_name = pilot_name
        self.aircraft_type = aircraft_type
        self.transponder_code = transponder_code
        self.flight_plan = flight_plan
        if flight_plan is not None:
            flight_plan.flight = self
        self.trail = Trail()
        self.classifier = classifier
        self._is_grounded: bool | None = None

    def has_flight_plan(self) -> bool:
        return self.flight_plan is not None

    def height(self) -> float | None:
        """Height above terrain in feet, if the elevation is known."""

        if self.altitude is None or self.elevation is None:
            return None
        return self.altitude - self.elevation

    def is_grounded(self) -> bool:
        classifier = self.classifier or default_classifier()
        return classifier.is_grounded(self)

    def is_in_airport_vicinity(self) -> bool:
        if not self.has_flight_plan():
            return False
        for airport in (self.flight_plan.airport_departing, self.flight_plan.airport_arriving):
            if airport is not None and airport.is_in_vicinity(self):
                return True
        return False

    def set_elevation(self, elevation: float | None) -> None:
        super().set_elevation(elevation)
        self._is_grounded = None

    def update(self, other: "Flight") -> None:
        super().update(other)
        self.pilot_name = other.pilot_name or self.pilot_name
        self.aircraft_type = other.aircraft_type
        self.transponder_code = other.transponder_code
        self._replace_flight_plan(other.flight_plan)
        self._is_grounded = None

    def _replace_flight_plan(self, flight_plan: FlightPlan | None) -> None:
        old = self.flight_plan
        if old is not None and not old.same_endpoints(flight_plan):
            self._unlink_airports()
        if flight_plan is not None:
            if old is not None and old.same_endpoints(flight_plan):
                flight_plan.airport_departing = old.airport_departing
                flight_plan.airport_arriving = old.airport_arriving
            flight_plan.flight = self
        self.flight_plan = flight_plan

    def _unlink_airports(self) -> None:
        if self.flight_plan is None:
            return
        departing = self.flight_plan.airport_departing
        if departing is not None:
            departing.remove_flight(self)
        arriving = self.flight_plan.airport_arriving
        if arriving is not None:
            arriving.remove_flight(self)
        self.flight_plan.airport_departing = None
        self.flight_plan.airport_arriving = None

    def dispose(self) -> bool:
        if not super().dispose():
            return False
        self._unlink_airports()
        self.trail.clear()
        return True


class AtcType(str, Enum):
    """Station types, identified by the callsign suffix."""

    GROUND = "GND"
    APPROACH = "APP"
    TOWER = "TWR"
    DELIVERY = "DEL"
    AREA_CONTROL = "CTR"
    OBSERVER = "OBS"
    INFORMATION = "ATIS"

    @classmethod
    def from_suffix(cls, suffix: str | None) -> Optional["AtcType"]:
        if not suffix:
            return None
        suffix = suffix.upper()
        for atc_type in cls:
            if suffix.startswith(atc_type.value):
                return atc_type
        return None


AIRPORT_ATC_TYPES = frozenset(
    {
        AtcType.GROUND,
        AtcType.APPROACH,
        AtcType.TOWER,
        AtcType.DELIVERY,
        AtcType.INFORMATION,
    }
)


class ControlStation(TrackedEntity):
    """A controller (or observer) position such as ``EDDF_N_APP``."""

    kind = "atc"

    def __init__(
        self,
        *,
        controller_name: str | None = None,
        atis_text: str | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.controller_name = controller_name
        self.atis_text = atis_text
        self.airport: Airport | None = None

    def callsign_parts(self) -> list[str] | None:
        if not self.raw_callsign:
            return None
        parts = self.raw_callsign.split("_")
        if len(parts) < 2:
            return None
        return parts

    @property
    def airport_code(self) -> str | None:
        """Callsign prefix before the first separator, e.g. ``EDDF``."""

        parts = self.callsign_parts()
        return normalize_callsign(parts[0]) if parts else None

    @property
    def atc_type(self) -> AtcType | None:
        parts = self.callsign_parts()
        return AtcType.from_suffix(parts[-1]) if parts else None

    def is_airport_station(self) -> bool:
        return self.atc_type in AIRPORT_ATC_TYPES

    def is_area_control(self) -> bool:
        return self.atc_type is AtcType.AREA_CONTROL

    def update(self, other: "ControlStation") -> None:
        super().update(other)
        self.controller_name = other.controller_name
        self.atis_text = other.atis_text
        if other.elevation is not None:
            self.set_elevation(other.elevation)

    def dispose(self) -> bool:
        if not super().dispose():
            return False
        self.airport = None
        return True

    @staticmethod
    def find_by_type(
        stations: Iterable["ControlStation"], atc_type: AtcType
    ) -> list["ControlStation"]:
        return [station for station in stations if station.atc_type is atc_type]


class Airport(TrackedEntity):
    """Airport derived from the control stations sharing its code."""

    kind = "airport"

    def __init__(self, code: str, *, vicinity_km: float | None = None) -> None:
        super().__init__(callsign=code)
        self.name = self.callsign
        self.vicinity_km = vicinity_km if vicinity_km is not None else settings.airport_vicinity_km
        self.vicinity: Bounds | None = None
        self.stations: list[ControlStation] = []
        self.flights_departing: list[Flight] = []
        self.flights_arriving: list[Flight] = []

    @property
    def code(self) -> str | None:
        return self.callsign

    def add_station(self, station: ControlStation) -> None:
        self.stations.append(station)
        station.airport = self
        self._calculate_position()

    def _calculate_position(self) -> None:
        located = [s for s in self.stations if s.position.has_location()]
        if not located:
            return
        lat = sum(s.latitude for s in located) / len(located)
        lon = sum(s.longitude for s in located) / len(located)
        self.position.set_latitude_longitude(lat, lon)
        elevations = [s.elevation for s in located if s.elevation is not None]
        self.position.elevation = sum(elevations) / len(elevations) if elevations else None
        self.vicinity = vicinity_bounds(
            self.latitude, self.longitude, self.vicinity_km, self.vicinity_km
        )

    def is_in_vicinity(self, entity: TrackedEntity | None) -> bool:
        if entity is None or self.vicinity is None:
            return False
        return entity.is_in(self.vicinity)

    def atis(self) -> str | None:
        for station in ControlStation.find_by_type(self.stations, AtcType.INFORMATION):
            return station.atis_text or None
        return None

    def add_flight_departing(self, flight: Flight) -> bool:
        if any(f is flight for f in self.flights_departing):
            return False
        self.flights_departing.append(flight)
        return True

    def add_flight_arriving(self, flight: Flight) -> bool:
        if any(f is flight for f in self.flights_arriving):
            return False
        self.flights_arriving.append(flight)
        return True

    def remove_flight(self, flight: Flight) -> None:
        self.flights_departing = [f for f in self.flights_departing if f is not flight]
        self.flights_arriving = [f for f in self.flights_arriving if f is not flight]

    def update(self, other: "Airport") -> None:
        self.altitude = other.altitude
        self.stations = []
        for station in other.stations:
            self.add_station(station)

    def dispose(self) -> bool:
        if not super().dispose():
            return False
        for station in self.stations:
            if station.airport is self:
                station.airport = None
        self.stations = []
        self.flights_departing = []
        self.flights_arriving = []
        return True


__all__ = [
    "AIRPORT_ATC_TYPES",
    "Airport",
    "AtcType",
    "ControlStation",
    "Flight",
    "FlightPlan",
    "TrackedEntity",
    "default_classifier",
]
