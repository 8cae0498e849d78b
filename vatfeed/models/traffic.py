"""Response models for tracked flights, airports and control stations."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from vatfeed.domain.entities import (
    Airport,
    ControlStation,
    Flight,
    FlightPlan,
    TrackedEntity,
)
from vatfeed.domain.trail import Waypoint


class WaypointOut(BaseModel):
    """One recorded trail position."""

    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")
    altitude: Optional[float] = Field(default=None, description="Altitude in feet")
    groundspeed: Optional[float] = Field(default=None, description="Ground speed in knots")
    timestamp: datetime = Field(..., description="When the position was recorded")

    @classmethod
    def from_waypoint(cls, waypoint: Waypoint) -> "WaypointOut":
        return cls(
            latitude=waypoint.latitude,
            longitude=waypoint.longitude,
            altitude=waypoint.altitude,
            groundspeed=waypoint.groundspeed,
            timestamp=waypoint.timestamp,
        )


class FlightPlanOut(BaseModel):
    origin: str = Field(..., description="Departure airport code")
    destination: str = Field(..., description="Destination airport code")
    alternate: Optional[str] = Field(default=None, description="Alternate airport code")
    flight_rules: Optional[str] = Field(default=None, description="IFR or VFR")
    route: Optional[str] = None
    remarks: Optional[str] = None
    departing_tracked: bool = Field(
        default=False, description="Whether the departure airport is currently staffed"
    )
    arriving_tracked: bool = Field(
        default=False, description="Whether the destination airport is currently staffed"
    )

    @classmethod
    def from_plan(cls, plan: FlightPlan) -> "FlightPlanOut":
        return cls(
            origin=plan.origin,
            destination=plan.destination,
            alternate=plan.alternate,
            flight_rules=plan.flight_rules,
            route=plan.route,
            remarks=plan.remarks,
            departing_tracked=plan.airport_departing is not None,
            arriving_tracked=plan.airport_arriving is not None,
        )


class EntityOut(BaseModel):
    """Fields shared by every tracked entity."""

    object_id: Optional[int] = Field(default=None, description="Stable tracking id")
    kind: str = Field(..., description="flight, airport or atc")
    id: Optional[str] = Field(default=None, description="Network client id")
    callsign: Optional[str] = Field(default=None, description="Normalized callsign")
    raw_callsign: Optional[str] = Field(default=None, description="Callsign as transmitted")
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    elevation: Optional[float] = None
    altitude: Optional[float] = None
    frequency: Optional[float] = None

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def common_fields(cls, entity: TrackedEntity) -> dict:
        return dict(
            object_id=entity.object_id,
            kind=entity.kind,
            id=entity.id,
            callsign=entity.callsign,
            raw_callsign=entity.raw_callsign,
            latitude=entity.latitude,
            longitude=entity.longitude,
            elevation=entity.elevation,
            altitude=entity.altitude,
            frequency=entity.frequency,
        )


class FlightOut(EntityOut):
    kind: Literal["flight"] = "flight"
    pilot_name: Optional[str] = None
    aircraft_type: Optional[str] = None
    transponder_code: Optional[str] = None
    groundspeed: Optional[float] = Field(default=None, description="Ground speed in knots")
    heading: Optional[float] = Field(default=None, description="Heading in degrees")
    grounded: bool = Field(..., description="Whether the flight is on the ground")
    flight_plan: Optional[FlightPlanOut] = None
    trail: list[WaypointOut] = Field(
        default_factory=list, description="Recorded positions, newest first"
    )

    @classmethod
    def from_entity(cls, flight: Flight, *, with_trail: bool = False) -> "FlightOut":
        plan = flight.flight_plan
        return cls(
            **cls.common_fields(flight),
            pilot_name=flight.pilot_name,
            aircraft_type=flight.aircraft_type,
            transponder_code=flight.transponder_code,
            groundspeed=flight.groundspeed,
            heading=flight.heading,
            grounded=flight.is_grounded(),
            flight_plan=FlightPlanOut.from_plan(plan) if plan is not None else None,
            trail=[WaypointOut.from_waypoint(w) for w in flight.trail] if with_trail else [],
        )


class AtcUnitOut(EntityOut):
    kind: Literal["atc"] = "atc"
    controller_name: Optional[str] = None
    atc_type: Optional[str] = Field(default=None, description="GND, TWR, APP, CTR, ...")
    airport_code: Optional[str] = None
    atis: Optional[str] = None

    @classmethod
    def from_entity(cls, station: ControlStation) -> "AtcUnitOut":
        atc_type = station.atc_type
        return cls(
            **cls.common_fields(station),
            controller_name=station.controller_name,
            atc_type=atc_type.value if atc_type is not None else None,
            airport_code=station.airport_code,
            atis=station.atis_text,
        )


class AirportOut(EntityOut):
    kind: Literal["airport"] = "airport"
    code: Optional[str] = None
    atis: Optional[str] = None
    stations: list[AtcUnitOut] = Field(default_factory=list)
    flights_departing: list[str] = Field(
        default_factory=list, description="Callsigns of departing flights"
    )
    flights_arriving: list[str] = Field(
        default_factory=list, description="Callsigns of arriving flights"
    )

    @classmethod
    def from_entity(cls, airport: Airport) -> "AirportOut":
        return cls(
            **cls.common_fields(airport),
            code=airport.code,
            atis=airport.atis(),
            stations=[AtcUnitOut.from_entity(s) for s in airport.stations],
            flights_departing=[f.callsign for f in airport.flights_departing if f.callsign],
            flights_arriving=[f.callsign for f in airport.flights_arriving if f.callsign],
        )


AnyEntityOut = Annotated[
    Union[FlightOut, AirportOut, AtcUnitOut], Field(discriminator="kind")
]


def entity_out(entity: TrackedEntity) -> EntityOut:
    """Serialize an entity with the model matching its kind."""

    if isinstance(entity, Flight):
        return FlightOut.from_entity(entity, with_trail=True)
    if isinstance(entity, Airport):
        return AirportOut.from_entity(entity)
    if isinstance(entity, ControlStation):
        return AtcUnitOut.from_entity(entity)
    raise TypeError(f"Unsupported entity type: {type(entity).__name__}")


__all__ = [
    "AirportOut",
    "AnyEntityOut",
    "AtcUnitOut",
    "EntityOut",
    "FlightOut",
    "FlightPlanOut",
    "WaypointOut",
    "entity_out",
]
