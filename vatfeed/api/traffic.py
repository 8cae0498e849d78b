"""Read access to the tracked flights, airports and control stations."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from vatfeed.api.deps import get_tracker
from vatfeed.domain.position import Bounds
from vatfeed.models import AirportOut, AnyEntityOut, AtcUnitOut, FlightOut, entity_out
from vatfeed.services.tracker import TrafficTracker

router = APIRouter(prefix="/api/v1", tags=["traffic"])


def _bounds(
    min_lat: Optional[float],
    max_lat: Optional[float],
    min_lon: Optional[float],
    max_lon: Optional[float],
) -> Bounds | None:
    values = (min_lat, max_lat, min_lon, max_lon)
    if all(v is None for v in values):
        return None
    if any(v is None for v in values):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="min_lat, max_lat, min_lon and max_lon must be given together",
        )
    if min_lat > max_lat or min_lon > max_lon:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Bounding box minimum exceeds maximum",
        )
    return Bounds(min_lat=min_lat, max_lat=max_lat, min_lon=min_lon, max_lon=max_lon)


def _not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")


@router.get("/flights", response_model=list[FlightOut], summary="List tracked flights")
def list_flights(
    min_lat: Optional[float] = Query(default=None, ge=-90, le=90),
    max_lat: Optional[float] = Query(default=None, ge=-90, le=90),
    min_lon: Optional[float] = Query(default=None, ge=-180, le=180),
    max_lon: Optional[float] = Query(default=None, ge=-180, le=180),
    tracker: TrafficTracker = Depends(get_tracker),
) -> list[FlightOut]:
    bounds = _bounds(min_lat, max_lat, min_lon, max_lon)
    flights = tracker.flights
    if bounds is not None:
        flights = tracker.find_in_bounds(bounds, flights)
    return [FlightOut.from_entity(flight) for flight in flights]


@router.get(
    "/flights/{callsign}", response_model=FlightOut, summary="Flight with its trail"
)
def get_flight(callsign: str, tracker: TrafficTracker = Depends(get_tracker)) -> FlightOut:
    flight = tracker.find_flight(callsign)
    if flight is None:
        raise _not_found("Flight")
    return FlightOut.from_entity(flight, with_trail=True)


@router.get("/airports", response_model=list[AirportOut], summary="List staffed airports")
def list_airports(tracker: TrafficTracker = Depends(get_tracker)) -> list[AirportOut]:
    return [AirportOut.from_entity(airport) for airport in tracker.airports]


@router.get("/airports/{code}", response_model=AirportOut, summary="Airport by code")
def get_airport(code: str, tracker: TrafficTracker = Depends(get_tracker)) -> AirportOut:
    airport = tracker.find_airport(code)
    if airport is None:
        raise _not_found("Airport")
    return AirportOut.from_entity(airport)


@router.get("/atc", response_model=list[AtcUnitOut], summary="List control stations")
def list_atc_units(tracker: TrafficTracker = Depends(get_tracker)) -> list[AtcUnitOut]:
    return [AtcUnitOut.from_entity(station) for station in tracker.atc_units]


@router.get(
    "/entities/{object_id}",
    response_model=AnyEntityOut,
    summary="Any tracked entity by its stable id",
)
def get_entity(object_id: int, tracker: TrafficTracker = Depends(get_tracker)) -> AnyEntityOut:
    entity = tracker.find_by_object_id(object_id)
    if entity is None:
        raise _not_found("Entity")
    return entity_out(entity)


@router.get(
    "/clients/{client_id}",
    response_model=list[AnyEntityOut],
    summary="Entities connected with a network client id",
)
def get_client(client_id: str, tracker: TrafficTracker = Depends(get_tracker)) -> list[AnyEntityOut]:
    return [entity_out(entity) for entity in tracker.find_by_id(client_id)]
