"""Derive airports from control stations and attach flights to them."""

from __future__ import annotations

import logging
from typing import Sequence

from vatfeed.domain.entities import Airport, ControlStation, Flight
from vatfeed.domain.identity import normalize_callsign
from vatfeed.services.reconciler import EntityReconciler

logger = logging.getLogger("vatfeed.services.airports")


class AirportAggregator:
    """Group airport stations by code and keep airport identities stable."""

    def __init__(
        self,
        reconciler: EntityReconciler,
        *,
        vicinity_km: float | None = None,
    ) -> None:
        self.reconciler = reconciler
        self.vicinity_km = vicinity_km

    def build_snapshots(self, stations: Sequence[ControlStation]) -> list[Airport]:
        """One untracked airport per station prefix, in first-seen order."""

        airports: dict[str, Airport] = {}
        for station in stations:
            if not station.is_airport_station():
                continue
            code = station.airport_code
            if not code:
                continue
            airport = airports.get(code)
            if airport is None:
                airport = Airport(code, vicinity_km=self.vicinity_km)
                airports[code] = airport
            airport.add_station(station)
        return list(airports.values())

    def fold_stations(
        self,
        existing_airports: Sequence[Airport],
        stations: Sequence[ControlStation],
        flights: Sequence[Flight],
    ) -> list[Airport]:
        snapshots = self.build_snapshots(stations)
        if snapshots:
            airports = self.reconciler.reconcile(existing_airports, snapshots)
        else:
            # no airport station left, so no airport has surviving members
            if existing_airports:
                logger.debug("No airport stations, disposing %s airports", len(existing_airports))
            self.reconciler.dispose(list(existing_airports))
            airports = []
        self.attach_flights(airports, flights)
        return airports

    @staticmethod
    def attach_flights(airports: Sequence[Airport], flights: Sequence[Flight]) -> None:
        by_code: dict[str, Airport] = {}
        for airport in airports:
            if airport.code and airport.code not in by_code:
                by_code[airport.code] = airport

        for flight in flights:
            plan = flight.flight_plan
            if plan is None:
                continue
            departing = by_code.get(normalize_callsign(plan.origin))
            arriving = by_code.get(normalize_callsign(plan.destination))
            if departing is not None:
                departing.add_flight_departing(flight)
            if arriving is not None:
                arriving.add_flight_arriving(flight)
            plan.airport_departing = departing
            plan.airport_arriving = arriving


__all__ = ["AirportAggregator"]
