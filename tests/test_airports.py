import pytest

from vatfeed.domain.entities import ControlStation, Flight, FlightPlan
from vatfeed.services.airports import AirportAggregator
from vatfeed.services.reconciler import EntityReconciler


def _station(callsign, lat, lon, atis=None):
    return ControlStation(callsign=callsign, id="9", latitude=lat, longitude=lon, atis_text=atis)


def _flight(callsign, origin, destination):
    return Flight(
        callsign=callsign,
        id="1",
        latitude=51.0,
        longitude=9.0,
        groundspeed=450,
        flight_plan=FlightPlan(origin=origin, destination=destination),
    )


def test_airport_position_is_mean_of_its_stations():
    aggregator = AirportAggregator(EntityReconciler(), vicinity_km=5.0)
    stations = [
        _station("EDDF_TWR", 50.0, 8.0),
        _station("EDDF_GND", 50.2, 8.4),
        _station("EDGG_CTR", 49.0, 7.0),
    ]

    airports = aggregator.fold_stations([], stations, [])

    assert [a.code for a in airports] == ["EDDF"]
    eddf = airports[0]
    assert eddf.latitude == pytest.approx(50.1)
    assert eddf.longitude == pytest.approx(8.2)
    assert eddf.stations == stations[:2]
    assert stations[0].airport is eddf
    assert stations[2].airport is None
    assert eddf.is_in_vicinity(_station("X_OBS", 50.1, 8.2))
    assert not eddf.is_in_vicinity(_station("X_OBS", 50.3, 8.2))


def test_non_consecutive_stations_join_the_same_airport():
    aggregator = AirportAggregator(EntityReconciler())
    stations = [
        _station("EDDF_TWR", 50.0, 8.0),
        _station("EDDM_TWR", 48.3, 11.7),
        _station("EDDF_ATIS", 50.0, 8.0, atis="Frankfurt information K"),
    ]

    airports = aggregator.fold_stations([], stations, [])

    assert [a.code for a in airports] == ["EDDF", "EDDM"]
    assert len(airports[0].stations) == 2
    assert airports[0].atis() == "Frankfurt information K"
    assert airports[1].atis() is None


def test_flights_are_linked_to_endpoint_airports():
    aggregator = AirportAggregator(EntityReconciler())
    flight = _flight("DLH1", "EDDF", "EDDM")
    stranger = _flight("BAW2", "EGLL", "EDDF")

    airports = aggregator.fold_stations(
        [],
        [_station("EDDF_TWR", 50.0, 8.0), _station("EDDM_APP", 48.3, 11.7)],
        [flight, stranger],
    )
    eddf, eddm = airports

    assert eddf.flights_departing == [flight]
    assert eddf.flights_arriving == [stranger]
    assert eddm.flights_arriving == [flight]
    assert flight.flight_plan.airport_departing is eddf
    assert flight.flight_plan.airport_arriving is eddm
    assert stranger.flight_plan.airport_departing is None

    aggregator.attach_flights(airports, [flight])
    assert eddf.flights_departing == [flight]


def test_airport_identity_is_stable_across_cycles():
    aggregator = AirportAggregator(EntityReconciler())
    first = aggregator.fold_stations([], [_station("EDDF_TWR", 50.0, 8.0)], [])
    eddf = first[0]

    second = aggregator.fold_stations(
        first, [_station("EDDF_TWR", 50.0, 8.0), _station("EDDF_GND", 50.0, 8.2)], []
    )

    assert second[0] is eddf
    assert eddf.object_id == first[0].object_id
    assert len(eddf.stations) == 2
    assert eddf.longitude == pytest.approx(8.1)


def test_airports_are_disposed_when_no_airport_station_remains():
    reconciler = EntityReconciler()
    aggregator = AirportAggregator(reconciler)
    flight = _flight("DLH1", "EDDF", "EDDM")
    airports = aggregator.fold_stations([], [_station("EDDF_TWR", 50.0, 8.0)], [flight])
    eddf = airports[0]

    remaining = aggregator.fold_stations(airports, [_station("EDGG_CTR", 49.0, 7.0)], [flight])

    assert remaining == []
    assert eddf.disposed
    assert eddf.stations == []
    assert eddf.object_id not in reconciler.registry
    assert flight.flight_plan.airport_departing is None
