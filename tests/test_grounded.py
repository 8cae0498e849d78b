import pytest

from vatfeed.domain.entities import Airport, ControlStation, Flight, FlightPlan
from vatfeed.domain.grounded import OperatingStateClassifier


@pytest.fixture
def classifier():
    return OperatingStateClassifier(speed_threshold=30, height_threshold=100)


def _flight(classifier, **kwargs):
    kwargs.setdefault("latitude", 50.0)
    kwargs.setdefault("longitude", 8.0)
    return Flight(callsign="DLH1", classifier=classifier, **kwargs)


def test_groundspeed_decides_when_above_one(classifier):
    assert classifier.classify(_flight(classifier, groundspeed=15, altitude=35000))
    assert classifier.classify(_flight(classifier, groundspeed=30))
    assert not classifier.classify(_flight(classifier, groundspeed=400, altitude=300))


def test_height_above_terrain_used_when_speed_is_not_conclusive(classifier):
    low = _flight(classifier, groundspeed=0, altitude=450)
    low.set_elevation(364)
    high = _flight(classifier, groundspeed=0, altitude=5000)
    high.set_elevation(364)

    assert low.height() == 86
    assert low.is_grounded()
    assert not high.is_grounded()


def test_fallback_trusts_speed_when_nothing_else_is_known(classifier):
    assert classifier.classify(_flight(classifier, groundspeed=0, altitude=35000))
    assert classifier.classify(_flight(classifier, altitude=35000))


def test_flight_plan_vicinity_check_does_not_change_result(classifier):
    airport = Airport("EDDF", vicinity_km=5.0)
    airport.add_station(ControlStation(callsign="EDDF_TWR", latitude=50.0, longitude=8.0))
    flight = _flight(
        classifier,
        groundspeed=0,
        altitude=35000,
        flight_plan=FlightPlan(origin="EDDF", destination="EGLL"),
    )
    flight.flight_plan.airport_departing = airport

    assert flight.is_in_airport_vicinity()
    assert classifier.classify(flight)


def test_result_is_cached_until_update(classifier):
    flight = _flight(classifier, groundspeed=15)
    assert flight.is_grounded()

    flight.groundspeed = 450
    assert flight.is_grounded()

    flight.update(_flight(classifier, groundspeed=450))
    assert not flight.is_grounded()
