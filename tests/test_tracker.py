import pytest

from vatfeed.domain.entities import Flight
from vatfeed.domain.identity import IdentityRegistry
from vatfeed.domain.position import Bounds
from vatfeed.domain.trail import TrailManager
from vatfeed.ingestors.vatsim_parser import RecordParser, UpdateHistory
from vatfeed.services.tracker import TrafficTracker, merge_entities


@pytest.fixture
def tracker():
    return TrafficTracker(
        registry=IdentityRegistry(start=1),
        trail_manager=TrailManager(max_length=50, record_when_grounded=False, precision_digits=6),
        vicinity_km=5.0,
    )


@pytest.fixture
def parser():
    return RecordParser(UpdateHistory(10))


def test_apply_builds_flights_stations_and_airports(tracker, parser, feed_text, pilot_line, atc_line):
    raw = feed_text(
        [
            pilot_line("DLH1", "10", lat="50.5", lon="8.5", origin="EDDF", destination="EDDM"),
            pilot_line("BAW2", "11", lat="51.5", lon="-0.4", origin="EGLL", destination="KJFK"),
            atc_line("EDDF_TWR", "20", lat="50.03", lon="8.57"),
            atc_line("EDGG_CTR", "21", lat="50.0", lon="8.0"),
        ],
        connected=4,
    )

    tracker.apply(parser.parse(raw))

    assert [f.callsign for f in tracker.flights] == ["DLH1", "BAW2"]
    assert [s.callsign for s in tracker.atc_units] == ["EDDFTWR", "EDGGCTR"]
    assert [a.code for a in tracker.airports] == ["EDDF"]
    assert tracker.clients_connected == 4
    assert tracker.info == "03.05.2024 19:40:00 4"
    dlh = tracker.find_flight("dlh-1")
    assert dlh.flight_plan.airport_departing is tracker.find_airport("eddf")
    assert len(dlh.trail) == 1


def test_references_survive_polls_and_trails_grow(tracker, parser, feed_text, pilot_line):
    tracker.apply(parser.parse(feed_text([pilot_line("DLH1", lat="50.0", lon="8.0")])))
    flight = tracker.find_flight("DLH1")
    object_id = flight.object_id

    tracker.apply(
        parser.parse(
            feed_text([pilot_line("DLH1", lat="50.1", lon="8.1")], update="20240503194100")
        )
    )

    assert tracker.find_flight("DLH1") is flight
    assert flight.object_id == object_id
    assert flight.latitude == 50.1
    assert [w.latitude for w in flight.trail] == [50.1, 50.0]
    assert tracker.find_by_object_id(object_id) is flight


def test_vanished_entities_leave_selections(tracker, parser, feed_text, pilot_line):
    tracker.apply(parser.parse(feed_text([pilot_line("DLH1"), pilot_line("BAW2", "11")])))
    gone = tracker.find_flight("BAW2")
    tracker.followed.add(gone)
    tracker.filter.add(gone)
    tracker.filter.add(tracker.find_flight("DLH1"))
    assert tracker.followed.find_by_object_id(gone.object_id) is gone

    tracker.apply(parser.parse(feed_text([pilot_line("DLH1")], update="20240503194100")))

    assert gone.disposed
    assert gone not in tracker.followed
    assert len(tracker.filter) == 1
    assert tracker.filter.find_by_object_id(gone.object_id) is None
    assert tracker.find_by_object_id(gone.object_id) is None
    assert tracker.find_flight("BAW2") is None


def test_lookups(tracker, parser, feed_text, pilot_line, atc_line):
    tracker.apply(
        parser.parse(
            feed_text(
                [
                    pilot_line("DLH1", "10", lat="50.5", lon="8.5"),
                    pilot_line("DLH2", "10", lat="40.0", lon="-70.0"),
                    atc_line("EDDF_TWR", "20", lat="50.0", lon="8.5"),
                ]
            )
        )
    )

    assert [e.callsign for e in tracker.find_by_id("10")] == ["DLH1", "DLH2"]
    assert tracker.find_by_id_first("20").callsign == "EDDFTWR"
    assert tracker.find_by_id("") == []
    assert tracker.find_by_callsign("eddf_twr").callsign == "EDDFTWR"
    assert tracker.find_by_callsign(None) is None

    europe = Bounds(min_lat=45.0, max_lat=55.0, min_lon=0.0, max_lon=15.0)
    assert {e.callsign for e in tracker.find_in_bounds(europe)} == {"DLH1", "EDDF"}
    assert [e.callsign for e in tracker.find_in_bounds(europe, tracker.flights)] == ["DLH1"]


def test_snapshot_without_clients_keeps_state(tracker, parser, feed_text, pilot_line):
    tracker.apply(parser.parse(feed_text([pilot_line("DLH1")])))
    flight = tracker.find_flight("DLH1")

    tracker.apply(parser.parse(feed_text([], update="20240503194100")))

    assert tracker.flights == (flight,)
    assert not flight.disposed


def test_reset_disposes_everything(tracker, parser, feed_text, pilot_line, atc_line):
    tracker.apply(parser.parse(feed_text([pilot_line("DLH1"), atc_line("EDDF_TWR")])))
    flight = tracker.find_flight("DLH1")

    tracker.reset()

    assert flight.disposed
    assert tracker.all_clients() == []
    assert len(tracker.registry) == 0
    assert tracker.last_update is None


def test_merge_entities_prefers_primary_source():
    primary = [Flight(callsign="DLH1", id="1")]
    secondary = [Flight(callsign="dlh-1", id="2"), Flight(callsign="SIM1", id="3")]

    merged = merge_entities(primary, secondary)

    assert [f.id for f in merged] == ["1", "3"]


def test_feed_line_links_both_endpoint_airports(tracker, parser, feed_text, pilot_line, atc_line):
    line = pilot_line(
        "ABC123",
        "1000",
        name="Pilot One",
        frequency="123.450",
        lat="50.000000",
        lon="8.000000",
        altitude="35000",
        groundspeed="420",
        aircraft="B738",
        origin="EDDF",
        destination="EDDM",
        transponder="7000",
        visibility="50",
    )
    raw = feed_text(
        [
            line,
            atc_line("EDDF_TWR", "2", lat="50.03", lon="8.57"),
            atc_line("EDDM_TWR", "3", lat="48.35", lon="11.78"),
        ]
    )

    tracker.apply(parser.parse(raw))

    flight = tracker.find_flight("ABC123")
    assert flight.altitude == 35000
    assert flight.groundspeed == 420
    assert flight.flight_plan.origin == "EDDF"
    assert flight.flight_plan.destination == "EDDM"
    assert flight.flight_plan.airport_departing is tracker.find_airport("EDDF")
    assert flight.flight_plan.airport_arriving is tracker.find_airport("EDDM")
    assert flight.flight_plan.airport_departing is not None
    assert flight.flight_plan.airport_arriving is not None


def test_assigned_station_elevation_survives_polls(tracker, parser, feed_text, atc_line):
    tracker.apply(parser.parse(feed_text([atc_line("EDDF_TWR", lat="50.03", lon="8.57")])))
    station = tracker.find_by_callsign("EDDF_TWR")
    station.set_elevation(364)

    tracker.apply(
        parser.parse(
            feed_text([atc_line("EDDF_TWR", lat="50.03", lon="8.57")], update="20240503194100")
        )
    )

    assert tracker.find_by_callsign("EDDF_TWR") is station
    assert station.elevation == 364
    assert tracker.find_airport("EDDF").elevation == 364
