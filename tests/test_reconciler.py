from vatfeed.domain.entities import Flight
from vatfeed.domain.identity import IdentityRegistry
from vatfeed.services.reconciler import EntityReconciler, find_by_callsign_first


def _flight(callsign, cid="1", **kwargs):
    kwargs.setdefault("latitude", 50.0)
    kwargs.setdefault("longitude", 8.0)
    return Flight(callsign=callsign, id=cid, **kwargs)


def test_first_cycle_tracks_every_incoming_entity():
    reconciler = EntityReconciler(IdentityRegistry(start=1))

    tracked = reconciler.reconcile([], [_flight("A1"), _flight("B2")])

    assert [f.object_id for f in tracked] == [1, 2]
    assert reconciler.registry.get(1) is tracked[0]


def test_matching_entities_keep_reference_and_object_id():
    reconciler = EntityReconciler()
    first = reconciler.reconcile([], [_flight("DLH1", altitude=1000)])
    original = first[0]

    second = reconciler.reconcile(first, [_flight("dlh-1", cid="9", altitude=2000)])

    assert second[0] is original
    assert original.object_id == first[0].object_id
    assert original.altitude == 2000
    assert original.id == "9"
    assert not original.disposed


def test_result_follows_incoming_order_and_disposes_vanished():
    reconciler = EntityReconciler()
    existing = reconciler.reconcile([], [_flight("A1"), _flight("B2"), _flight("C3")])
    a1, b2, c3 = existing

    result = reconciler.reconcile(existing, [_flight("C3"), _flight("D4"), _flight("A1")])

    assert [f.callsign for f in result] == ["C3", "D4", "A1"]
    assert result[0] is c3
    assert result[2] is a1
    assert b2.disposed
    assert b2.object_id not in reconciler.registry
    assert result[1].object_id not in (a1.object_id, b2.object_id, c3.object_id)


def test_empty_incoming_keeps_existing():
    reconciler = EntityReconciler()
    existing = reconciler.reconcile([], [_flight("A1")])

    result = reconciler.reconcile(existing, [])

    assert result == existing
    assert not existing[0].disposed


def test_duplicate_callsigns_first_match_wins():
    reconciler = EntityReconciler()
    existing = reconciler.reconcile([], [_flight("A1", cid="1"), _flight("A1", cid="2")])
    first, second = existing

    result = reconciler.reconcile(existing, [_flight("A1", cid="3")])

    assert result == [first]
    assert second.disposed
    assert find_by_callsign_first(existing, "A1") == 0
    assert find_by_callsign_first(existing, None) is None


def test_dispose_runs_hooks_once_per_entity():
    reconciler = EntityReconciler()
    dropped = []
    reconciler.add_dispose_hook(lambda entities: dropped.extend(entities))
    existing = reconciler.reconcile([], [_flight("A1"), _flight("B2")])

    reconciler.reconcile(existing, [_flight("B2")])

    assert dropped == [existing[0]]
    assert existing[0].disposed
    assert not existing[0].dispose()
