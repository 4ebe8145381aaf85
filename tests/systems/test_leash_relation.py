import asyncio

from leash_world.config import LeashConfig
from leash_world.core.errors import AttributeStoreError
from leash_world.systems.leash.relation import (
    LEASH_KEY,
    LeashRelation,
    get_leash,
    rebuild_index,
    remove_leash,
    scan_leashes,
)


def test_apply_leash_stores_relation_and_index(make_harness):
    h = make_harness()
    handler = h.place(0, 0, name="Ranger")
    target = h.place(30, 0, name="Wolf")

    outcome = h.leash(target, handler, 5)
    assert outcome.ok
    assert outcome.relation == LeashRelation(handler, "scene", 5.0)
    assert get_leash(h.scene, target) == outcome.relation
    assert h.scene.leash_index.targets_of(handler) == [target]
    assert h.notices.drain() == [("info", "Leashed Wolf to Ranger at 5 ft.")]


def test_apply_leash_uses_default_distance(make_harness):
    h = make_harness(default_distance=15)
    handler, target = h.place(0, 0), h.place(30, 0)
    assert h.leash(target, handler, None).relation.distance == 15.0


def test_invalid_requests_mutate_nothing(make_harness):
    h = make_harness()
    handler, target = h.place(0, 0), h.place(30, 0)

    for bad_handler, distance in ((handler, 0), (handler, -3), (999, 5), (target, 5), ("x", 5)):
        outcome = h.leash(target, bad_handler, distance)
        assert not outcome.ok
    assert get_leash(h.scene, target) is None
    assert len(h.scene.leash_index) == 0
    assert all(level == "warn" for level, _ in h.notices.drain())


def test_gm_only_blocks_players(make_harness):
    from leash_world.systems.leash.relation import apply_leash

    h = make_harness(gm_only=True)
    handler, target = h.place(0, 0), h.place(30, 0)
    outcome = asyncio.run(
        apply_leash(h.scene, target, handler, 5, is_gm=False, settings=h.settings, notices=h.notices)
    )
    assert not outcome.ok
    assert get_leash(h.scene, target) is None

    open_settings = LeashConfig(gm_only=False)
    outcome = asyncio.run(
        apply_leash(h.scene, target, handler, 5, is_gm=False, settings=open_settings, notices=h.notices)
    )
    assert outcome.ok


def test_attribute_store_failure_is_reported(make_harness, monkeypatch):
    h = make_harness()
    handler, target = h.place(0, 0), h.place(30, 0)

    async def failing_set(entity_id, key, value):
        raise AttributeStoreError("disk full")

    monkeypatch.setattr(h.scene, "set_attribute", failing_set)
    outcome = h.leash(target, handler, 5)
    assert not outcome.ok
    assert get_leash(h.scene, target) is None
    assert len(h.scene.leash_index) == 0
    assert h.notices.drain()[-1][0] == "error"


def test_remove_leash(make_harness):
    h = make_harness()
    handler, target = h.place(0, 0), h.place(30, 0, name="Wolf")
    h.leash(target, handler, 5)
    h.notices.drain()

    outcome = asyncio.run(remove_leash(h.scene, target, settings=h.settings, notices=h.notices))
    assert outcome.ok
    assert get_leash(h.scene, target) is None
    assert h.scene.leash_index.targets_of(handler) == []
    assert h.notices.drain() == [("info", "Unleashed Wolf.")]

    again = asyncio.run(remove_leash(h.scene, target, settings=h.settings, notices=h.notices))
    assert not again.ok


def test_malformed_attribute_reads_as_no_leash(make_harness):
    h = make_harness()
    target = h.place(0, 0)
    asyncio.run(h.scene.set_attribute(target, LEASH_KEY, {"handler_id": "?", "distance": 5}))
    assert get_leash(h.scene, target) is None
    asyncio.run(h.scene.set_attribute(target, LEASH_KEY, "rope"))
    assert get_leash(h.scene, target) is None


def test_rebuild_index_from_attributes(make_harness):
    h = make_harness()
    handler, a, b = h.place(0, 0), h.place(30, 0), h.place(0, 30)
    relation = LeashRelation(handler, "scene", 5.0).to_dict()
    asyncio.run(h.scene.set_attribute(a, LEASH_KEY, relation))
    asyncio.run(h.scene.set_attribute(b, LEASH_KEY, dict(relation, scene_id="elsewhere")))

    assert [target for target, _ in scan_leashes(h.scene)] == [a]
    assert rebuild_index(h.scene) == 1
    assert h.scene.leash_index.targets_of(handler) == [a]


def test_deleting_handler_releases_targets(make_harness):
    h = make_harness()
    handler, target = h.place(0, 0), h.place(30, 0)
    h.leash(target, handler, 5)

    asyncio.run(h.scene.destroy_entity(handler))
    assert get_leash(h.scene, target) is None
    assert len(h.scene.leash_index) == 0
