from leash_world.core.leash_index import LeashIndex


def test_insert_and_query():
    index = LeashIndex()
    index.insert(2, 1)
    index.insert(3, 1)
    assert index.targets_of(1) == [2, 3]
    assert index.handler_of(2) == 1
    assert index.has_targets(1)
    assert len(index) == 2


def test_reinsert_moves_target_to_new_handler():
    index = LeashIndex()
    index.insert(2, 1)
    index.insert(2, 5)
    assert index.targets_of(1) == []
    assert index.targets_of(5) == [2]


def test_remove_and_discard_entity():
    index = LeashIndex()
    index.insert_many([(2, 1), (3, 1), (1, 9)])
    assert index.remove(3) == 1
    assert index.remove(3) is None

    dropped = index.discard_entity(1)
    assert sorted(dropped) == [(1, 9), (2, 1)]
    assert len(index) == 0


def test_rebuild_replaces_contents():
    index = LeashIndex()
    index.insert(7, 8)
    index.rebuild([(2, 1)])
    assert index.pairs() == [(2, 1)]
