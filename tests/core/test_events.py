import pytest

from leash_world.core.events import CommitMove, ProposeMove, parse_event


def test_parse_propose_with_single_axis():
    event = parse_event({"type": "propose", "entity_id": "3", "x": "12.5"})
    assert isinstance(event, ProposeMove)
    assert (event.entity_id, event.x, event.y) == (3, 12.5, None)
    assert event.internal is False and event.vetoed is False


def test_parse_commit_internal():
    event = parse_event({"type": "commit", "entity_id": 4, "x": 1, "y": 2, "internal": True})
    assert event == CommitMove(4, 1.0, 2.0, internal=True)


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "propose", "entity_id": 1},
        {"type": "commit", "entity_id": 1, "x": 1},
        {"type": "teleport", "entity_id": 1, "x": 1, "y": 1},
        {"type": "propose", "x": 1},
        {"type": "propose", "entity_id": 1, "x": "left"},
    ],
)
def test_parse_rejects_bad_payloads(payload):
    with pytest.raises(ValueError):
        parse_event(payload)
