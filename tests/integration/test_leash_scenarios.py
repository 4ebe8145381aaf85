import asyncio
from pathlib import Path

import pytest
import yaml

from leash_world import main
from leash_world.core.time_manager import ManualClock
from leash_world.gui.rings import LeashRingOverlay
from leash_world.systems.leash.relation import LEASH_KEY, apply_leash, get_leash
from leash_world.utils.cli.command_parser import CLICommand


def _write_config(tmp_path: Path, **leash) -> Path:
    data = {
        "scene": {"grid_size": 100, "grid_distance": 5, "grid_diagonals": "equidistant"},
        "leash": leash,
        "logging": {"global_level": "INFO"},
    }
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


def _center(scene, entity_id):
    pos = scene.position(entity_id)
    return (pos.x + 50, pos.y + 50)


def test_scene_boots_empty():
    scene = main.bootstrap(config_path=Path(__file__).resolve().parents[2] / "config.yaml")
    assert scene.entity_ids() == []
    assert len(scene.systems_manager) == 3


def test_bootstrap_reads_leash_settings(tmp_path):
    path = _write_config(tmp_path, default_distance=7, exceed_behavior="clamp", ring_visibility="always")
    scene = main.bootstrap(config_path=path)
    assert scene.leash_settings.default_distance == 7.0
    overlay = next(s for s in scene.systems_manager if isinstance(s, LeashRingOverlay))
    assert overlay.visibility == "always"


def test_bootstrap_restores_index_from_attributes(tmp_path):
    path = _write_config(tmp_path)
    scene = main.bootstrap(config_path=path)
    handler = scene.spawn(-50, -50)
    target = scene.spawn(-20, -50)
    asyncio.run(apply_leash(scene, target, handler, 5))
    assert scene.leash_index.targets_of(handler) == [target]

    scene.leash_index.clear()
    assert main.rebuild_index(scene) == 1
    assert scene.leash_index.handler_of(target) == handler


def test_drag_then_blocked_escape(tmp_path):
    path = _write_config(tmp_path, exceed_behavior="block")
    scene = main.bootstrap(config_path=path, clock=ManualClock())
    handler = scene.spawn(-50, -50, name="Ranger")
    target = scene.spawn(10, -50, name="Wolf")  # centre (60, 0)
    asyncio.run(apply_leash(scene, target, handler, 5))

    assert asyncio.run(scene.move_entity(handler, 50, -50)) is True
    assert _center(scene, target) == pytest.approx((160.0, 0.0))

    # 160px away from the handler at (100, 0) is 8 units: blocked.
    assert asyncio.run(scene.move_entity(target, 210, -50)) is False
    assert _center(scene, target) == pytest.approx((160.0, 0.0))
    assert asyncio.run(scene.move_entity(target, 110, -50)) is True


def test_clamped_escape_stops_at_radius(tmp_path):
    path = _write_config(tmp_path, exceed_behavior="clamp")
    scene = main.bootstrap(config_path=path, clock=ManualClock())
    handler = scene.spawn(-50, -50)
    target = scene.spawn(10, -50)
    asyncio.run(apply_leash(scene, target, handler, 5))

    assert asyncio.run(scene.move_entity(target, 110, -50)) is True
    cx, cy = _center(scene, target)
    assert cx == pytest.approx(100.0, abs=1e-3)
    assert cy == pytest.approx(0.0)


def test_deleting_target_clears_index_only(tmp_path):
    path = _write_config(tmp_path)
    scene = main.bootstrap(config_path=path)
    handler = scene.spawn(-50, -50)
    target = scene.spawn(-20, -50)
    asyncio.run(apply_leash(scene, target, handler, 5))

    asyncio.run(scene.destroy_entity(target))
    assert scene.leash_index.targets_of(handler) == []
    assert asyncio.run(scene.move_entity(handler, 500, 500)) is True


def test_malformed_attribute_is_ignored_on_boot(tmp_path):
    path = _write_config(tmp_path)
    scene = main.bootstrap(config_path=path)
    handler = scene.spawn(-50, -50)
    target = scene.spawn(-20, -50)
    asyncio.run(scene.set_attribute(target, LEASH_KEY, {"handler_id": handler, "distance": "far"}))

    assert main.rebuild_index(scene) == 0
    assert get_leash(scene, target) is None
    assert asyncio.run(scene.move_entity(target, 900, 900)) is True


def test_run_loop_executes_queued_commands(tmp_path, monkeypatch):
    path = _write_config(tmp_path)
    scene = main.bootstrap(config_path=path)
    queued = [
        CLICommand("spawn", ["-50", "-50", "Ranger"]),
        None,
        CLICommand("spawn", ["-20", "-50", "Wolf"]),
        CLICommand("leash", ["2", "1", "10"]),
        CLICommand("move", ["1", "50", "-50"]),
        CLICommand("quit", []),
    ]

    monkeypatch.setattr(main, "start_cli_thread", lambda: None)
    monkeypatch.setattr(main, "poll_command", lambda: queued.pop(0))
    monkeypatch.setattr(main, "POLL_INTERVAL", 0)

    state = {}
    asyncio.run(main.run(scene, state))

    assert state["running"] is False
    assert get_leash(scene, 2).handler_id == 1
    assert _center(scene, 2) == pytest.approx((130.0, 0.0))
