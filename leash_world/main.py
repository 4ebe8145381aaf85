# leash_world/main.py
"""Scene bootstrap and the development command loop."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict
import asyncio
import logging
import os

from dotenv import load_dotenv

from .config import CONFIG, Config, load_config
from .core.grid import SquareGrid
from .core.systems_manager import SystemsManager
from .core.time_manager import TimeManager
from .core.world import Scene
from .gui.rings import LeashRingOverlay
from .systems.leash.enforcement import LeashEnforcementSystem
from .systems.leash.propagation import LeashPropagationSystem
from .systems.leash.relation import rebuild_index
from .utils.cli.command_parser import poll_command, start_cli_thread, stop_cli_thread
from .utils.cli.commands import HELP_TEXT, execute, gui

logger = logging.getLogger(__name__)  # For main.py specific logs

POLL_INTERVAL = 0.05


def configure_logging(cfg: Config) -> None:
    """Apply the root level and per-module levels from ``cfg``."""

    numeric_level = getattr(logging, cfg.logging.global_level, logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )
    for module_name, level_str in cfg.logging.module_levels.items():
        module_numeric_level = getattr(logging, str(level_str).upper(), None)
        if module_numeric_level is not None:
            logging.getLogger(module_name).setLevel(module_numeric_level)
        else:
            logger.warning("Invalid log level '%s' for module '%s' in config.", level_str, module_name)


configure_logging(CONFIG)


def bootstrap(config_path: str | Path | None = None, clock: TimeManager | None = None) -> Scene:
    """Build a scene with the leash systems registered."""

    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is None:
        config_path = os.getenv("LEASH_CONFIG", "config.yaml")
    cfg = load_config(Path(config_path))

    grid = SquareGrid(
        size=cfg.scene.grid_size,
        distance=cfg.scene.grid_distance,
        diagonals=cfg.scene.grid_diagonals,
        units=cfg.scene.units,
    )
    scene = Scene("scene", grid)
    scene.leash_settings = cfg.leash
    scene.systems_manager = SystemsManager()
    sm = scene.systems_manager
    sm.register(LeashPropagationSystem(scene, cfg.leash, clock=clock))
    sm.register(LeashEnforcementSystem(scene, cfg.leash))
    sm.register(LeashRingOverlay(scene, cfg.leash.ring_visibility))

    pairs = rebuild_index(scene)
    scene.ready()
    logger.info(
        "[Bootstrap] grid %.0fpx = %g %s, exceed=%s, pull=%s/%s, metric=%s, %d leash(es)",
        grid.size,
        grid.distance,
        grid.units,
        cfg.leash.exceed_behavior,
        cfg.leash.handler_pull_mode,
        cfg.leash.displacement_mode,
        cfg.leash.enforcement_metric,
        pairs,
    )
    return scene


def draw_frame(scene: Scene, state: Dict[str, Any]) -> None:
    """Redraw the scene window while the GUI is on; closing it turns the GUI off."""

    renderer = state.get("renderer")
    if not state.get("gui_enabled") or renderer is None:
        return
    if not renderer.handle_events():
        gui(scene, state)
        return
    renderer.update()


async def run(scene: Scene, state: Dict[str, Any] | None = None) -> None:
    """Poll CLI commands and execute them until ``/quit``."""

    state = state if state is not None else {}
    state.setdefault("running", True)
    state.setdefault("is_gm", True)
    state.setdefault("gui_enabled", False)
    logger.info(HELP_TEXT)
    start_cli_thread()
    try:
        while state["running"]:
            draw_frame(scene, state)
            command = poll_command()
            if command is None:
                await asyncio.sleep(POLL_INTERVAL)
                continue
            await execute(scene, command, state)
    finally:
        stop_cli_thread()
        if state.get("renderer") is not None:
            state["renderer"].close()
            state["renderer"] = None


def main() -> None:
    scene = bootstrap()
    asyncio.run(run(scene))


if __name__ == "__main__":
    main()
