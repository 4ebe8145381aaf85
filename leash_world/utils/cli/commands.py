"""Implementations of development CLI commands."""

from __future__ import annotations

from typing import Any, Dict, List
import logging

import pygame

from ...gui.renderer import Renderer
from ...systems.leash.geometry import current_center
from ...systems.leash.relation import apply_leash, get_leash, remove_leash
from .command_parser import CLICommand

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Commands: /spawn X Y [W H] [NAME], /leash TARGET HANDLER [DISTANCE], "
    "/unleash TARGET, /move ID X Y, /hover ID on|off, /control ID on|off, "
    "/status, /gui, /quit"
)


def _int(value: str, what: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        logger.error("Invalid %s: %s", what, value)
        return None


def _float(value: str, what: str) -> float | None:
    try:
        return float(value)
    except ValueError:
        logger.error("Invalid %s: %s", what, value)
        return None


def _on(value: str) -> bool:
    return value.lower() in ("on", "1", "true", "yes")


def spawn(scene: Any, args: List[str]) -> int | None:
    if len(args) < 2:
        logger.info("Usage: /spawn X Y [W H] [NAME]")
        return None
    x, y = _float(args[0], "x"), _float(args[1], "y")
    if x is None or y is None:
        return None
    width = height = 1.0
    rest = args[2:]
    if len(rest) >= 2:
        w, h = _float(rest[0], "width"), _float(rest[1], "height")
        if w is None or h is None:
            return None
        width, height, rest = w, h, rest[2:]
    name = " ".join(rest)
    entity_id = scene.spawn(x, y, width, height, name=name)
    logger.info("Spawned %s (id %s) at (%s, %s)", scene.name(entity_id), entity_id, x, y)
    return entity_id


def status(scene: Any) -> List[str]:
    """Return one line per entity describing position and leash."""

    lines = []
    for entity_id in scene.entity_ids():
        pos = scene.position(entity_id)
        center = current_center(scene, entity_id)
        line = f"{entity_id} {scene.name(entity_id)}: top-left=({pos.x:.1f}, {pos.y:.1f})"
        if center is not None:
            line += f" center=({center.x:.1f}, {center.y:.1f})"
        leash = get_leash(scene, entity_id)
        if leash is not None:
            line += f" leashed to {leash.handler_id} within {leash.distance:g}"
        lines.append(line)
    for line in lines:
        logger.info(line)
    return lines


def gui(scene: Any, state: Dict[str, Any]) -> None:
    """Toggle the scene window, creating the renderer on first use."""

    enabled = not state.get("gui_enabled", False)
    renderer = state.get("renderer")
    if not enabled:
        state["gui_enabled"] = False
        if renderer is not None:
            renderer.close()
            state["renderer"] = None
        logger.info("GUI disabled.")
        return

    if renderer is None:
        try:
            renderer = Renderer(scene)
        except pygame.error as exc:
            logger.error("GUI unavailable: %s", exc)
            state["gui_enabled"] = False
            return
        state["renderer"] = renderer
    state["gui_enabled"] = True
    renderer.update()
    logger.info("GUI enabled. Hover tokens to show their leash rings.")


async def execute(scene: Any, command: CLICommand, state: Dict[str, Any]) -> None:
    """Run ``command`` against ``scene``; ``state`` carries loop flags."""

    name, args = command.name, command.args
    is_gm = bool(state.get("is_gm", True))

    if name == "quit":
        state["running"] = False
        logger.info("Quitting.")
    elif name == "help":
        logger.info(HELP_TEXT)
    elif name == "spawn":
        spawn(scene, args)
    elif name == "status":
        status(scene)
    elif name == "gui":
        gui(scene, state)
    elif name == "leash":
        if len(args) < 2:
            logger.info("Usage: /leash TARGET HANDLER [DISTANCE]")
            return
        target, handler = _int(args[0], "target id"), _int(args[1], "handler id")
        if target is None or handler is None:
            return
        distance = _float(args[2], "distance") if len(args) > 2 else None
        if len(args) > 2 and distance is None:
            return
        await apply_leash(scene, target, handler, distance, is_gm=is_gm)
    elif name == "unleash":
        if not args:
            logger.info("Usage: /unleash TARGET")
            return
        target = _int(args[0], "target id")
        if target is not None:
            await remove_leash(scene, target, is_gm=is_gm)
    elif name == "move":
        if len(args) < 3:
            logger.info("Usage: /move ID X Y")
            return
        payload = {"type": "propose", "entity_id": args[0], "x": args[1], "y": args[2]}
        if not await scene.submit(payload):
            logger.info("Move of %s was rejected.", args[0])
    elif name in ("hover", "control"):
        if len(args) < 2:
            logger.info("Usage: /%s ID on|off", name)
            return
        entity_id = _int(args[0], "entity id")
        if entity_id is not None:
            scene.notify(f"on_{name}", entity_id, _on(args[1]))
    else:
        logger.info("Unknown command: /%s. %s", name, HELP_TEXT)


__all__ = ["execute", "gui", "spawn", "status", "HELP_TEXT"]
