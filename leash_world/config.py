"""Simple configuration loader for leash_world."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml


CONFIG_PATH = Path(__file__).resolve().parents[1] / "config.yaml"

EXCEED_BEHAVIORS = ("block", "clamp")
RING_VISIBILITIES = ("hover", "always", "never")
PULL_MODES = ("drag", "clamp")
DISPLACEMENT_MODES = ("session", "delta")
METRICS = ("pixel", "grid")
GRID_DIAGONALS = ("equidistant", "alternating", "euclidean", "manhattan")


@dataclass
class SceneConfig:
    """Scale constants for the scene grid."""

    grid_size: float = 100.0
    grid_distance: float = 5.0
    grid_diagonals: str = "equidistant"
    units: str = "ft"


@dataclass
class LeashConfig:
    """Behaviour toggles for leashes."""

    default_distance: float = 5.0
    exceed_behavior: str = "block"
    gm_only: bool = True
    ring_visibility: str = "hover"
    handler_pull_mode: str = "drag"
    displacement_mode: str = "session"
    enforcement_metric: str = "grid"
    session_timeout_ms: float = 250.0


@dataclass
class LoggingConfig:
    """Root and per-module log levels."""

    global_level: str = "INFO"
    module_levels: Dict[str, str] = field(default_factory=dict)


@dataclass
class GuiConfig:
    """Window settings for the optional scene view."""

    window_size: Tuple[int, int] = (800, 600)
    background: Tuple[int, int, int] = (30, 30, 30)


@dataclass
class Config:
    """Top level configuration dataclass."""

    scene: SceneConfig
    leash: LeashConfig
    logging: LoggingConfig
    gui: GuiConfig = field(default_factory=GuiConfig)


def _choice(value: Any, choices: tuple[str, ...], key: str) -> str:
    text = str(value).lower()
    if text not in choices:
        raise ValueError(f"Invalid value {value!r} for {key}; expected one of {choices}")
    return text


def _parse_config(data: dict[str, Any]) -> Config:
    """Convert raw ``data`` into :class:`Config`."""

    scene_data = data.get("scene", {}) or {}
    scene = SceneConfig(
        grid_size=float(scene_data.get("grid_size", 100)),
        grid_distance=float(scene_data.get("grid_distance", 5)),
        grid_diagonals=_choice(
            scene_data.get("grid_diagonals", "equidistant"),
            GRID_DIAGONALS,
            "scene.grid_diagonals",
        ),
        units=str(scene_data.get("units", "ft")),
    )

    leash_data = data.get("leash", {}) or {}
    leash = LeashConfig(
        default_distance=float(leash_data.get("default_distance", 5)),
        exceed_behavior=_choice(
            leash_data.get("exceed_behavior", "block"),
            EXCEED_BEHAVIORS,
            "leash.exceed_behavior",
        ),
        gm_only=bool(leash_data.get("gm_only", True)),
        ring_visibility=_choice(
            leash_data.get("ring_visibility", "hover"),
            RING_VISIBILITIES,
            "leash.ring_visibility",
        ),
        handler_pull_mode=_choice(
            leash_data.get("handler_pull_mode", "drag"),
            PULL_MODES,
            "leash.handler_pull_mode",
        ),
        displacement_mode=_choice(
            leash_data.get("displacement_mode", "session"),
            DISPLACEMENT_MODES,
            "leash.displacement_mode",
        ),
        enforcement_metric=_choice(
            leash_data.get("enforcement_metric", "grid"),
            METRICS,
            "leash.enforcement_metric",
        ),
        session_timeout_ms=float(leash_data.get("session_timeout_ms", 250)),
    )

    logging_data = data.get("logging", {}) or {}
    log_cfg = LoggingConfig(
        global_level=str(logging_data.get("global_level", "INFO")).upper(),
        module_levels=dict(logging_data.get("module_levels") or {}),
    )

    gui_data = data.get("gui", {}) or {}
    size = gui_data.get("window_size") or (800, 600)
    background = gui_data.get("background") or (30, 30, 30)
    gui = GuiConfig(
        window_size=(int(size[0]), int(size[1])),
        background=(int(background[0]), int(background[1]), int(background[2])),
    )

    return Config(scene=scene, leash=leash, logging=log_cfg, gui=gui)


def load_config(path: Path = CONFIG_PATH) -> Config:
    """Load configuration from ``path`` and return a :class:`Config`."""

    if path.is_file():
        raw = yaml.safe_load(path.read_text()) or {}
    else:
        raw = {}
    return _parse_config(raw)


# Load configuration at module import time.
CONFIG = load_config()


__all__ = [
    "CONFIG",
    "Config",
    "SceneConfig",
    "LeashConfig",
    "LoggingConfig",
    "GuiConfig",
    "load_config",
]
