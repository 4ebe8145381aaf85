"""Position component."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Position:
    """Top-left corner of an entity in scene pixels."""

    x: float
    y: float


__all__ = ["Position"]
