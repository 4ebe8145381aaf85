"""Size component."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Size:
    """Footprint of an entity measured in grid cells."""

    width: float = 1.0
    height: float = 1.0


__all__ = ["Size"]
