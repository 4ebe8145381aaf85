"""Per-entity key/value attribute storage."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class Flags:
    """Free-form attributes other systems attach to an entity.

    Values are stored as plain data (dicts, numbers, strings) so that they
    can be serialised alongside the entity.
    """

    values: Dict[str, Any] = field(default_factory=dict)


__all__ = ["Flags"]
