"""Event dataclasses for the two-phase move protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union


@dataclass(slots=True)
class ProposeMove:
    """An entity is about to move; systems may veto or rewrite ``x``/``y``.

    ``None`` for an axis means that axis keeps its current value.
    """

    entity_id: int
    x: Optional[float]
    y: Optional[float]
    internal: bool = False
    vetoed: bool = False


@dataclass(slots=True)
class CommitMove:
    """An entity finished moving to ``(x, y)``."""

    entity_id: int
    x: float
    y: float
    internal: bool = False


MoveEvent = Union[ProposeMove, CommitMove]


def _coord(payload: Mapping[str, Any], key: str) -> Optional[float]:
    value = payload.get(key)
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be numeric, got {value!r}") from None


def parse_event(payload: Mapping[str, Any]) -> MoveEvent:
    """Validate a loosely-typed host ``payload`` into a move event.

    ``payload`` needs ``type`` (``"propose"`` or ``"commit"``), ``entity_id``
    and at least one coordinate. Commit events need both coordinates.
    """

    kind = payload.get("type")
    try:
        entity_id = int(payload["entity_id"])
    except (KeyError, TypeError, ValueError):
        raise ValueError(f"Invalid entity_id in payload: {payload!r}") from None

    x = _coord(payload, "x")
    y = _coord(payload, "y")
    internal = bool(payload.get("internal", False))

    if kind == "propose":
        if x is None and y is None:
            raise ValueError("Propose payload carries no coordinates")
        return ProposeMove(entity_id, x, y, internal=internal)
    if kind == "commit":
        if x is None or y is None:
            raise ValueError("Commit payload needs both x and y")
        return CommitMove(entity_id, x, y, internal=internal)
    raise ValueError(f"Unknown move event type: {kind!r}")


__all__ = ["ProposeMove", "CommitMove", "MoveEvent", "parse_event"]
