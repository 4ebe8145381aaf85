"""Per-handler drag sessions and last-step displacement records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Optional
import logging

from .geometry import Point

logger = logging.getLogger(__name__)


@dataclass
class Delta:
    """Displacement between an entity's position and its latest proposal."""

    dx: float
    dy: float
    timestamp: float


@dataclass
class MoveSession:
    """Baseline captured when a handler starts a continuous drag."""

    start_center: Point
    original_centers: Dict[int, Point] = field(default_factory=dict)
    last_activity: float = 0.0


class PropagationState:
    """Mutable bookkeeping owned by one propagation engine.

    Holds the last-delta records, the open move sessions and the previous
    committed centre of each handler. Everything here is touched from the
    event loop only.
    """

    def __init__(self) -> None:
        self.deltas: Dict[int, Delta] = {}
        self.sessions: Dict[int, MoveSession] = {}
        self.previous_centers: Dict[int, Point] = {}

    # ------------------------------------------------------------------
    # Deltas
    # ------------------------------------------------------------------
    def record_delta(self, entity_id: int, dx: float, dy: float, now: float) -> None:
        self.deltas[entity_id] = Delta(dx, dy, now)

    def consume_delta(self, entity_id: int) -> Optional[Delta]:
        return self.deltas.pop(entity_id, None)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------
    def open_or_refresh_session(
        self,
        handler_id: int,
        now: float,
        center_of: Callable[[int], Optional[Point]],
        targets_of: Callable[[int], Iterable[int]],
    ) -> Optional[MoveSession]:
        """Open a session for ``handler_id`` or bump the existing one.

        Original centres are captured only when the session opens so that
        displacement is always measured from the start of the drag.
        """

        session = self.sessions.get(handler_id)
        if session is not None:
            session.last_activity = now
            return session

        start = center_of(handler_id)
        if start is None:
            return None
        originals: Dict[int, Point] = {}
        for target_id in targets_of(handler_id):
            center = center_of(target_id)
            if center is not None:
                originals[target_id] = center
        session = MoveSession(start, originals, now)
        self.sessions[handler_id] = session
        logger.debug(
            "Opened move session for handler %s with %d target(s)",
            handler_id,
            len(originals),
        )
        return session

    def get_session(self, handler_id: int) -> Optional[MoveSession]:
        return self.sessions.get(handler_id)

    def end_session(self, handler_id: int) -> None:
        self.sessions.pop(handler_id, None)

    def touch(self, handler_id: int, now: float) -> Optional[MoveSession]:
        session = self.sessions.get(handler_id)
        if session is not None:
            session.last_activity = now
        return session

    def prune_stale(self, now: float, timeout_ms: float) -> int:
        """Drop sessions idle for longer than ``timeout_ms``; return how many."""

        stale = [
            handler_id
            for handler_id, session in self.sessions.items()
            if now - session.last_activity > timeout_ms
        ]
        for handler_id in stale:
            del self.sessions[handler_id]
        return len(stale)

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------
    def forget(self, entity_id: int) -> None:
        """Remove every record keyed by ``entity_id``."""

        self.deltas.pop(entity_id, None)
        self.sessions.pop(entity_id, None)
        self.previous_centers.pop(entity_id, None)
        for session in self.sessions.values():
            session.original_centers.pop(entity_id, None)

    def reset(self) -> None:
        self.deltas.clear()
        self.sessions.clear()
        self.previous_centers.clear()


__all__ = ["Delta", "MoveSession", "PropagationState"]
