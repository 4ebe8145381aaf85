"""Drag leashed targets along when their handler moves."""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any, Dict, FrozenSet, List, Optional
import asyncio
import logging
import math

from ...config import CONFIG, LeashConfig
from ...core.errors import LeashError
from ...core.events import CommitMove, ProposeMove
from ...core.time_manager import TimeManager
from .constraint import EPSILON, clamp_euclidean
from .geometry import Center, Point, current_center, top_left, units_to_pixels
from .relation import get_leash, leashed_targets, release_entity
from .session import Delta, MoveSession, PropagationState

logger = logging.getLogger(__name__)

# Handlers whose commit is being propagated further up the current await chain.
_cascade: ContextVar[FrozenSet[int]] = ContextVar("leash_cascade", default=frozenset())


class LeashPropagationSystem:
    """Record handler moves on proposal and pull targets along on commit.

    One instance serves one scene and owns its :class:`PropagationState`.
    Derived target moves are written with ``internal=True`` so that
    :class:`LeashEnforcementSystem` lets them through.
    """

    def __init__(
        self,
        scene: Any,
        settings: LeashConfig | None = None,
        clock: TimeManager | None = None,
        state: PropagationState | None = None,
    ) -> None:
        self.scene = scene
        self.settings = settings or CONFIG.leash
        self.clock = clock or TimeManager()
        self.state = state or PropagationState()
        self._locks: Dict[int, asyncio.Lock] = {}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _center_point(self, entity_id: int) -> Optional[Point]:
        center = current_center(self.scene, entity_id)
        return center.point if center is not None else None

    def _targets(self, handler_id: int) -> List[int]:
        return leashed_targets(self.scene, handler_id)

    # ------------------------------------------------------------------
    # Propose
    # ------------------------------------------------------------------
    def on_propose(self, event: ProposeMove) -> None:
        pos = self.scene.position(event.entity_id)
        if pos is None:
            return
        now = self.clock.now_ms()

        if event.vetoed:
            # The entity stays put; record that so the next commit is a no-op.
            self.state.record_delta(event.entity_id, 0.0, 0.0, now)
            return

        new_x = pos.x if event.x is None else event.x
        new_y = pos.y if event.y is None else event.y
        self.state.record_delta(event.entity_id, new_x - pos.x, new_y - pos.y, now)
        self.state.prune_stale(now, self.settings.session_timeout_ms)

        if event.internal:
            # Pulled by another handler: any drag of this entity is over.
            self.state.end_session(event.entity_id)
        elif self._targets(event.entity_id):
            self.state.open_or_refresh_session(
                event.entity_id, now, self._center_point, self._targets
            )

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------
    async def on_commit(self, event: CommitMove) -> None:
        handler_id = event.entity_id
        delta = self.state.consume_delta(handler_id)
        session = self.state.touch(handler_id, self.clock.now_ms())
        if delta is None and session is None:
            return

        chain = _cascade.get()
        if handler_id in chain:
            logger.debug("Leash cycle through %s; not propagating again", handler_id)
            return

        token = _cascade.set(chain | {handler_id})
        try:
            lock = self._locks.setdefault(handler_id, asyncio.Lock())
            async with lock:
                updates = self.compute_updates(handler_id, delta, exclude=chain)
                if updates:
                    await self._write(handler_id, updates)
        finally:
            _cascade.reset(token)
            self.state.prune_stale(self.clock.now_ms(), self.settings.session_timeout_ms)

    def compute_updates(
        self,
        handler_id: int,
        delta: Optional[Delta],
        exclude: FrozenSet[int] = frozenset(),
    ) -> List[Dict[str, Any]]:
        """Return ``[{id, x, y}]`` for every target of ``handler_id``.

        All targets are measured against one snapshot of the handler centre.
        Missing targets and those in ``exclude`` are skipped; a missing handler
        yields no updates.
        """

        handler_now = current_center(self.scene, handler_id)
        if handler_now is None:
            logger.debug("Handler %s vanished before commit; skipping", handler_id)
            self.state.forget(handler_id)
            return []

        previous = self.state.previous_centers.get(handler_id)
        if previous is None:
            if delta is not None:
                previous = (handler_now.x - delta.dx, handler_now.y - delta.dy)
            else:
                previous = handler_now.point
        session = self.state.get_session(handler_id)

        updates: List[Dict[str, Any]] = []
        for target_id in self._targets(handler_id):
            if target_id in exclude:
                continue
            leash = get_leash(self.scene, target_id)
            if leash is None or leash.handler_id != handler_id:
                continue
            target_now = current_center(self.scene, target_id)
            if target_now is None:
                logger.debug("Leashed target %s missing; skipping", target_id)
                continue

            proposed = self._proposed_center(
                target_id, target_now, handler_now, previous, session, delta
            )
            radius = units_to_pixels(self.scene, leash.distance)
            final = clamp_euclidean(handler_now.point, proposed, radius)
            x, y = top_left(final, target_now.width_px, target_now.height_px)
            updates.append({"id": target_id, "x": x, "y": y})

            logger.debug(
                "Target %s of handler %s: current=%s proposed=%s final=%s radius=%.2f",
                target_id,
                handler_id,
                target_now.point,
                proposed,
                final,
                radius,
            )

        self.state.previous_centers[handler_id] = handler_now.point
        return updates

    def _proposed_center(
        self,
        target_id: int,
        target_now: Center,
        handler_now: Center,
        previous: Point,
        session: Optional[MoveSession],
        delta: Optional[Delta],
    ) -> Point:
        if self.settings.handler_pull_mode == "clamp":
            return target_now.point

        base = target_now.point
        if self.settings.displacement_mode == "delta":
            disp = (handler_now.x - previous[0], handler_now.y - previous[1])
        elif session is not None:
            base = session.original_centers.get(target_id, target_now.point)
            disp = (
                handler_now.x - session.start_center[0],
                handler_now.y - session.start_center[1],
            )
            if math.hypot(*disp) < EPSILON and previous != handler_now.point:
                # Session baseline was captured after the handler already moved.
                disp = (handler_now.x - previous[0], handler_now.y - previous[1])
                base = target_now.point
        elif delta is not None:
            disp = (delta.dx, delta.dy)
        else:
            disp = (0.0, 0.0)
        return (base[0] + disp[0], base[1] + disp[1])

    async def _write(self, handler_id: int, updates: List[Dict[str, Any]]) -> None:
        try:
            await self.scene.update_many(updates, internal=True)
        except (LeashError, KeyError) as exc:
            logger.warning(
                "Applying %d leash update(s) for handler %s failed: %s",
                len(updates),
                handler_id,
                exc,
            )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def on_delete(self, entity_id: int) -> None:
        self.state.forget(entity_id)
        self._locks.pop(entity_id, None)
        await release_entity(self.scene, entity_id)

    def on_scene_ready(self) -> None:
        self.state.reset()
        self._locks.clear()


__all__ = ["LeashPropagationSystem"]
