"""Scene container: entities, grid scale, attribute store and move protocol."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple
import asyncio
import copy
import logging

from .component_manager import ComponentManager
from .components import Flags, Label, Position, Size
from .entity_manager import EntityManager
from .errors import AttributeStoreError
from .events import CommitMove, ProposeMove, parse_event
from .grid import Point, SquareGrid
from .leash_index import LeashIndex

logger = logging.getLogger(__name__)


class Scene:
    """Lightweight holder for entities, their components and the scene grid."""

    def __init__(self, scene_id: str = "scene", grid: SquareGrid | None = None):
        self.id = scene_id
        self.grid = grid
        self.entity_manager = EntityManager()
        self.component_manager = ComponentManager()
        self.leash_index = LeashIndex()

        # Populated during bootstrapping.
        self.systems_manager: Any | None = None
        self.leash_settings: Any | None = None

    # ------------------------------------------------------------------
    # Scale
    # ------------------------------------------------------------------
    @property
    def grid_size(self) -> Optional[float]:
        return self.grid.size if self.grid is not None else None

    @property
    def grid_distance(self) -> Optional[float]:
        return self.grid.distance if self.grid is not None else None

    def measure_distance(self, p1: Point, p2: Point) -> Optional[float]:
        """Scene-native distance in units, or ``None`` without a grid."""
        if self.grid is None:
            return None
        return self.grid.measure_distance(p1, p2)

    # ------------------------------------------------------------------
    # Entity operations
    # ------------------------------------------------------------------
    def spawn(
        self,
        x: float,
        y: float,
        width: float = 1.0,
        height: float = 1.0,
        name: str = "",
    ) -> int:
        """Create an entity with its top-left corner at ``(x, y)``."""

        entity_id = self.entity_manager.create_entity()
        cm = self.component_manager
        cm.add_component(entity_id, Position(float(x), float(y)))
        cm.add_component(entity_id, Size(float(width), float(height)))
        cm.add_component(entity_id, Flags())
        cm.add_component(entity_id, Label(name or f"Token {entity_id}"))
        return entity_id

    async def destroy_entity(self, entity_id: int) -> None:
        """Remove ``entity_id`` and tell systems it is gone."""

        if not self.has_entity(entity_id):
            return
        self.entity_manager.destroy_entity(entity_id)
        self.component_manager.remove_entity(entity_id)
        if self.systems_manager is not None:
            await self.systems_manager.notify_async("on_delete", entity_id)

    def has_entity(self, entity_id: int) -> bool:
        return self.entity_manager.has_entity(entity_id)

    def entity_ids(self) -> List[int]:
        return self.entity_manager.all_entities

    def position(self, entity_id: int) -> Optional[Position]:
        if not self.has_entity(entity_id):
            return None
        return self.component_manager.get_component(entity_id, Position)

    def size(self, entity_id: int) -> Size:
        size = self.component_manager.get_component(entity_id, Size)
        return size if size is not None else Size()

    def name(self, entity_id: int) -> str:
        label = self.component_manager.get_component(entity_id, Label)
        return label.text if label is not None and label.text else f"Token {entity_id}"

    def notify(self, hook: str, *args: Any) -> None:
        """Forward a UI-level hook (hover, control ...) to registered systems."""
        if self.systems_manager is not None:
            self.systems_manager.notify(hook, *args)

    def ready(self) -> None:
        """Tell systems the scene was (re)loaded so transient state is dropped."""
        self.notify("on_scene_ready")

    # ------------------------------------------------------------------
    # Attribute store
    # ------------------------------------------------------------------
    def get_attribute(self, entity_id: int, key: str) -> Any:
        """Return a copy of the attribute ``key`` on ``entity_id`` or ``None``."""
        flags = self.component_manager.get_component(entity_id, Flags)
        if flags is None or not self.has_entity(entity_id):
            return None
        return copy.deepcopy(flags.values.get(key))

    async def set_attribute(self, entity_id: int, key: str, value: Any) -> None:
        flags = self._flags_for_write(entity_id)
        await asyncio.sleep(0)
        flags.values[key] = copy.deepcopy(value)

    async def remove_attribute(self, entity_id: int, key: str) -> None:
        flags = self._flags_for_write(entity_id)
        await asyncio.sleep(0)
        flags.values.pop(key, None)

    def entities_with_attribute(self, key: str) -> Iterator[Tuple[int, Any]]:
        """Yield ``(entity_id, value)`` for every entity carrying ``key``."""
        for entity_id, flags in self.component_manager.entities_with(Flags):
            if key in flags.values and self.has_entity(entity_id):
                yield entity_id, copy.deepcopy(flags.values[key])

    def _flags_for_write(self, entity_id: int) -> Flags:
        if not self.has_entity(entity_id):
            raise AttributeStoreError(f"Entity {entity_id} is not in scene {self.id}")
        flags = self.component_manager.get_component(entity_id, Flags)
        if flags is None:
            flags = Flags()
            self.component_manager.add_component(entity_id, flags)
        return flags

    # ------------------------------------------------------------------
    # Move protocol
    # ------------------------------------------------------------------
    def _propose(self, event: ProposeMove) -> bool:
        if self.systems_manager is None:
            return True
        return self.systems_manager.propose(event)

    def _apply(self, event: ProposeMove) -> Optional[CommitMove]:
        pos = self.position(event.entity_id)
        if pos is None:
            return None
        if event.x is not None:
            pos.x = float(event.x)
        if event.y is not None:
            pos.y = float(event.y)
        return CommitMove(event.entity_id, pos.x, pos.y, internal=event.internal)

    async def _commit(self, event: CommitMove) -> None:
        if self.systems_manager is not None:
            await self.systems_manager.commit(event)

    async def move_entity(
        self, entity_id: int, x: float | None = None, y: float | None = None
    ) -> bool:
        """Run a user move of ``entity_id`` through propose and commit.

        Returns ``False`` when the move was vetoed or the entity is unknown.
        """

        if not self.has_entity(entity_id):
            logger.debug("move_entity: entity %s not in scene %s", entity_id, self.id)
            return False
        if x is None and y is None:
            return False
        return await self._run_move(ProposeMove(entity_id, x, y))

    async def _run_move(self, proposal: ProposeMove) -> bool:
        if not self._propose(proposal):
            logger.debug(
                "Move of entity %s to (%s, %s) vetoed",
                proposal.entity_id,
                proposal.x,
                proposal.y,
            )
            return False
        committed = self._apply(proposal)
        if committed is None:
            return False
        await self._commit(committed)
        return True

    async def submit(self, payload: Mapping[str, Any]) -> bool:
        """Feed one loosely-typed host move payload through the protocol.

        A ``propose`` payload runs the full propose, apply and commit cycle.
        A ``commit`` payload reports a move the host already made: the
        position is written and only the commit hooks run. Malformed
        payloads are logged and rejected.
        """

        try:
            event = parse_event(payload)
        except ValueError as exc:
            logger.warning("Rejected move payload: %s", exc)
            return False
        if not self.has_entity(event.entity_id):
            logger.debug("submit: entity %s not in scene %s", event.entity_id, self.id)
            return False
        if isinstance(event, ProposeMove):
            return await self._run_move(event)

        pos = self.position(event.entity_id)
        pos.x, pos.y = event.x, event.y
        await self._commit(event)
        return True

    async def update_many(
        self, updates: Sequence[Mapping[str, Any]], internal: bool = False
    ) -> List[int]:
        """Apply ``[{id, x, y}, ...]`` as one batch and return the moved ids.

        Every record is proposed and written before any commit is announced,
        so commit hooks observe the whole batch in place. Unknown ids are
        skipped.
        """

        proposals: List[ProposeMove] = []
        for record in updates:
            entity_id = int(record["id"])
            if not self.has_entity(entity_id):
                logger.debug("update_many: skipping missing entity %s", entity_id)
                continue
            proposal = ProposeMove(
                entity_id, record.get("x"), record.get("y"), internal=internal
            )
            if self._propose(proposal):
                proposals.append(proposal)

        commits: Dict[int, CommitMove] = {}
        for proposal in proposals:
            committed = self._apply(proposal)
            if committed is not None:
                commits[proposal.entity_id] = committed

        for committed in commits.values():
            await self._commit(committed)
        return list(commits)


__all__ = ["Scene"]
