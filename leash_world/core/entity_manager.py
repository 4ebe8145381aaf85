"""Entity management for leash_world scenes."""

from __future__ import annotations

from typing import List, Set


class EntityManager:
    """Hand out entity ids and remember which ones are alive."""

    def __init__(self) -> None:
        self._next_id: int = 0
        self._alive: Set[int] = set()

    # ------------------------------------------------------------------
    # Creation / Destruction
    # ------------------------------------------------------------------
    def create_entity(self) -> int:
        """Create a new entity and return its unique ID."""

        self._next_id += 1
        entity_id = self._next_id
        self._alive.add(entity_id)
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Forget ``entity_id``. Unknown ids are ignored."""

        self._alive.discard(entity_id)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def has_entity(self, entity_id: int) -> bool:
        return entity_id in self._alive

    @property
    def all_entities(self) -> List[int]:
        return sorted(self._alive)
