"""Reverse index from handler ids to the targets they hold on a leash."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set, Tuple


class LeashIndex:
    """Reverse lookup from handler id to the ids of the targets it holds."""

    def __init__(self) -> None:
        self._targets: Dict[int, Set[int]] = {}
        self._handler_of: Dict[int, int] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def insert(self, target_id: int, handler_id: int) -> None:
        """Record that ``target_id`` is leashed to ``handler_id``."""
        self.remove(target_id)
        self._targets.setdefault(handler_id, set()).add(target_id)
        self._handler_of[target_id] = handler_id

    def insert_many(self, items: Iterable[Tuple[int, int]]) -> None:
        """Insert multiple ``(target_id, handler_id)`` pairs in one batch."""
        for target_id, handler_id in items:
            self.insert(target_id, handler_id)

    def remove(self, target_id: int) -> Optional[int]:
        """Forget the leash held on ``target_id`` and return its old handler."""
        handler_id = self._handler_of.pop(target_id, None)
        if handler_id is None:
            return None
        targets = self._targets.get(handler_id)
        if targets is not None:
            targets.discard(target_id)
            if not targets:
                self._targets.pop(handler_id, None)
        return handler_id

    def discard_entity(self, entity_id: int) -> List[Tuple[int, int]]:
        """Drop every pair touching ``entity_id``; return them as ``(target, handler)``."""
        dropped: List[Tuple[int, int]] = []
        handler_id = self.remove(entity_id)
        if handler_id is not None:
            dropped.append((entity_id, handler_id))
        for target_id in self.targets_of(entity_id):
            self.remove(target_id)
            dropped.append((target_id, entity_id))
        return dropped

    def clear(self) -> None:
        self._targets.clear()
        self._handler_of.clear()

    def rebuild(self, items: Iterable[Tuple[int, int]]) -> None:
        """Replace the whole index with ``(target_id, handler_id)`` pairs."""
        self.clear()
        self.insert_many(items)

    def targets_of(self, handler_id: int) -> List[int]:
        """Return the target ids leashed to ``handler_id`` in id order."""
        return sorted(self._targets.get(handler_id, ()))

    def handler_of(self, target_id: int) -> Optional[int]:
        return self._handler_of.get(target_id)

    def has_targets(self, handler_id: int) -> bool:
        return bool(self._targets.get(handler_id))

    def pairs(self) -> List[Tuple[int, int]]:
        """Return all ``(target_id, handler_id)`` pairs in target order."""
        return sorted(self._handler_of.items())

    def __len__(self) -> int:
        return len(self._handler_of)


__all__ = ["LeashIndex"]
