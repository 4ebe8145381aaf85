"""System registry and move-event dispatcher."""

from __future__ import annotations

from typing import Any, Iterable, List
import inspect
import logging

from leash_world.core.events import CommitMove, ProposeMove
from leash_world.systems.leash.enforcement import LeashEnforcementSystem
from leash_world.systems.leash.propagation import LeashPropagationSystem

logger = logging.getLogger(__name__)


class SystemsManager:
    """Maintain an ordered list of systems and feed them move events.

    Systems opt in to a hook by defining a method of the same name
    (``on_propose``, ``on_commit``, ``on_delete`` ...). A failing system is
    logged and skipped; its error never reaches the host loop.
    """

    def __init__(self) -> None:
        self._systems: List[Any] = []

    # ------------------------------------------------------------------
    # Registration API
    # ------------------------------------------------------------------
    def register(self, system: Any) -> None:
        """Add ``system`` to the dispatch list if not already present.

        Ensures that :class:`LeashEnforcementSystem` always sees a proposal
        before :class:`LeashPropagationSystem` records it, regardless of
        registration order.
        """

        if system in self._systems:
            return

        if isinstance(system, LeashEnforcementSystem):
            for idx, s in enumerate(self._systems):
                if isinstance(s, LeashPropagationSystem):
                    self._systems.insert(idx, system)
                    break
            else:
                self._systems.append(system)
            return

        if isinstance(system, LeashPropagationSystem):
            for idx, s in enumerate(self._systems):
                if isinstance(s, LeashEnforcementSystem):
                    # insert after existing enforcement system
                    self._systems.insert(idx + 1, system)
                    break
            else:
                self._systems.append(system)
            return

        self._systems.append(system)

    def unregister(self, system: Any) -> None:
        """Remove ``system`` if currently registered."""

        if system in self._systems:
            self._systems.remove(system)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def propose(self, event: ProposeMove) -> bool:
        """Offer ``event`` to every system; return ``False`` if any vetoed it.

        Systems after a veto still see the event, with ``event.vetoed`` set,
        so that they can record the move as a no-op.
        """

        for system in list(self._systems):
            method = getattr(system, "on_propose", None)
            if not callable(method):
                continue
            try:
                result = method(event)
            except Exception:
                logger.exception(
                    "%s failed handling proposal for entity %s",
                    type(system).__name__,
                    event.entity_id,
                )
                continue
            if result is False:
                event.vetoed = True
        return not event.vetoed

    async def commit(self, event: CommitMove) -> None:
        """Tell every system that ``event`` has been applied."""

        await self.notify_async("on_commit", event)

    def notify(self, hook: str, *args: Any) -> None:
        """Call the synchronous ``hook`` on each system that defines it."""

        for system in list(self._systems):
            method = getattr(system, hook, None)
            if not callable(method):
                continue
            try:
                method(*args)
            except Exception:
                logger.exception("%s failed in %s", type(system).__name__, hook)

    async def notify_async(self, hook: str, *args: Any) -> None:
        """Call ``hook`` on each system in order, awaiting coroutine hooks."""

        for system in list(self._systems):
            method = getattr(system, hook, None)
            if not callable(method):
                continue
            try:
                result = method(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("%s failed in %s", type(system).__name__, hook)

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterable[Any]:
        return iter(self._systems)

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._systems)


__all__ = ["SystemsManager"]
