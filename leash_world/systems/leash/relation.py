"""Leash relation stored as an attribute on the target entity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple
import logging
import math

from ...config import CONFIG, LeashConfig
from ...core.errors import AttributeStoreError, InvalidLeashError
from ...utils.notifications import Notifications, notifications

logger = logging.getLogger(__name__)

LEASH_KEY = "leash"


@dataclass(frozen=True)
class LeashRelation:
    """Which handler holds a target, in which scene, and how far it may stray."""

    handler_id: int
    scene_id: str
    distance: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "handler_id": self.handler_id,
            "scene_id": self.scene_id,
            "distance": self.distance,
        }

    @classmethod
    def from_value(cls, value: Any) -> Optional["LeashRelation"]:
        """Parse a stored attribute value; malformed values read as no leash."""

        if not isinstance(value, Mapping):
            return None
        try:
            relation = cls(
                handler_id=int(value["handler_id"]),
                scene_id=str(value["scene_id"]),
                distance=float(value["distance"]),
            )
        except (KeyError, TypeError, ValueError):
            logger.debug("Ignoring malformed leash attribute %r", value)
            return None
        if not math.isfinite(relation.distance) or relation.distance <= 0:
            return None
        return relation


@dataclass(frozen=True)
class LeashOutcome:
    """Result of a leash management request."""

    ok: bool
    message: str = ""
    relation: Optional[LeashRelation] = None


def get_leash(scene: Any, target_id: int) -> Optional[LeashRelation]:
    """Return the leash held on ``target_id`` or ``None``."""

    try:
        value = scene.get_attribute(target_id, LEASH_KEY)
    except AttributeStoreError as exc:
        logger.debug("Reading leash of %s failed: %s", target_id, exc)
        return None
    return LeashRelation.from_value(value)


def validate_leash(
    scene: Any, target_id: int, handler_id: Any, distance: Any
) -> LeashRelation:
    """Build a relation for ``target_id`` or raise :class:`InvalidLeashError`."""

    if not scene.has_entity(target_id):
        raise InvalidLeashError("Target token not found.")
    try:
        handler_id = int(handler_id)
        distance = float(distance)
    except (TypeError, ValueError):
        raise InvalidLeashError("Choose a handler and a positive distance.") from None
    if not math.isfinite(distance) or distance <= 0:
        raise InvalidLeashError("Choose a handler and a positive distance.")
    if handler_id == target_id:
        raise InvalidLeashError("A token cannot be leashed to itself.")
    if not scene.has_entity(handler_id):
        raise InvalidLeashError("Handler token not found.")
    return LeashRelation(handler_id, scene.id, distance)


def _units(scene: Any) -> str:
    grid = getattr(scene, "grid", None)
    return getattr(grid, "units", None) or "units"


async def apply_leash(
    scene: Any,
    target_id: int,
    handler_id: Any,
    distance: Any = None,
    *,
    is_gm: bool = True,
    settings: LeashConfig | None = None,
    notices: Notifications | None = None,
) -> LeashOutcome:
    """Leash ``target_id`` to ``handler_id``, replacing any existing leash.

    ``distance`` is in scene units and defaults to the configured default.
    Nothing is stored when validation or the attribute store fails.
    """

    settings = settings or getattr(scene, "leash_settings", None) or CONFIG.leash
    notices = notices or notifications

    if settings.gm_only and not is_gm:
        message = "Only the GM may apply leashes."
        notices.warn(message)
        return LeashOutcome(False, message)

    if distance is None:
        distance = settings.default_distance
    try:
        relation = validate_leash(scene, target_id, handler_id, distance)
    except InvalidLeashError as exc:
        notices.warn(str(exc))
        return LeashOutcome(False, str(exc))

    previous = get_leash(scene, target_id)
    try:
        await scene.set_attribute(target_id, LEASH_KEY, relation.to_dict())
    except AttributeStoreError as exc:
        logger.warning("Storing leash on %s failed: %s", target_id, exc)
        message = f"Could not leash {scene.name(target_id)}."
        notices.error(message)
        return LeashOutcome(False, message)

    scene.leash_index.insert(target_id, relation.handler_id)
    if previous is not None and previous.handler_id != relation.handler_id:
        scene.notify("on_leash_removed", target_id, previous.handler_id)

    message = (
        f"Leashed {scene.name(target_id)} to {scene.name(relation.handler_id)} "
        f"at {relation.distance:g} {_units(scene)}."
    )
    notices.info(message)
    scene.notify("on_leash_applied", target_id, relation.handler_id)
    return LeashOutcome(True, message, relation)


async def remove_leash(
    scene: Any,
    target_id: int,
    *,
    is_gm: bool = True,
    settings: LeashConfig | None = None,
    notices: Notifications | None = None,
) -> LeashOutcome:
    """Remove the leash held on ``target_id``."""

    settings = settings or getattr(scene, "leash_settings", None) or CONFIG.leash
    notices = notices or notifications

    if settings.gm_only and not is_gm:
        message = "Only the GM may remove leashes."
        notices.warn(message)
        return LeashOutcome(False, message)

    relation = get_leash(scene, target_id)
    if relation is None:
        message = f"{scene.name(target_id)} is not leashed."
        notices.info(message)
        return LeashOutcome(False, message)

    try:
        await scene.remove_attribute(target_id, LEASH_KEY)
    except AttributeStoreError as exc:
        logger.warning("Removing leash from %s failed: %s", target_id, exc)
        message = f"Could not unleash {scene.name(target_id)}."
        notices.error(message)
        return LeashOutcome(False, message, relation)

    scene.leash_index.remove(target_id)
    scene.notify("on_leash_removed", target_id, relation.handler_id)
    message = f"Unleashed {scene.name(target_id)}."
    notices.info(message)
    return LeashOutcome(True, message, relation)


def leashed_targets(scene: Any, handler_id: int) -> List[int]:
    """Targets held by ``handler_id`` according to the scene's leash index."""

    return scene.leash_index.targets_of(handler_id)


def scan_leashes(scene: Any) -> List[Tuple[int, LeashRelation]]:
    """Full scan of the scene for valid leash relations."""

    found: List[Tuple[int, LeashRelation]] = []
    for target_id, value in scene.entities_with_attribute(LEASH_KEY):
        relation = LeashRelation.from_value(value)
        if relation is None or relation.scene_id != scene.id:
            continue
        found.append((target_id, relation))
    return found


def rebuild_index(scene: Any) -> int:
    """Rebuild ``scene.leash_index`` from stored attributes; return the pair count."""

    pairs = [(target_id, rel.handler_id) for target_id, rel in scan_leashes(scene)]
    scene.leash_index.rebuild(pairs)
    return len(pairs)


async def release_entity(scene: Any, entity_id: int) -> List[Tuple[int, int]]:
    """Drop every leash that names ``entity_id`` as handler or target.

    Returns the removed ``(target_id, handler_id)`` pairs.
    """

    dropped = scene.leash_index.discard_entity(entity_id)
    for target_id, handler_id in dropped:
        if target_id != entity_id and scene.has_entity(target_id):
            try:
                await scene.remove_attribute(target_id, LEASH_KEY)
            except AttributeStoreError as exc:
                logger.warning("Clearing leash on %s failed: %s", target_id, exc)
        scene.notify("on_leash_removed", target_id, handler_id)
    if dropped:
        logger.info("Released %d leash(es) touching deleted entity %s", len(dropped), entity_id)
    return dropped


__all__ = [
    "LEASH_KEY",
    "LeashRelation",
    "LeashOutcome",
    "get_leash",
    "validate_leash",
    "apply_leash",
    "remove_leash",
    "leashed_targets",
    "scan_leashes",
    "rebuild_index",
    "release_entity",
]
