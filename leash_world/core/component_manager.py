# Component Manager for ECS-style storage.
from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, Type, TypeVar

T = TypeVar("T")


class ComponentManager:
    """Track components attached to entities and registered component classes."""

    def __init__(self) -> None:
        # Maps component class name to the class object
        self._registry: Dict[str, Type[Any]] = {}
        # Maps entity id to {component name: component instance}
        self._components: Dict[int, Dict[str, Any]] = {}

    # ------------------------------------------------------------------
    # Registration API
    # ------------------------------------------------------------------
    def register_component(self, component_cls: Type[Any]) -> None:
        """Register a component class for later lookup."""
        self._registry[component_cls.__name__] = component_cls

    # ------------------------------------------------------------------
    # Component access API
    # ------------------------------------------------------------------
    def add_component(self, entity_id: int, component: Any) -> None:
        """Attach a component instance to an entity."""
        name = type(component).__name__
        if name not in self._registry:
            # Auto-register unknown component classes
            self.register_component(type(component))
        self._components.setdefault(entity_id, {})[name] = component

    def get_component(self, entity_id: int, component_cls: Type[T]) -> Optional[T]:
        """Return a component of the given class for an entity, if present."""
        comps = self._components.get(entity_id)
        if not comps:
            return None
        return comps.get(component_cls.__name__)  # type: ignore[return-value]

    def remove_component(self, entity_id: int, component_cls: Type[T]) -> Optional[T]:
        """Remove and return the component of the given class from an entity."""
        comps = self._components.get(entity_id)
        if not comps:
            return None
        return comps.pop(component_cls.__name__, None)  # type: ignore[return-value]

    def remove_entity(self, entity_id: int) -> None:
        """Drop every component attached to ``entity_id``."""
        self._components.pop(entity_id, None)

    def components_for_entity(self, entity_id: int) -> Iterable[Any]:
        """Iterate over all components attached to an entity."""
        return self._components.get(entity_id, {}).values()

    def entities_with(self, component_cls: Type[T]) -> Iterator[Tuple[int, T]]:
        """Yield ``(entity_id, component)`` for every entity carrying ``component_cls``."""
        name = component_cls.__name__
        for entity_id, comps in list(self._components.items()):
            comp = comps.get(name)
            if comp is not None:
                yield entity_id, comp
