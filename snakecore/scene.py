"""Scenes, the entities they hold and the systems that run over them."""
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, ClassVar, Optional, TypeVar

from snakecore.components import (
    Component,
    ComponentEvent,
    ComponentEventType,
    DirectionalLight,
    RelationshipComponent,
    TagComponent,
)
from snakecore.events import Event, EventManager
from snakecore.util import INVALID_UUID, UUID, new_uuid

C = TypeVar("C", bound=Component)
S = TypeVar("S", bound="System")


class FixedComponentError(TypeError):
    """Raised when removing a component every entity must keep."""


class System:
    """Logic attached to a scene; every hook does nothing by default."""

    def __init__(self) -> None:
        self.scene: Optional[Scene] = None

    def on_system_add(self) -> None:
        pass

    def on_scene_start(self) -> None:
        pass

    def on_update(self) -> None:
        pass

    def on_scene_end(self) -> None:
        pass

    def on_system_remove(self) -> None:
        pass


class Entity:
    """An identified bag of components, at most one of each type."""

    FIXED_COMPONENTS: ClassVar[tuple[type, ...]] = (TagComponent,)

    def __init__(self, scene: "Scene", uuid: int) -> None:
        self._scene = scene
        self._uuid = UUID(uuid)
        self._components: dict[type, Component] = {}

    @property
    def scene(self) -> "Scene":
        return self._scene

    @property
    def uuid(self) -> int:
        return int(self._uuid)

    def _dispatch(self, component: Component, event_type: ComponentEventType) -> None:
        event_cls = ComponentEvent[type(component)]
        self._scene.events.dispatch_event(event_cls(component, event_type))

    def add_component(self, component_type: type[C], *args: Any) -> C:
        """Add a component, or return the existing one of that type."""
        existing = self._components.get(component_type)
        if existing is not None:
            return existing  # type: ignore[return-value]
        component = component_type(self, *args)
        self._components[component_type] = component
        self._dispatch(component, ComponentEventType.ADDED)
        return component

    def get_component(self, component_type: type[C]) -> Optional[C]:
        return self._components.get(component_type)  # type: ignore[return-value]

    def has_component(self, component_type: type) -> bool:
        return component_type in self._components

    def remove_component(self, component_type: type) -> None:
        if component_type in self.FIXED_COMPONENTS:
            raise FixedComponentError(
                f"{component_type.__name__} cannot be removed from an entity, it is a fixed component"
            )
        component = self._components.get(component_type)
        if component is None:
            return
        self._dispatch(component, ComponentEventType.REMOVED)
        del self._components[component_type]

    def _children(self) -> Iterator["Entity"]:
        rel = self.get_component(RelationshipComponent)
        if rel is None:
            return
        current = rel.first
        for _ in range(rel.num_children):
            if current is None:
                return
            yield current
            child_rel = current.get_component(RelationshipComponent)
            current = child_rel.next if child_rel is not None else None

    def get_child(self, name: str) -> Optional["Entity"]:
        """First direct child whose tag name matches, or None."""
        for child in self._children():
            tag = child.get_component(TagComponent)
            if tag is not None and tag.name == name:
                return child
        return None

    def has_children(self) -> bool:
        rel = self.get_component(RelationshipComponent)
        return rel is not None and rel.first is not None

    def parent(self) -> Optional["Entity"]:
        rel = self.get_component(RelationshipComponent)
        return rel.parent if rel is not None else None

    def __repr__(self) -> str:
        tag = self.get_component(TagComponent)
        name = tag.name if tag is not None else ""
        return f"Entity(uuid={self.uuid}, name={name!r})"


@dataclass
class EntityDeleteEvent(Event):
    entity: Optional[Entity] = None


class Scene:
    """Owns entities by UUID and the systems that update them."""

    def __init__(self, events: Optional[EventManager] = None) -> None:
        self.events = events if events is not None else EventManager()
        self.name = "Unnamed scene"
        self.uuid = UUID()
        self.directional_light = DirectionalLight()
        self._entities: list[Entity] = []
        self._lookup: dict[int, Entity] = {}
        self._systems: dict[type, System] = {}

    def create_entity(self, uuid: int = INVALID_UUID) -> Entity:
        """Create an entity with a tag and a relationship component."""
        uuid = int(uuid)
        if uuid == INVALID_UUID:
            uuid = new_uuid()
            while uuid in self._lookup:
                uuid = new_uuid()
        elif uuid in self._lookup:
            raise ValueError(f"entity UUID already in scene: {uuid}")
        entity = Entity(self, uuid)
        entity.add_component(TagComponent)
        entity.add_component(RelationshipComponent)
        self._entities.append(entity)
        self._lookup[uuid] = entity
        return entity

    def get_system(self, system_type: type[S]) -> S:
        try:
            return self._systems[system_type]  # type: ignore[return-value]
        except KeyError:
            raise LookupError(
                f"Scene.get_system failed, no {system_type.__name__} in scene"
            ) from None

    def add_system(self, system_type: type[S], *args: Any) -> S:
        if system_type in self._systems:
            raise ValueError(
                f"Failed to add system to scene, duplicate {system_type.__name__}"
            )
        system = system_type(*args)
        system.scene = self
        system.on_system_add()
        self._systems[system_type] = system
        return system

    def update(self) -> None:
        for system in list(self._systems.values()):
            system.on_update()

    def clear_entities(self) -> None:
        while self._entities:
            self.delete_entity(self._entities[0])

    def delete_entity(self, entity: Entity) -> None:
        if self._lookup.get(entity.uuid) is not entity:
            raise ValueError(f"entity {entity.uuid} is not in this scene")
        self.events.dispatch_event(EntityDeleteEvent(entity))
        for component in list(entity._components.values()):
            entity._dispatch(component, ComponentEventType.REMOVED)
        entity._components.clear()
        self._entities.remove(entity)
        del self._lookup[entity.uuid]

    def get_entity(self, uuid: int) -> Entity:
        try:
            return self._lookup[int(uuid)]
        except KeyError:
            raise LookupError(f"no entity with UUID {uuid} in scene") from None

    def entities(self) -> tuple[Entity, ...]:
        return tuple(self._entities)