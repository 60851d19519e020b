"""Entity components: tags, hierarchy, lights, cameras and static meshes."""
from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, ClassVar, Optional, Union

from snakecore.assets import (
    AssetManager,
    AssetRef,
    CoreAssetID,
    MaterialAsset,
    StaticMeshAsset,
)
from snakecore.events import Event, EventManager

Vec3 = tuple[float, float, float]


class Component:
    """Base of all components; knows the entity it belongs to."""

    def __init__(self, entity: Any = None) -> None:
        self._entity = entity

    @property
    def entity(self) -> Any:
        return self._entity


class ComponentEventType(IntEnum):
    ADDED = 0
    UPDATED = 1
    REMOVED = 2


_event_types: dict[type, type] = {}
_event_types_lock = threading.Lock()


@dataclass
class ComponentEvent(Event):
    """A component was added, updated or removed.

    ``ComponentEvent[T]`` is a distinct event class per component type, so
    listeners can subscribe to the events of one component type only.
    """

    component: Any
    event_type: ComponentEventType
    data: Optional[bytes] = None
    event_code: int = 0

    component_type: ClassVar[Optional[type]] = None

    def __class_getitem__(cls, component_type: type) -> type:
        if not (isinstance(component_type, type) and issubclass(component_type, Component)):
            raise TypeError(f"{component_type!r} is not a Component type")
        with _event_types_lock:
            specialized = _event_types.get(component_type)
            if specialized is None:
                specialized = type(
                    f"ComponentEvent[{component_type.__name__}]",
                    (ComponentEvent,),
                    {"component_type": component_type},
                )
                _event_types[component_type] = specialized
            return specialized


class TagComponent(Component):
    def __init__(self, entity: Any = None) -> None:
        super().__init__(entity)
        self.name = "New entity"


class RelationshipComponent(Component):
    """Position in the scene graph; None stands for no entity."""

    def __init__(self, entity: Any = None) -> None:
        super().__init__(entity)
        self.num_children = 0
        self.first: Any = None
        self.prev: Any = None
        self.next: Any = None
        self.parent: Any = None


@dataclass
class LightAttenuation:
    constant: float = 0.5
    linear: float = 0.25
    exp: float = 0.05


@dataclass
class DirectionalLight:
    colour: Vec3 = (1.0, 1.0, 1.0)
    spherical_coords: tuple[float, float] = (0.0, 0.0)
    dir: Vec3 = (1.0, 0.0, 0.0)


class SpotlightComponent(Component):
    def __init__(self, entity: Any = None) -> None:
        super().__init__(entity)
        self.colour: Vec3 = (1.0, 0.0, 0.0)
        self.aperture = 0.15
        self.attenuation = LightAttenuation()


class PointlightComponent(Component):
    def __init__(self, entity: Any = None) -> None:
        super().__init__(entity)
        self.colour: Vec3 = (1.0, 1.0, 1.0)
        self.attenuation = LightAttenuation()


Matrix4 = tuple[tuple[float, float, float, float], ...]


class CameraComponent(Component):
    def __init__(self, entity: Any = None) -> None:
        super().__init__(entity)
        self.fov = 90.0
        self.z_near = 0.1
        self.z_far = 2500.0
        self.aspect_ratio = 16.0 / 9.0
        self.is_active = False

    def projection_matrix(self) -> Matrix4:
        """Right-handed, zero-to-one depth perspective with Y flipped.

        Returned row-major: ``m[row][col]``.
        """
        tan_half = math.tan(math.radians(self.fov * 0.5) / 2.0)
        near, far = self.z_near, self.z_far
        return (
            (1.0 / (self.aspect_ratio * tan_half), 0.0, 0.0, 0.0),
            (0.0, -1.0 / tan_half, 0.0, 0.0),
            (0.0, 0.0, far / (near - far), -(far * near) / (far - near)),
            (0.0, 0.0, -1.0, 0.0),
        )

    def make_active(self, events: EventManager) -> None:
        """Ask the camera system to render from this camera."""
        events.dispatch_event(
            ComponentEvent[CameraComponent](self, ComponentEventType.UPDATED)
        )


def _as_ref(asset: Union[AssetRef, Any]) -> AssetRef:
    return asset.copy() if isinstance(asset, AssetRef) else AssetRef(asset)


class StaticMeshComponent(Component):
    """A static mesh and the per-submesh materials it is drawn with."""

    def __init__(
        self, entity: Any, assets: AssetManager, events: Optional[EventManager] = None
    ) -> None:
        super().__init__(entity)
        self._events = events if events is not None else assets.events
        self._mesh: AssetRef[StaticMeshAsset] = assets.get_asset(
            StaticMeshAsset, CoreAssetID.SPHERE_MESH
        )
        self._materials: list[AssetRef[MaterialAsset]] = self._copy_materials(self._mesh)

    @staticmethod
    def _copy_materials(mesh: AssetRef) -> list[AssetRef[MaterialAsset]]:
        asset = mesh.get()
        if asset is None:
            raise ValueError("static mesh reference is empty")
        data = asset.data.get()
        if data is None:
            raise ValueError(f"static mesh asset {asset.uuid} has no mesh data")
        return [ref.copy() for ref in data.materials]

    def _dispatch_updated(self) -> None:
        self._events.dispatch_event(
            ComponentEvent[StaticMeshComponent](self, ComponentEventType.UPDATED)
        )

    def set_mesh_asset(self, mesh: Union[AssetRef, StaticMeshAsset]) -> None:
        """Switch mesh; materials are reset to those loaded with the new mesh."""
        new_mesh = _as_ref(mesh)
        try:
            materials = self._copy_materials(new_mesh)
        except ValueError:
            new_mesh.release()
            raise
        self._mesh.release()
        self._mesh = new_mesh
        for ref in self._materials:
            ref.release()
        self._materials = materials
        self._dispatch_updated()

    def mesh_asset(self) -> Optional[StaticMeshAsset]:
        return self._mesh.get()

    def _check_index(self, submesh_idx: int) -> None:
        if not 0 <= submesh_idx < len(self._materials):
            raise IndexError(
                f"submesh index {submesh_idx} out of range for {len(self._materials)} materials"
            )

    def set_material(
        self, submesh_idx: int, material: Union[AssetRef, MaterialAsset]
    ) -> None:
        self._check_index(submesh_idx)
        new_ref = _as_ref(material)
        self._materials[submesh_idx].release()
        self._materials[submesh_idx] = new_ref
        self._dispatch_updated()

    def get_material(self, submesh_idx: int) -> Optional[MaterialAsset]:
        self._check_index(submesh_idx)
        return self._materials[submesh_idx].get()

    def materials(self) -> tuple[AssetRef[MaterialAsset], ...]:
        return tuple(self._materials)