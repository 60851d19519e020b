"""Reference-counted assets and the manager that owns them."""
from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, IntEnum, IntFlag, auto
from typing import Any, Generic, Optional, TypeVar

from snakecore.events import Event, EventManager
from snakecore.util import INVALID_UUID, new_uuid

INVALID_GLOBAL_INDEX = 0xFFFFFFFF

A = TypeVar("A", bound="Asset")


class Asset:
    """Base of every asset: an identifier, a source file and a display name."""

    def __init__(self, uuid: int = INVALID_UUID) -> None:
        self.uuid = int(uuid)
        self.filepath = ""
        self.name = "Unnamed asset"
        self._ref_count = 0

    @property
    def ref_count(self) -> int:
        """Number of live AssetRef objects pointing at this asset."""
        return self._ref_count

    def __repr__(self) -> str:
        return f"{type(self).__name__}(uuid={self.uuid}, name={self.name!r})"


class AssetRef(Generic[A]):
    """A counted handle to an asset; may be empty."""

    def __init__(self, asset: Optional[A] = None) -> None:
        self._asset: Optional[A] = asset
        if asset is not None:
            asset._ref_count += 1

    def set_asset(self, asset: Optional[A]) -> None:
        if self._asset is not None:
            self._asset._ref_count -= 1
        self._asset = asset
        if asset is not None:
            asset._ref_count += 1

    def get(self) -> Optional[A]:
        return self._asset

    def copy(self) -> "AssetRef[A]":
        """A second handle to the same asset."""
        return AssetRef(self._asset)

    def release(self) -> None:
        """Drop the reference, leaving this handle empty."""
        self.set_asset(None)

    def __bool__(self) -> bool:
        return self._asset is not None

    def __enter__(self) -> "AssetRef[A]":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"AssetRef({self._asset!r})"


def gen_asset_filename(asset: Asset, file_extension: str) -> str:
    """File name used when serializing an asset; the extension has no dot."""
    return f"{asset.name}_{asset.uuid}.{file_extension}"


class MaterialFlag(IntFlag):
    EMISSIVE = 1 << 0


@dataclass
class MaterialUpdateEvent(Event):
    material: Optional["MaterialAsset"] = None


class Texture2DAsset(Asset):
    """A 2D texture; its global index is assigned when registered with the GPU."""

    INVALID_GLOBAL_INDEX = INVALID_GLOBAL_INDEX

    def __init__(self, uuid: int = INVALID_UUID) -> None:
        super().__init__(uuid)
        self.global_index = INVALID_GLOBAL_INDEX


class MaterialAsset(Asset):
    """PBR material parameters and the textures they sample."""

    INVALID_GLOBAL_INDEX = INVALID_GLOBAL_INDEX

    def __init__(self, uuid: int = INVALID_UUID) -> None:
        super().__init__(uuid)
        self.flags = MaterialFlag(0)
        self.albedo_tex: AssetRef[Texture2DAsset] = AssetRef()
        self.normal_tex: AssetRef[Texture2DAsset] = AssetRef()
        self.roughness_tex: AssetRef[Texture2DAsset] = AssetRef()
        self.metallic_tex: AssetRef[Texture2DAsset] = AssetRef()
        self.ao_tex: AssetRef[Texture2DAsset] = AssetRef()
        self.albedo = (1.0, 1.0, 1.0)
        self.emissive = 0.0
        self.roughness = 0.5
        self.metallic = 0.0
        self.ao = 0.2
        self.global_buffer_index = INVALID_GLOBAL_INDEX

    def raise_flag(self, flag: MaterialFlag) -> None:
        self.flags |= flag

    def remove_flag(self, flag: MaterialFlag) -> None:
        self.flags &= ~flag

    def flip_flag(self, flag: MaterialFlag) -> None:
        if self.flags & flag:
            self.remove_flag(flag)
        else:
            self.raise_flag(flag)

    def dispatch_update_event(self, events: EventManager) -> None:
        """Announce that this material's data changed."""
        events.dispatch_event(MaterialUpdateEvent(self))


@dataclass
class Submesh:
    num_indices: int = 0
    num_vertices: int = 0
    base_vertex: int = 0
    base_index: int = 0
    material_index: int = 0


@dataclass
class MeshData:
    """Raw mesh data loaded from a model file."""

    textures: list[int] = field(default_factory=list)
    materials: list[int] = field(default_factory=list)
    submeshes: list[Submesh] = field(default_factory=list)
    num_indices: int = 0
    num_vertices: int = 0
    positions: list[tuple[float, float, float]] = field(default_factory=list)
    normals: list[tuple[float, float, float]] = field(default_factory=list)
    tangents: list[tuple[float, float, float]] = field(default_factory=list)
    tex_coords: list[tuple[float, float]] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)


class MeshDataAsset(Asset):
    """Mesh layout plus the materials loaded with it."""

    def __init__(self, uuid: int = INVALID_UUID) -> None:
        super().__init__(uuid)
        self.materials: list[AssetRef[MaterialAsset]] = []
        self.submeshes: list[Submesh] = []
        self.num_indices = 0
        self.num_vertices = 0


class StaticMeshAsset(Asset):
    def __init__(self, uuid: int = INVALID_UUID) -> None:
        super().__init__(uuid)
        self.data: AssetRef[MeshDataAsset] = AssetRef()


class AssetEventType(Enum):
    CREATED = auto()
    DESTROYED = auto()


@dataclass
class AssetEvent(Event):
    type: AssetEventType = AssetEventType.CREATED
    asset: Optional[Asset] = None


class CoreAssetID(IntEnum):
    SPHERE_MESH = 1
    SPHERE_MESH_DATA = 2
    MATERIAL = 3
    TEXTURE = 4
    CUBE_MESH = 5
    CUBE_MESH_DATA = 6
    NUM_CORE_ASSETS = 7


class AssetNotFoundError(LookupError):
    """Raised when no asset matches a UUID or file path."""


def _same_path(a: str, b: str) -> bool:
    if not a or not b:
        return False
    try:
        return os.path.samefile(a, b)
    except OSError:
        return os.path.normcase(os.path.realpath(a)) == os.path.normcase(
            os.path.realpath(b)
        )


class AssetManager:
    """Owns every asset by UUID and announces creation and deletion."""

    def __init__(self, events: Optional[EventManager] = None) -> None:
        self.events = events if events is not None else EventManager()
        self._assets: dict[int, Asset] = {}

    def __len__(self) -> int:
        return len(self._assets)

    def __contains__(self, uuid: object) -> bool:
        return uuid in self._assets

    def __iter__(self) -> Iterator[Asset]:
        return iter(list(self._assets.values()))

    def create_asset(
        self, asset_type: type[A], uuid: int = INVALID_UUID, *args: Any, **kwargs: Any
    ) -> AssetRef[A]:
        """Create an asset; a UUID of 0 is replaced with a random one."""
        uuid = int(uuid)
        if uuid in self._assets:
            raise ValueError(f"AssetManager.create_asset failed, UUID conflict: '{uuid}'")
        if uuid == INVALID_UUID:
            uuid = new_uuid()
            while uuid in self._assets:
                uuid = new_uuid()
        asset = asset_type(uuid, *args, **kwargs)
        self._assets[uuid] = asset
        self.events.dispatch_event(AssetEvent(AssetEventType.CREATED, asset))
        return AssetRef(asset)

    def get_asset_raw(self, asset_type: type[A], uuid: int) -> A:
        try:
            asset = self._assets[int(uuid)]
        except KeyError:
            raise AssetNotFoundError(
                f"AssetManager.get_asset failed, UUID '{uuid}' doesn't exist in AssetManager"
            ) from None
        if not isinstance(asset, asset_type):
            raise TypeError(f"AssetManager.get_asset failed '{uuid}', wrong asset type")
        return asset

    def get_asset(self, asset_type: type[A], uuid: int) -> AssetRef[A]:
        return AssetRef(self.get_asset_raw(asset_type, uuid))

    def get_asset_by_path(self, asset_type: type[A], filepath: str) -> AssetRef[A]:
        """First asset of the given type loaded from filepath."""
        for asset in self._assets.values():
            if _same_path(asset.filepath, str(filepath)) and isinstance(asset, asset_type):
                return AssetRef(asset)
        raise AssetNotFoundError(
            f"AssetManager.get_asset failed, filepath '{filepath}' doesn't exist in AssetManager"
        )

    def get_view(self, asset_type: type[A], include_core: bool = False) -> list[A]:
        """All assets of a type, skipping core assets unless asked for."""
        return [
            asset
            for uuid, asset in self._assets.items()
            if (include_core or not self.is_core_asset_uuid(uuid))
            and isinstance(asset, asset_type)
        ]

    def delete_asset(self, uuid: int | Asset) -> None:
        key = uuid.uuid if isinstance(uuid, Asset) else int(uuid)
        try:
            asset = self._assets.pop(key)
        except KeyError:
            raise AssetNotFoundError(
                f"AssetManager.delete_asset failed, UUID '{key}' doesn't exist"
            ) from None
        self.events.dispatch_event(AssetEvent(AssetEventType.DESTROYED, asset))

    def clear(self) -> None:
        """Delete every asset that is not a core asset."""
        for uuid in [u for u in self._assets if not self.is_core_asset_uuid(u)]:
            self.delete_asset(uuid)

    @staticmethod
    def is_core_asset_uuid(uuid: int) -> bool:
        return uuid != 0 and uuid <= CoreAssetID.NUM_CORE_ASSETS