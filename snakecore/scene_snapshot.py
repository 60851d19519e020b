"""Per-frame snapshot of what a scene draws."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from snakecore.assets import AssetRef, MaterialAsset


@dataclass(frozen=True)
class MeshRange:
    """A run of entries in the render data that share one mesh."""

    mesh_uuid: int
    start_idx: int
    count: int


@dataclass
class MeshRenderData:
    """Materials and transform slot of one drawn mesh; holds its own references."""

    material_vec: list[AssetRef[MaterialAsset]]
    transform_buffer_idx: int

    def __post_init__(self) -> None:
        self.material_vec = [ref.copy() for ref in self._as_list(self.material_vec)]

    @staticmethod
    def _as_list(refs: Iterable[AssetRef[MaterialAsset]]) -> list[AssetRef[MaterialAsset]]:
        return list(refs)

    def _release(self) -> None:
        for ref in self.material_vec:
            ref.release()
        self.material_vec = []


@dataclass
class SceneSnapshotData:
    mesh_ranges: list[MeshRange] = field(default_factory=list)
    # Grouped so that the entries of each mesh are contiguous
    static_mesh_data: list[MeshRenderData] = field(default_factory=list)

    def reset(self) -> None:
        """Empty the snapshot, dropping its material references."""
        for data in self.static_mesh_data:
            data._release()
        self.mesh_ranges.clear()
        self.static_mesh_data.clear()