"""CPU-side transform storage buffers with delayed previous-frame copies."""
from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any, ClassVar, Optional

from snakecore.components import Component, ComponentEvent, ComponentEventType
from snakecore.events import EventListener, EventManager, FrameStartEvent
from snakecore.scene import System

MAX_FRAMES_IN_FLIGHT = 2
MAX_TRANSFORMS = 4096
_MATRIX = struct.Struct("<16f")
MATRIX_SIZE = _MATRIX.size


def erase_bits(frames_in_flight: int = MAX_FRAMES_IN_FLIGHT) -> int:
    """Bitset value at which an update entry has reached every buffer."""
    if not 0 <= frames_in_flight <= 4:
        raise ValueError(f"frames in flight must be between 0 and 4: {frames_in_flight}")
    bits = 0
    for i in range(frames_in_flight):
        bits |= (1 << i) | (1 << (i + 4))
    return bits


def _flatten(matrix: Any) -> tuple[float, ...]:
    rows = list(matrix)
    if len(rows) == 4:
        values = [float(v) for row in rows for v in row]
    else:
        values = [float(v) for v in rows]
    if len(values) != 16:
        raise ValueError(f"a transform needs 16 values, got {len(values)}")
    return tuple(values)


class TransformBufferIdxComponent(Component):
    """Slot of the entity's transform in the transform buffers."""

    def __init__(self, entity: Any, idx: int) -> None:
        super().__init__(entity)
        self.idx = idx


@dataclass
class TransformUpdateEntry:
    """A transform still to be written.

    Bits 0-3 of ``update_bitset`` mark the current buffers written, bits 4-7
    the previous-frame buffers.
    """

    transform_buf_idx: int
    transform: tuple[float, ...]
    frame_idx_transform_updated: int
    update_bitset: int = 0


class TransformBufferSystem(System):
    """Keeps one transform buffer per frame in flight, plus last frame's copy.

    Listens for ``ComponentEvent[component_type]``; that component must have
    ``entity`` and ``matrix`` (16 floats, flat or as four rows). ``frame_info``
    supplies ``current_fif`` and ``current_frame_idx``.
    """

    component_type: ClassVar[type] = Component

    def __init__(self, events: EventManager, frame_info: Any) -> None:
        super().__init__()
        self.events = events
        self.frame_info = frame_info
        self._pending: list[TransformUpdateEntry] = []
        self._next_index = 0
        self._storage: list[bytearray] = []
        self._previous: list[bytearray] = []
        self._transform_listener: Optional[EventListener] = None
        self._frame_listener: Optional[EventListener] = None

    def on_system_add(self) -> None:
        self._transform_listener = EventListener(self._on_transform_event)
        self.events.register_listener(
            ComponentEvent[self.component_type], self._transform_listener
        )
        self._frame_listener = EventListener(
            lambda _event: self.update_transform_buffer(self.frame_info.current_fif)
        )
        self.events.register_listener(FrameStartEvent, self._frame_listener)
        size = MAX_TRANSFORMS * MATRIX_SIZE
        self._storage = [bytearray(size) for _ in range(MAX_FRAMES_IN_FLIGHT)]
        self._previous = [bytearray(size) for _ in range(MAX_FRAMES_IN_FLIGHT)]

    def on_system_remove(self) -> None:
        for listener in (self._transform_listener, self._frame_listener):
            if listener is not None:
                listener.close()

    def _queue(self, idx: int, matrix: Any) -> None:
        self._pending.append(
            TransformUpdateEntry(idx, _flatten(matrix), self.frame_info.current_frame_idx)
        )

    def _on_transform_event(self, event: ComponentEvent) -> None:
        component = event.component
        entity = component.entity
        if event.event_type == ComponentEventType.UPDATED:
            idx_comp = entity.get_component(TransformBufferIdxComponent)
            if idx_comp is not None:
                self._queue(idx_comp.idx, component.matrix)
        elif event.event_type == ComponentEventType.ADDED:
            idx = self._next_index
            self._next_index += 1
            entity.add_component(TransformBufferIdxComponent, idx)
            self._queue(idx, component.matrix)
        elif event.event_type == ComponentEventType.REMOVED:
            idx_comp = entity.get_component(TransformBufferIdxComponent)
            if idx_comp is None:
                return
            self._pending = [
                e for e in self._pending if e.transform_buf_idx != idx_comp.idx
            ]

    @staticmethod
    def _write(buffer: bytearray, idx: int, values: tuple[float, ...]) -> None:
        offset = idx * MATRIX_SIZE
        if idx < 0 or offset + MATRIX_SIZE > len(buffer):
            raise IndexError(f"transform index {idx} outside buffer of {MAX_TRANSFORMS}")
        _MATRIX.pack_into(buffer, offset, *values)

    def update_transform_buffer(self, fif: int) -> None:
        """Write pending transforms into the buffers of frame-in-flight ``fif``."""
        if not 0 <= fif < MAX_FRAMES_IN_FLIGHT:
            raise IndexError(f"frame in flight index out of range: {fif}")
        current_frame = self.frame_info.current_frame_idx
        done = erase_bits()
        remaining = []
        for entry in self._pending:
            if not entry.update_bitset & (1 << fif):
                self._write(self._storage[fif], entry.transform_buf_idx, entry.transform)
                entry.update_bitset |= 1 << fif
            if (
                not entry.update_bitset & (1 << (fif + 4))
                and entry.frame_idx_transform_updated < current_frame - 1
            ):
                self._write(self._previous[fif], entry.transform_buf_idx, entry.transform)
                entry.update_bitset |= 1 << (fif + 4)
            if entry.update_bitset != done:
                remaining.append(entry)
        self._pending = remaining

    def storage_buffer(self, idx: int) -> memoryview:
        return memoryview(self._storage[idx]).toreadonly()

    def previous_frame_buffer(self, idx: int) -> memoryview:
        """Last frame's transforms for frame-in-flight ``idx``."""
        return memoryview(self._previous[idx]).toreadonly()

    def pending_updates(self) -> tuple[TransformUpdateEntry, ...]:
        return tuple(self._pending)