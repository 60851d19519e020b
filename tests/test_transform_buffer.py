import struct
from types import SimpleNamespace

import pytest

from snakecore.components import Component, ComponentEvent, ComponentEventType
from snakecore.events import EventManager, FrameStartEvent
from snakecore.scene import Scene
from snakecore.transform_buffer import (
    MATRIX_SIZE,
    TransformBufferIdxComponent,
    TransformBufferSystem,
    erase_bits,
)

MATRIX = tuple(float(i) for i in range(16))
OTHER = tuple(float(i * 2) for i in range(16))
ZEROS = tuple(0.0 for _ in range(16))


class Transform(Component):
    def __init__(self, entity, matrix=MATRIX):
        super().__init__(entity)
        self.matrix = matrix


class TransformSystem(TransformBufferSystem):
    component_type = Transform


def read(buffer, idx):
    return struct.unpack_from("<16f", buffer, idx * MATRIX_SIZE)


@pytest.fixture
def setup():
    events = EventManager()
    scene = Scene(events)
    frame = SimpleNamespace(current_fif=0, current_frame_idx=0)
    system = scene.add_system(TransformSystem, events, frame)
    return events, scene, frame, system


def test_erase_bits():
    assert erase_bits(2) == 0x33
    assert erase_bits(4) == 0xFF
    assert erase_bits(0) == 0
    with pytest.raises(ValueError):
        erase_bits(5)


def test_added_transform_gets_index(setup):
    _, scene, _, system = setup
    a = scene.create_entity()
    b = scene.create_entity()
    a.add_component(Transform)
    b.add_component(Transform, OTHER)
    assert a.get_component(TransformBufferIdxComponent).idx == 0
    assert b.get_component(TransformBufferIdxComponent).idx == 1
    assert [e.transform_buf_idx for e in system.pending_updates()] == [0, 1]


def test_update_writes_current_then_previous(setup):
    _, scene, frame, system = setup
    scene.create_entity().add_component(Transform)
    system.update_transform_buffer(0)
    assert read(system.storage_buffer(0), 0) == MATRIX
    assert read(system.previous_frame_buffer(0), 0) == ZEROS
    assert read(system.storage_buffer(1), 0) == ZEROS
    assert len(system.pending_updates()) == 1

    frame.current_frame_idx = 2
    system.update_transform_buffer(0)
    assert read(system.previous_frame_buffer(0), 0) == MATRIX
    system.update_transform_buffer(1)
    assert read(system.storage_buffer(1), 0) == MATRIX
    assert read(system.previous_frame_buffer(1), 0) == MATRIX
    assert system.pending_updates() == ()


def test_nested_matrix_accepted(setup):
    _, scene, _, system = setup
    rows = [MATRIX[i:i + 4] for i in range(0, 16, 4)]
    scene.create_entity().add_component(Transform, rows)
    system.update_transform_buffer(0)
    assert read(system.storage_buffer(0), 0) == MATRIX


def test_updated_event_queues_new_matrix(setup):
    events, scene, _, system = setup
    ent = scene.create_entity()
    comp = ent.add_component(Transform)
    comp.matrix = OTHER
    events.dispatch_event(ComponentEvent[Transform](comp, ComponentEventType.UPDATED))
    system.update_transform_buffer(0)
    assert read(system.storage_buffer(0), 0) == OTHER
    assert len(system.pending_updates()) == 2


def test_removed_transform_dropped_from_queue(setup):
    _, scene, _, system = setup
    keep = scene.create_entity()
    gone = scene.create_entity()
    keep.add_component(Transform)
    gone.add_component(Transform)
    gone.remove_component(Transform)
    assert [e.transform_buf_idx for e in system.pending_updates()] == [0]


def test_frame_start_updates_current_fif(setup):
    events, scene, frame, system = setup
    frame.current_fif = 1
    scene.create_entity().add_component(Transform)
    events.dispatch_event(FrameStartEvent())
    assert read(system.storage_buffer(1), 0) == MATRIX
    assert read(system.storage_buffer(0), 0) == ZEROS


def test_out_of_range_fif(setup):
    _, _, _, system = setup
    with pytest.raises(IndexError):
        system.update_transform_buffer(2)


def test_buffers_are_read_only(setup):
    _, _, _, system = setup
    with pytest.raises(TypeError):
        system.storage_buffer(0)[0] = 1


def test_removed_system_stops_listening(setup):
    _, scene, _, system = setup
    system.on_system_remove()
    ent = scene.create_entity()
    ent.add_component(Transform)
    assert system.pending_updates() == ()
    assert ent.get_component(TransformBufferIdxComponent) is None