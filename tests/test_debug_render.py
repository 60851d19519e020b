from snakecore.debug_render import DebugRenderQueue, Line, Sphere


def test_queue_line_keeps_order_and_fields():
    queue = DebugRenderQueue()
    queue.queue_line((0.0, 0.0, 0.0), (1.0, 2.0, 3.0), (1.0, 0.0, 0.0, 1.0))
    queue.queue_line((4.0, 4.0, 4.0), (5.0, 5.0, 5.0), (0.0, 1.0, 0.0, 1.0))
    assert queue.lines == [
        Line((1.0, 0.0, 0.0, 1.0), (0.0, 0.0, 0.0), (1.0, 2.0, 3.0)),
        Line((0.0, 1.0, 0.0, 1.0), (4.0, 4.0, 4.0), (5.0, 5.0, 5.0)),
    ]


def test_clear_empties_queue():
    queue = DebugRenderQueue()
    queue.queue_line((0.0, 0.0, 0.0), (1.0, 1.0, 1.0), (1.0, 1.0, 1.0, 1.0))
    queue.spheres.append(Sphere((1.0, 1.0, 1.0, 1.0), (0.0, 0.0, 0.0), 2.0))
    queue.clear()
    assert queue.lines == []
    assert queue.spheres == []


def test_sphere_fields():
    sphere = Sphere((0.5, 0.5, 0.5, 1.0), (1.0, 2.0, 3.0), 4.0)
    assert sphere.r == 4.0
    assert sphere.pos == (1.0, 2.0, 3.0)