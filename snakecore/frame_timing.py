"""Per-frame timing: frame count, frame time step and total elapsed time."""
from __future__ import annotations

import time
from collections.abc import Callable
from typing import Optional


class FrameTiming:
    """Tracks frame timing in milliseconds, measured at microsecond resolution.

    ``clock`` returns seconds from a monotonic source.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock or time.monotonic
        now = self._clock()
        self._start = now
        self._last_frame_time = now
        self._current_frame_time = now
        self._frame = 0
        self._step = 0.0
        self._total = 0.0

    @staticmethod
    def _millis(seconds: float) -> float:
        return int(round(seconds * 1_000_000, 6)) / 1000.0

    def update(self) -> None:
        """Mark the start of a new frame."""
        self._frame += 1
        self._last_frame_time = self._current_frame_time
        self._current_frame_time = self._clock()
        self._step = self._millis(self._current_frame_time - self._last_frame_time)
        self._total = self._millis(self._current_frame_time - self._start)

    def time_step(self) -> float:
        """Milliseconds between the last two updates."""
        return self._step

    def total_elapsed_time(self) -> float:
        """Milliseconds since this timer was created, as of the last update."""
        return self._total

    def frame_count(self) -> int:
        return self._frame