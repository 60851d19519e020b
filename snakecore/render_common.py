"""Sub-pixel jitter for temporal anti-aliasing and upscaling."""
from __future__ import annotations


def halton(index: int, base: int) -> float:
    """Element ``index`` of the Halton low-discrepancy sequence in ``base``."""
    if base < 2:
        raise ValueError(f"Halton base must be at least 2, got {base}")
    f = 1.0
    r = 0.0
    while index > 0:
        f *= base
        r += (index % base) / f
        index //= base
    return r


def frame_jitter(
    frame_idx: int, internal_width: int, output_width: int
) -> tuple[float, float]:
    """Jitter offset in pixels, in [-0.5, 0.5), for the given frame.

    The number of phases grows with the square of the upscaling ratio.
    """
    if internal_width == 0 or output_width == 0:
        return (0.0, 0.0)

    scale_ratio = output_width / internal_width
    phases = int(8 * scale_ratio * scale_ratio + 0.5)
    current = frame_idx % phases + 1
    return (halton(current, 2) - 0.5, halton(current, 3) - 0.5)