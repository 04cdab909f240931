"""Edge-clamped pixel sampling.

Out-of-range coordinates are replaced by the nearest valid one on each axis
independently (edge replication), so a convolution window hanging over the
border of an image reads the border pixels again instead of wrapping around
or reading zeros.
"""

from __future__ import annotations

import numpy as np

from hpdec_ecs.core.buffer import Pixel, PixelBuffer


def clamp(value: int, upper: int) -> int:
    """Clamp value into [0, upper]."""
    if value < 0:
        return 0
    if value > upper:
        return upper
    return value


def sample(buffer: PixelBuffer, x: int, y: int) -> Pixel:
    """Return the pixel nearest to (x, y) inside the buffer.

    Args:
        buffer: Image to sample
        x: Column, may lie anywhere on the integer line
        y: Row, may lie anywhere on the integer line

    Returns:
        Pixel at the clamped coordinates
    """
    return buffer.get(clamp(x, buffer.width - 1), clamp(y, buffer.height - 1))


def sample_grid(buffer: PixelBuffer, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Vectorised ``sample`` over integer coordinate arrays.

    Args:
        buffer: Image to sample
        xs: Column coordinates
        ys: Row coordinates, broadcastable against xs

    Returns:
        uint8 array of shape ``broadcast(xs, ys).shape + (3,)``
    """
    cx = np.clip(xs, 0, buffer.width - 1)
    cy = np.clip(ys, 0, buffer.height - 1)
    return buffer.view()[cy, cx]
