"""3x3 box blur.

Every output pixel is the truncated integer mean of the 3x3 neighbourhood
around it. Neighbours outside the image are read through the edge-clamped
sampler, so border pixels are replicated.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

import numpy as np

from hpdec_ecs.components.image import RGB, BlurRGB
from hpdec_ecs.core.buffer import CHANNEL_MAX, Pixel, PixelBuffer
from hpdec_ecs.core.sampler import sample_grid
from hpdec_ecs.core.system import System
from hpdec_ecs.errors import AllocationError

if TYPE_CHECKING:
    from hpdec_ecs.core.world import World

logger = logging.getLogger(__name__)

KERNEL_OFFSETS = (-1, 0, 1)
KERNEL_SIZE = len(KERNEL_OFFSETS) ** 2

DEFAULT_STRIDE = 10

SampleHook = Callable[[int, int, Pixel, Pixel], None]


def log_sample(x: int, y: int, before: Pixel, after: Pixel) -> None:
    """Log one pixel before and after blurring at DEBUG level."""
    logger.debug(
        "Pixel[%d, %d]: Before: %d %d %d -> After: %d %d %d",
        x,
        y,
        before.red,
        before.green,
        before.blue,
        after.red,
        after.green,
        after.blue,
    )


def box_blur(
    source: PixelBuffer,
    on_sample: Optional[SampleHook] = None,
    stride: int = DEFAULT_STRIDE,
) -> PixelBuffer:
    """Blur source with a 3x3 box filter.

    Args:
        source: Image to blur, left unchanged
        on_sample: Called as ``on_sample(x, y, before, after)`` for every
            pixel whose x and y are both multiples of stride, once the
            output is complete
        stride: Spacing of the pixels passed to on_sample

    Returns:
        New buffer with the dimensions of source

    Raises:
        AllocationError: If the output buffer cannot be allocated
    """
    if stride < 1:
        raise ValueError(f"stride must be positive, got {stride}")

    blurred = PixelBuffer(width=source.width, height=source.height, max_pixels=len(source))

    try:
        ys, xs = np.mgrid[0 : source.height, 0 : source.width]
        # 9 * 255 fits in uint16
        sums = np.zeros((source.height, source.width, 3), dtype=np.uint16)
        for dy in KERNEL_OFFSETS:
            for dx in KERNEL_OFFSETS:
                sums += sample_grid(source, xs + dx, ys + dy)

        blurred.view()[:] = np.clip(sums // KERNEL_SIZE, 0, CHANNEL_MAX).astype(np.uint8)
    except MemoryError as e:
        raise AllocationError(
            f"Could not allocate working memory to blur {source.width}x{source.height} image"
        ) from e

    if on_sample is not None:
        for y in range(0, source.height, stride):
            for x in range(0, source.width, stride):
                on_sample(x, y, source.get(x, y), blurred.get(x, y))

    return blurred


class BoxBlur3x3(System):
    """3x3 box blur system.

    Reads the RGB component and attaches the result as BlurRGB.
    """

    def __init__(
        self,
        stride: int = DEFAULT_STRIDE,
        on_sample: Optional[SampleHook] = log_sample,
    ):
        """Initialize blur system.

        Args:
            stride: Spacing of the diagnostic samples
            on_sample: Diagnostic hook, None to disable
        """
        if stride < 1:
            raise ValueError(f"stride must be positive, got {stride}")
        self.stride = stride
        self.on_sample = on_sample

    def required_components(self) -> list[type]:
        return [RGB]

    def produced_components(self) -> list[type]:
        return [BlurRGB]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            rgb = world.get_component(eid, RGB)
            blurred = box_blur(rgb.buf, on_sample=self.on_sample, stride=self.stride)
            world.add_component(eid, BlurRGB(buf=blurred))
            logger.info("Blurred %dx%d image (entity %d)", blurred.width, blurred.height, eid)

    def __repr__(self) -> str:
        return f"BoxBlur3x3(stride={self.stride})"
