"""Image duplication and the red-channel perturbation applied to copies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hpdec_ecs.components.image import RGB, CopyRGB
from hpdec_ecs.core.buffer import PixelBuffer
from hpdec_ecs.core.system import System

if TYPE_CHECKING:
    from hpdec_ecs.core.world import World

logger = logging.getLogger(__name__)


def duplicate(source: PixelBuffer) -> PixelBuffer:
    """Deep copy of source.

    The copy owns its own storage, so writes to either buffer never reach
    the other.

    Raises:
        AllocationError: If the copy cannot be allocated. source is untouched.
    """
    copy = PixelBuffer(width=source.width, height=source.height, max_pixels=len(source))
    copy.view()[:] = source.view()
    return copy


def perturb_red(buf: PixelBuffer, count: int = 5, delta: int = 50) -> int:
    """Shift the red channel of the first count pixels in place.

    Each red value becomes ``(red + delta) % 255``.

    Returns:
        Number of pixels modified (count, or fewer for small images)
    """
    n = min(count, len(buf))
    red = buf.flat[:n, 0].astype(int)
    buf.flat[:n, 0] = (red + delta) % 255
    return n


class Duplicate(System):
    """Copy the RGB component into a new CopyRGB component."""

    def required_components(self) -> list[type]:
        return [RGB]

    def produced_components(self) -> list[type]:
        return [CopyRGB]

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            rgb = world.get_component(eid, RGB)
            world.add_component(eid, CopyRGB(buf=duplicate(rgb.buf)))


class PerturbRed(System):
    """Simulate an edit by shifting the red channel of the first pixels of CopyRGB."""

    def __init__(self, count: int = 5, delta: int = 50):
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        self.count = count
        self.delta = delta

    def required_components(self) -> list[type]:
        return [CopyRGB]

    def produced_components(self) -> list[type]:
        return []

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            copy = world.get_component(eid, CopyRGB)
            n = perturb_red(copy.buf, count=self.count, delta=self.delta)
            copy.modified += n
            logger.debug("Perturbed red channel of %d pixels (entity %d)", n, eid)

    def __repr__(self) -> str:
        return f"PerturbRed(count={self.count}, delta={self.delta})"
