"""Pixel-wise comparison of two images.

Implements exact identical/different pixel counts. The PixelDiff system
stores results in World metadata rather than creating components.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from pydantic import BaseModel, Field

from hpdec_ecs.components.image import CopyRGB, RefRGB
from hpdec_ecs.core.buffer import PixelBuffer
from hpdec_ecs.core.system import System
from hpdec_ecs.errors import ShapeMismatchError

if TYPE_CHECKING:
    from hpdec_ecs.core.world import World

logger = logging.getLogger(__name__)


class Comparison(BaseModel):
    """Result of comparing two same-shaped images.

    Attributes:
        identical: Pixels whose three channels all match
        different: Pixels with at least one differing channel
    """

    identical: int = Field(ge=0)
    different: int = Field(ge=0)

    @property
    def total(self) -> int:
        return self.identical + self.different


def compare(a: PixelBuffer, b: PixelBuffer) -> Comparison:
    """Count identical and different pixels between a and b.

    Raises:
        ShapeMismatchError: If the images differ in width or height
    """
    if a.shape != b.shape:
        raise ShapeMismatchError(
            f"Images must have the same dimensions for comparison: "
            f"{a.width}x{a.height} vs {b.width}x{b.height}"
        )

    identical = int(np.count_nonzero(np.all(a.flat == b.flat, axis=1)))
    return Comparison(identical=identical, different=len(a) - identical)


class PixelDiff(System):
    """Compare two image components on each entity.

    Stores results in world.metadata[eid]['identical'] and
    world.metadata[eid]['different'].
    """

    def __init__(
        self,
        src_component: type = RefRGB,
        other_component: type = CopyRGB,
    ):
        """Initialize comparison system.

        Args:
            src_component: First image component type (default: RefRGB)
            other_component: Second image component type (default: CopyRGB)
        """
        self.src_component = src_component
        self.other_component = other_component

    def required_components(self) -> list[type]:
        return [self.src_component, self.other_component]

    def produced_components(self) -> list[type]:
        """Return produced component types (none - stores in metadata)."""
        return []

    def run(self, world: World, eids: list[int]) -> None:
        for eid in eids:
            src = world.get_component(eid, self.src_component)
            other = world.get_component(eid, self.other_component)

            result = compare(src.buf, other.buf)

            world.metadata[eid]["identical"] = result.identical
            world.metadata[eid]["different"] = result.different
            logger.info("Identical pixels: %d", result.identical)
            logger.info("Different pixels: %d", result.different)

    def __repr__(self) -> str:
        return (
            f"PixelDiff({self.src_component.__name__}, "
            f"{self.other_component.__name__})"
        )
