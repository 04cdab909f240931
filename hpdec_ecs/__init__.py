"""HPDEC image toolkit with ECS architecture.

This package decodes and encodes the text-based HPDEC raster format and
provides a small set of image operations:
- Edge-clamped 3x3 box blur
- Pixel-wise comparison of two images
- Independent deep copies of images

Quick Start:
    >>> from hpdec_ecs import load, save, box_blur
    >>>
    >>> img = load("input.hpdec")
    >>> save(box_blur(img), "blurred.hpdec")

For more control, use the ECS pipeline API:
    >>> from hpdec_ecs.core.world import World
    >>> from hpdec_ecs.components.image import BlurRGB
    >>> from hpdec_ecs.systems.blur import BoxBlur3x3
    >>>
    >>> world = World()
    >>> entity = world.spawn_image(img)
    >>> blurred = world.pipe(entity).to(BoxBlur3x3()).out(BlurRGB)
"""

__version__ = "0.1.0"

from hpdec_ecs.core.buffer import Pixel, PixelBuffer
from hpdec_ecs.core.codec import decode, dumps, encode, load, loads, save
from hpdec_ecs.core.sampler import sample
from hpdec_ecs.errors import (
    AllocationError,
    FormatError,
    HpdecError,
    MetadataError,
    ReadError,
    ShapeMismatchError,
    TruncatedDataError,
    WriteError,
)
from hpdec_ecs.systems.blur import box_blur
from hpdec_ecs.systems.compare import Comparison, compare
from hpdec_ecs.systems.duplicate import duplicate

__all__ = [
    "__version__",
    "Pixel",
    "PixelBuffer",
    "decode",
    "encode",
    "load",
    "save",
    "loads",
    "dumps",
    "sample",
    "box_blur",
    "compare",
    "Comparison",
    "duplicate",
    "HpdecError",
    "FormatError",
    "MetadataError",
    "TruncatedDataError",
    "AllocationError",
    "ShapeMismatchError",
    "WriteError",
    "ReadError",
]
