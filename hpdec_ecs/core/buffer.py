"""Pixel and PixelBuffer: the image data model.

A PixelBuffer owns one contiguous uint8 allocation holding ``height * width``
RGB triples in row-major order. The buffer exposes NumPy views onto that
storage so filters can work on whole arrays, while ``index()`` stays the
only place where ``(x, y)`` is turned into a linear offset.

Example:
    >>> buf = PixelBuffer(width=4, height=2)
    >>> buf.set(1, 0, Pixel(255, 0, 0))
    >>> buf.get(1, 0)
    Pixel(red=255, green=0, blue=0)
    >>> buf.flat[buf.index(1, 0)]
    array([255,   0,   0], dtype=uint8)
"""

from __future__ import annotations

import sys
from dataclasses import dataclass

import numpy as np

from hpdec_ecs.errors import AllocationError

CHANNELS = 3
CHANNEL_MAX = 255

# 256 Mpixel, roughly 768 MB of channel data
DEFAULT_MAX_PIXELS = 1 << 28


@dataclass(frozen=True)
class Pixel:
    """One RGB sample.

    Attributes:
        red: Red channel (0-255)
        green: Green channel (0-255)
        blue: Blue channel (0-255)
    """

    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        """Validate channel ranges."""
        for name in ("red", "green", "blue"):
            value = getattr(self, name)
            if not 0 <= value <= CHANNEL_MAX:
                raise ValueError(f"{name} must be in [0, {CHANNEL_MAX}], got {value}")

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)


def checked_nbytes(width: int, height: int, max_pixels: int = DEFAULT_MAX_PIXELS) -> int:
    """Compute the storage size of a width x height RGB image.

    Args:
        width: Number of pixels in a row
        height: Number of pixels in a column
        max_pixels: Largest pixel count the caller is willing to allocate

    Returns:
        Size of the channel data in bytes

    Raises:
        ValueError: If either dimension is not positive
        AllocationError: If the pixel count exceeds max_pixels or the
            address space
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"dimensions must be positive, got {width}x{height}")

    count = width * height
    if count > max_pixels:
        raise AllocationError(
            f"Image of {width}x{height} ({count} pixels) exceeds limit of {max_pixels} pixels"
        )

    nbytes = count * CHANNELS
    if nbytes > sys.maxsize:
        raise AllocationError(
            f"Image of {width}x{height} needs {nbytes} bytes, more than the address space"
        )
    return nbytes


class PixelBuffer:
    """Width x height grid of RGB pixels stored row-major.

    The storage is allocated once in the constructor and never shared with
    another buffer. ``view()`` and ``flat`` are zero-copy windows onto it.

    Attributes:
        width: Number of pixels in a row
        height: Number of pixels in a column

    Example:
        >>> buf = PixelBuffer(width=640, height=480)
        >>> buf.view().shape
        (480, 640, 3)
        >>> len(buf)
        307200
    """

    def __init__(
        self,
        width: int,
        height: int,
        max_pixels: int = DEFAULT_MAX_PIXELS,
    ) -> None:
        """Allocate a zero-filled buffer.

        Args:
            width: Number of pixels in a row (positive)
            height: Number of pixels in a column (positive)
            max_pixels: Allocation limit in pixels

        Raises:
            ValueError: If a dimension is not positive
            AllocationError: If the storage cannot be allocated
        """
        nbytes = checked_nbytes(width, height, max_pixels)

        try:
            self._storage = np.zeros(nbytes, dtype=np.uint8)
        except MemoryError as e:
            raise AllocationError(
                f"Could not allocate {nbytes} bytes for {width}x{height} image"
            ) from e

        self._width = width
        self._height = height

    @classmethod
    def from_array(
        cls,
        array: np.ndarray,
        max_pixels: int = DEFAULT_MAX_PIXELS,
    ) -> PixelBuffer:
        """Copy an (H, W, 3) integer array into a new buffer.

        Raises:
            ValueError: If the shape, dtype or channel values are invalid
        """
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise ValueError(f"Expected array with shape (H, W, 3), got {array.shape}")
        if not np.issubdtype(array.dtype, np.integer):
            raise ValueError(f"Expected integer dtype, got {array.dtype}")
        if array.size and (array.min() < 0 or array.max() > CHANNEL_MAX):
            raise ValueError(f"Channel values must be in [0, {CHANNEL_MAX}]")

        height, width = int(array.shape[0]), int(array.shape[1])
        buf = cls(width=width, height=height, max_pixels=max_pixels)
        buf.view()[:] = array
        return buf

    @property
    def width(self) -> int:
        """Number of pixels in a row."""
        return self._width

    @property
    def height(self) -> int:
        """Number of pixels in a column."""
        return self._height

    @property
    def shape(self) -> tuple[int, int]:
        """(width, height) pair."""
        return (self._width, self._height)

    @property
    def flat(self) -> np.ndarray:
        """Row-major (width * height, 3) view of the pixels."""
        return self._storage.reshape(self._width * self._height, CHANNELS)

    def view(self) -> np.ndarray:
        """Get an (height, width, 3) NumPy view of the pixels (zero-copy)."""
        return self._storage.reshape(self._height, self._width, CHANNELS)

    def index(self, x: int, y: int) -> int:
        """Linear row-major index of pixel (x, y).

        Raises:
            IndexError: If (x, y) lies outside the image
        """
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(
                f"Pixel ({x}, {y}) out of bounds for {self._width}x{self._height} image"
            )
        return y * self._width + x

    def get(self, x: int, y: int) -> Pixel:
        red, green, blue = self.flat[self.index(x, y)].tolist()
        return Pixel(red, green, blue)

    def set(self, x: int, y: int, pixel: Pixel) -> None:
        self.flat[self.index(x, y)] = pixel.as_tuple()

    def __len__(self) -> int:
        return self._width * self._height

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.shape == other.shape and bool(
            np.array_equal(self._storage, other._storage)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self._width}, height={self._height})"
