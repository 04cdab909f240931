"""HPDEC text codec.

File format:
  HPDEC
  <height> <width>
  <r> <g> <b>        repeated height * width times, row-major

Tokens are separated by arbitrary whitespace; line boundaries carry no
meaning when decoding. Note the header stores height before width.
"""

from __future__ import annotations

import logging
import os
import re
from typing import IO, AnyStr, Iterator

import numpy as np

from hpdec_ecs.core.buffer import CHANNEL_MAX, CHANNELS, DEFAULT_MAX_PIXELS, PixelBuffer
from hpdec_ecs.errors import (
    AllocationError,
    FormatError,
    MetadataError,
    ReadError,
    TruncatedDataError,
    WriteError,
)

logger = logging.getLogger(__name__)

# File format constants
MAGIC = "HPDEC"
ENCODING = "ascii"

_DIMENSION = re.compile(r"[+-]?[0-9]+")
_CHANNEL = re.compile(r"\+?[0-9]+")

# C-locale isspace(): other Unicode separators are part of a token
_SPACE = " \t\n\r\v\f"
_SEPARATOR = re.compile(r"[ \t\n\r\v\f]+")


def _tokenize(text: str) -> list[str]:
    stripped = text.strip(_SPACE)
    if not stripped:
        return []
    return _SEPARATOR.split(stripped)


def _parse_dimension(token: str | None, name: str) -> int:
    if token is None:
        raise MetadataError(f"Missing {name} in image header")
    if not _DIMENSION.fullmatch(token):
        raise MetadataError(f"Invalid {name} {token!r} in image header")
    try:
        value = int(token)
    except ValueError as e:
        # digit strings beyond the interpreter's int conversion limit
        raise MetadataError(f"Invalid {name} {token[:16]!r}... in image header") from e
    if value <= 0:
        raise MetadataError(f"{name.capitalize()} must be positive, got {value}")
    return value


def loads(text: str | bytes, max_pixels: int = DEFAULT_MAX_PIXELS) -> PixelBuffer:
    """Decode an HPDEC document held in memory.

    Args:
        text: Whole document as str or bytes
        max_pixels: Largest image accepted, in pixels

    Returns:
        Decoded PixelBuffer

    Raises:
        FormatError: If the document does not start with the HPDEC tag
        MetadataError: If the dimensions are missing, malformed or too large
        TruncatedDataError: If pixel records are missing or invalid
        AllocationError: If the document is too large to hold while decoding
    """
    try:
        if isinstance(text, bytes):
            # latin-1 maps every byte, bad bytes then fail token validation
            text = text.decode("latin-1")
        tokens = _tokenize(text)
    except MemoryError as e:
        raise AllocationError(f"Cannot tokenize {len(text)}-byte document") from e

    if not tokens or tokens[0] != MAGIC:
        found = tokens[0] if tokens else ""
        raise FormatError(f"Invalid file format: expected {MAGIC!r}, got {found!r}")

    height = _parse_dimension(tokens[1] if len(tokens) > 1 else None, "height")
    width = _parse_dimension(tokens[2] if len(tokens) > 2 else None, "width")

    try:
        buf = PixelBuffer(width=width, height=height, max_pixels=max_pixels)
    except AllocationError as e:
        raise MetadataError(f"Cannot allocate {width}x{height} image: {e}") from e

    count = width * height
    needed = count * CHANNELS
    available = len(tokens) - 3
    if available < needed:
        raise TruncatedDataError(
            f"Unexpected end of pixel data: expected {count} pixels, "
            f"got {max(available, 0) // CHANNELS}"
        )

    try:
        values = np.fromiter(_channel_values(tokens, 3, needed), dtype=np.uint8, count=needed)
    except MemoryError as e:
        raise AllocationError(f"Cannot convert pixel data of {width}x{height} image") from e

    buf.flat[:] = values.reshape(count, CHANNELS)
    return buf


def _channel_values(tokens: list[str], start: int, needed: int) -> Iterator[int]:
    for i in range(needed):
        token = tokens[start + i]
        if not _CHANNEL.fullmatch(token):
            raise TruncatedDataError(
                f"Invalid channel value {token!r} in pixel {i // CHANNELS}"
            )
        digits = token.lstrip("+").lstrip("0") or "0"
        if len(digits) > 3 or int(digits) > CHANNEL_MAX:
            raise TruncatedDataError(
                f"Channel value {token} in pixel {i // CHANNELS} exceeds {CHANNEL_MAX}"
            )
        yield int(digits)


def decode(stream: IO[AnyStr], max_pixels: int = DEFAULT_MAX_PIXELS) -> PixelBuffer:
    """Decode an HPDEC image from a text or binary stream.

    Reads the stream to its end. See ``loads`` for the errors raised.
    """
    try:
        text = stream.read()
    except MemoryError as e:
        raise AllocationError("Cannot read HPDEC stream into memory") from e
    return loads(text, max_pixels=max_pixels)


def dumps(buffer: PixelBuffer) -> str:
    """Encode a buffer to an HPDEC document string."""
    lines = [MAGIC, f"{buffer.height} {buffer.width}"]
    lines.extend(f"{r} {g} {b}" for r, g, b in buffer.flat.tolist())
    return "\n".join(lines) + "\n"


def encode(buffer: PixelBuffer, stream: IO[str]) -> None:
    """Write a buffer to a text stream in HPDEC format.

    Args:
        buffer: Image to encode
        stream: Writable text stream; a binary stream raises WriteError

    Raises:
        WriteError: If writing to the stream fails. Output written before
            the failure stays in the stream.
    """
    try:
        stream.write(f"{MAGIC}\n{buffer.height} {buffer.width}\n")
    except (OSError, ValueError, TypeError) as e:
        raise WriteError(f"Error writing header: {e}") from e

    try:
        stream.write("".join(f"{r} {g} {b}\n" for r, g, b in buffer.flat.tolist()))
        stream.flush()
    except (OSError, ValueError, TypeError) as e:
        raise WriteError(f"Error writing pixel data: {e}") from e


def load(path: str | os.PathLike[str], max_pixels: int = DEFAULT_MAX_PIXELS) -> PixelBuffer:
    """Decode the HPDEC file at path.

    Raises:
        ReadError: If the file cannot be opened
        FormatError, MetadataError, TruncatedDataError: See ``loads``
    """
    try:
        f = open(path, "rb")
    except OSError as e:
        raise ReadError(f"File {os.fspath(path)} could not be opened: {e}") from e

    with f:
        buf = decode(f, max_pixels=max_pixels)

    logger.debug("Loaded %dx%d image from %s", buf.width, buf.height, path)
    return buf


def save(buffer: PixelBuffer, path: str | os.PathLike[str]) -> None:
    """Encode a buffer into the file at path, replacing its contents.

    Missing parent directories are created.

    Raises:
        WriteError: If the file cannot be opened or written
    """
    try:
        parent = os.path.dirname(os.fspath(path))
        if parent:
            os.makedirs(parent, exist_ok=True)
        f = open(path, "w", encoding=ENCODING, newline="\n")
    except OSError as e:
        raise WriteError(f"File {os.fspath(path)} could not be opened for writing: {e}") from e

    with f:
        encode(buffer, f)

    logger.debug("Saved %dx%d image to %s", buffer.width, buffer.height, path)
