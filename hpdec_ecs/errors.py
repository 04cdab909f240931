"""Error taxonomy for HPDEC decoding, processing and encoding.

Every error raised by the package derives from HpdecError. Each concrete
error also subclasses the builtin exception closest to its meaning so that
callers catching ValueError, MemoryError or OSError keep working.
"""


class HpdecError(Exception):
    """Base class for all HPDEC errors."""


class FormatError(HpdecError, ValueError):
    """Stream does not start with the HPDEC tag."""


class MetadataError(HpdecError, ValueError):
    """Image dimensions are missing, malformed or cannot be allocated."""


class TruncatedDataError(HpdecError, ValueError):
    """Pixel records are missing or hold an invalid channel value."""


class AllocationError(HpdecError, MemoryError):
    """A pixel buffer could not be allocated."""


class ShapeMismatchError(HpdecError, ValueError):
    """Two buffers that must share dimensions do not."""


class WriteError(HpdecError, OSError):
    """Output stream or file could not be written."""


class ReadError(HpdecError, OSError):
    """Input file could not be opened."""
