"""Image components: RGB, RefRGB, CopyRGB, BlurRGB."""

from pydantic import BaseModel, Field

from hpdec_ecs.core.buffer import PixelBuffer


class Component(BaseModel):
    """Base class for all ECS components.

    Components are data containers using Pydantic for validation and type safety.
    Pixel data is held in a PixelBuffer owned by the component.
    """

    model_config = {"arbitrary_types_allowed": True}


class RGB(Component):
    """Input image as decoded from disk.

    Attributes:
        buf: Pixel data
        path: File the image was loaded from, if any
    """

    buf: PixelBuffer
    path: str | None = None


class RefRGB(Component):
    """Reference image that other images are compared against.

    Attributes:
        buf: Pixel data
        path: File the image was loaded from, if any
    """

    buf: PixelBuffer
    path: str | None = None


class CopyRGB(Component):
    """Independent duplicate of the RGB component, free to modify.

    Attributes:
        buf: Pixel data
        modified: Number of pixels changed since the copy was made
    """

    buf: PixelBuffer
    modified: int = Field(default=0, ge=0)


class BlurRGB(Component):
    """Output of the 3x3 box blur.

    Attributes:
        buf: Blurred pixel data, same dimensions as the source
    """

    buf: PixelBuffer
