"""High-level API for loading, saving and processing HPDEC images.

Provides user-friendly functions that hide the ECS registry:

    >>> from hpdec_ecs.api import load_image, process
    >>> report = process("ref.hpdec", "in.hpdec", "out.hpdec")
    >>> report.identical, report.different
    (4091, 5)
"""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel

from hpdec_ecs.components.image import BlurRGB, CopyRGB, RefRGB
from hpdec_ecs.config import Settings, load_settings
from hpdec_ecs.core import codec
from hpdec_ecs.core.buffer import PixelBuffer
from hpdec_ecs.core.world import World
from hpdec_ecs.errors import ShapeMismatchError, WriteError
from hpdec_ecs.systems.blur import BoxBlur3x3
from hpdec_ecs.systems.compare import PixelDiff
from hpdec_ecs.systems.duplicate import Duplicate, PerturbRed

logger = logging.getLogger(__name__)


class ProcessReport(BaseModel):
    """Outcome of ``process``.

    Attributes:
        identical: Pixels equal between the reference and the modified copy,
            None when their dimensions differ
        different: Pixels that differ between them
        saved: Whether the blurred image reached output_path
        output_path: Destination of the blurred image
        modified_path: Destination of the modified copy
    """

    identical: int | None
    different: int | None
    saved: bool
    output_path: str
    modified_path: str


def load_image(
    path: str | os.PathLike[str],
    settings: Settings | None = None,
) -> PixelBuffer:
    """Decode the HPDEC file at path.

    Args:
        path: File to read
        settings: Provides the pixel limit (defaults if None)

    Raises:
        ReadError: If the file cannot be opened
        FormatError: If the HPDEC tag is missing
        MetadataError: If the dimensions are invalid
        TruncatedDataError: If pixel data is missing or invalid
    """
    settings = settings or Settings()
    return codec.load(path, max_pixels=settings.limits.max_pixels)


def save_image(buffer: PixelBuffer, path: str | os.PathLike[str]) -> None:
    """Encode buffer into the file at path.

    Raises:
        WriteError: If the file cannot be opened or written
    """
    codec.save(buffer, path)


def process(
    reference_path: str | os.PathLike[str],
    input_path: str | os.PathLike[str],
    output_path: str | os.PathLike[str],
    settings: Settings | None = None,
    config_path: str | None = None,
) -> ProcessReport:
    """Run the reference pipeline on three files.

    Steps:
      1. Load the reference and input images
      2. Duplicate the input and shift the red channel of its first pixels
      3. Save the modified copy to settings.process.modified_path
      4. Compare the reference with the modified copy
      5. Blur the input
      6. Save the blurred image to output_path

    Failures in steps 1, 2, 3 and 5 propagate. A ShapeMismatchError in
    step 4 is logged and leaves the counts as None, and a WriteError in
    step 6 is logged and reported through ``ProcessReport.saved``.

    Args:
        reference_path: Reference image file
        input_path: Image to modify and blur
        output_path: Destination of the blurred image
        settings: Pipeline settings (loaded from config if None)
        config_path: Path to hpdec.toml (auto-detected if None)

    Returns:
        ProcessReport with comparison counts and save status

    Raises:
        HpdecError: Any load, allocation or step 3 write failure
    """
    if settings is None:
        settings = load_settings(config_path)

    world = World()

    try:
        reference = load_image(reference_path, settings)
        entity = world.spawn_image(load_image(input_path, settings), path=os.fspath(input_path))
        world.add_component(entity, RefRGB(buf=reference, path=os.fspath(reference_path)))

        modified = (
            world.pipe(entity)
            .to(Duplicate())
            .to(PerturbRed(count=settings.process.perturb_count, delta=settings.process.red_delta))
            .out(CopyRGB)
        )

        modified_path = settings.process.modified_path
        save_image(modified.buf, modified_path)
        logger.info("Saved modified image to %s", modified_path)

        try:
            world.pipe(entity).to(PixelDiff(src_component=RefRGB, other_component=CopyRGB)).execute()
        except ShapeMismatchError as e:
            logger.error("Comparison skipped: %s", e)

        blurred = (
            world.pipe(entity)
            .to(BoxBlur3x3(stride=settings.blur.sample_stride))
            .out(BlurRGB)
        )

        saved = True
        try:
            save_image(blurred.buf, output_path)
            logger.info("Saved blurred image to %s", output_path)
        except WriteError as e:
            logger.error("Saving image to %s failed: %s", output_path, e)
            saved = False

        return ProcessReport(
            identical=world.metadata[entity].get("identical"),
            different=world.metadata[entity].get("different"),
            saved=saved,
            output_path=os.fspath(output_path),
            modified_path=modified_path,
        )

    finally:
        # Release every buffer held by the world
        world.clear()
