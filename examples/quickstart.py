#!/usr/bin/env python3
"""Quickstart example using the high-level API.

This example demonstrates the simplest way to use the package:
- Generate a random image (or load one given on the command line)
- Save it as reference and input files
- Run the reference pipeline: modify a copy, compare, blur
- Print the comparison counts
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np

from hpdec_ecs.api import load_image, process, save_image
from hpdec_ecs.config import load_settings
from hpdec_ecs.core.buffer import PixelBuffer


def main() -> None:
    parser = argparse.ArgumentParser(description="Quickstart API example")
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Input HPDEC image (random image if omitted)",
    )
    parser.add_argument(
        "--workdir",
        type=Path,
        default=Path("examples/output"),
        help="Directory for generated files",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=64,
        help="Random image size if no input image is given",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to hpdec.toml (defaults apply if omitted)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)-8s %(message)s")

    if args.input is not None:
        image = load_image(args.input)
        print(f"Loaded image: {args.input} ({image.width}x{image.height})")
    else:
        print("No input image given; generating random image instead")
        image = PixelBuffer.from_array(
            np.random.randint(0, 256, (args.size, args.size, 3), dtype=np.uint8)
        )

    args.workdir.mkdir(parents=True, exist_ok=True)
    reference = args.workdir / "reference.hpdec"
    source = args.workdir / "input.hpdec"
    output = args.workdir / "blurred.hpdec"
    save_image(image, reference)
    save_image(image, source)

    settings = load_settings(args.config)
    settings.process.modified_path = str(args.workdir / "modified.hpdec")

    report = process(reference, source, output, settings=settings)

    print(f"Identical pixels: {report.identical}")
    print(f"Different pixels: {report.different}")
    print(f"Blurred image saved: {report.saved} ({report.output_path})")


if __name__ == "__main__":
    main()
