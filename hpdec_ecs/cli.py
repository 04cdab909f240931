"""Command-line entry point: hpdec-process REFERENCE INPUT OUTPUT.

Loads both images, saves a modified copy of INPUT, reports how it compares
with REFERENCE, then writes a blurred INPUT to OUTPUT. Exits with 0 on
success, 1 on any failure and 2 on usage errors.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from hpdec_ecs.api import process
from hpdec_ecs.config import load_settings
from hpdec_ecs.errors import HpdecError

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hpdec-process",
        description="Compare, duplicate and blur HPDEC images",
    )
    parser.add_argument("reference", help="Reference image (HPDEC)")
    parser.add_argument("input", help="Image to modify and blur (HPDEC)")
    parser.add_argument("output", help="Destination of the blurred image")
    parser.add_argument(
        "--modified",
        default=None,
        help="Destination of the modified copy (default from config)",
    )
    parser.add_argument(
        "--stride",
        type=int,
        default=None,
        help="Spacing of the logged blur samples (default from config)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to hpdec.toml (auto-detected if omitted)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output, including blur samples",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    if args.modified is not None:
        settings.process.modified_path = args.modified
    if args.stride is not None:
        if args.stride < 1:
            logger.error("--stride must be positive, got %d", args.stride)
            return 1
        settings.blur.sample_stride = args.stride

    try:
        report = process(args.reference, args.input, args.output, settings=settings)
    except HpdecError as e:
        logger.error("%s", e)
        return 1

    if report.identical is not None:
        print(f"Identical pixels: {report.identical}")
        print(f"Different pixels: {report.different}")

    if not report.saved:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
