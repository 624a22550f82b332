"""Render a region of the Mandelbrot set to a grayscale image file.

    python render.py mandel.png 1000x750 -1.20,0.35 -1,0.20
"""

from __future__ import annotations

import logging
import os
import sys
import time
from argparse import ArgumentParser, ArgumentTypeError
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import PIL.Image

from mandel import (
    ImageBounds,
    ImageWriteError,
    ParseError,
    PreconditionViolation,
    RenderError,
    default_workers,
    parse_bounds,
    parse_viewport,
    render_image,
)

logger = logging.getLogger("mandel.render")

USAGE = "Usage: {prog} FILE PIXELS UPPERLEFT LOWERRIGHT"
EXAMPLE = "Example: {prog} mandel.png 1000x750 -1.20,0.35 -1,0.20"


def _workers(value: str) -> int:
    try:
        workers = int(value)
    except ValueError:
        raise ArgumentTypeError(f"invalid worker count {value!r}") from None
    if workers < 1:
        raise ArgumentTypeError("worker count must be at least 1")
    return workers


def build_parser(prog: Optional[str] = None) -> ArgumentParser:
    # FILE PIXELS UPPERLEFT LOWERRIGHT are collected from the leftover
    # arguments: corners such as -1.20,0.35 would otherwise be taken for options.
    parser = ArgumentParser(
        prog=prog,
        usage="%(prog)s FILE PIXELS UPPERLEFT LOWERRIGHT [options]",
        description="Plot the Mandelbrot set using several threads.",
    )

    parser.add_argument('--workers', type=_workers, dest='workers', metavar='WORKERS', default=None,
                        help='number of bands rendered in parallel (default: available CPUs)')

    parser.add_argument('--format', type=str, dest='format', metavar='FORMAT', default=None,
                        help='file format for the image, any extension supported by Pillow. '
                             'Default: taken from FILE, else "png".')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging of the band plan and timings.')

    return parser


def print_usage(prog: str) -> None:
    print(USAGE.format(prog=prog), file=sys.stderr)
    print(EXAMPLE.format(prog=prog), file=sys.stderr)


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def resolve_format(path: Path, explicit: Optional[str]) -> str:
    image_format = (explicit or path.suffix or "png").lower().lstrip(".")
    return image_format or "png"


def write_image(path: Path, pixels: np.ndarray, bounds: ImageBounds, image_format: Optional[str] = None) -> None:
    """Encode ``pixels`` as an 8-bit grayscale image at ``path``."""

    if pixels.size != bounds.size:
        raise PreconditionViolation(
            f"buffer holds {pixels.size} pixels, expected {bounds.width}x{bounds.height}"
        )

    image = PIL.Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8).reshape((bounds.height, bounds.width)))
    pil_format = _pil_format_name(resolve_format(path, image_format))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        image.save(str(path), format=pil_format)
    except (OSError, ValueError, KeyError) as exc:
        raise ImageWriteError(f"error writing {pil_format} file {path}: {exc}") from exc


def _split_positionals(extras: list[str]) -> list[str]:
    positionals = list(extras)
    if "--" in positionals:
        positionals.remove("--")
    return positionals


def main(argv: Optional[Sequence[str]] = None) -> int:
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "render.py"
    parser = build_parser(prog)
    opt, extras = parser.parse_known_args(sys.argv[1:] if argv is None else list(argv))
    positionals = _split_positionals(extras)

    if len(positionals) != 4 or any(arg.startswith("--") for arg in positionals):
        print_usage(prog)
        return 1

    logging.basicConfig(format="%(levelname)s: %(message)s")
    logging.getLogger("mandel").setLevel(logging.INFO if opt.verbose else logging.WARNING)

    file, pixels_arg, upper_left, lower_right = positionals
    workers = opt.workers if opt.workers is not None else default_workers()

    try:
        bounds = parse_bounds(pixels_arg)
        viewport = parse_viewport(upper_left, lower_right)

        start = time.perf_counter()
        pixels = render_image(bounds, viewport, workers=workers)
        logger.info("rendered %dx%d with %d worker(s) in %.3fs",
                    bounds.width, bounds.height, workers, time.perf_counter() - start)

        output_path = Path(file).expanduser()
        write_image(output_path, pixels, bounds, opt.format)
        logger.info("wrote %s", output_path)
    except (ParseError, RenderError, ImageWriteError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
