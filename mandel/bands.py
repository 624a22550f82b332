"""Split an image into horizontal bands and render them concurrently."""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .errors import PreconditionViolation, RenderError
from .geometry import ImageBounds, Viewport, pixel_to_point
from .renderer import DEFAULT_LIMIT, render_band

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Band:
    """Contiguous rows of the image handed to a single rendering task."""

    index: int
    top: int
    bounds: ImageBounds
    viewport: Viewport

    @property
    def rows(self) -> range:
        return range(self.top, self.top + self.bounds.height)

    def view(self, image: np.ndarray) -> np.ndarray:
        """Slice this band out of a ``(height, width)`` image without copying."""

        return image[self.top:self.top + self.bounds.height]


def default_workers() -> int:
    return os.cpu_count() or 1


def rows_per_band(height: int, workers: int) -> int:
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    return -(-height // workers)


def plan_bands(bounds: ImageBounds, viewport: Viewport, workers: int) -> list[Band]:
    """Partition the rows of ``bounds`` into at most ``workers`` bands.

    Every band but the last has the same height. Each band's viewport is
    obtained by mapping its pixel corners through the full image, so the
    bands tile ``viewport`` without seams.
    """

    step = rows_per_band(bounds.height, workers)
    bands = []
    for index, top in enumerate(range(0, bounds.height, step)):
        height = min(step, bounds.height - top)
        band_viewport = Viewport(
            pixel_to_point(bounds, (0, top), viewport),
            pixel_to_point(bounds, (bounds.width, top + height), viewport),
        )
        bands.append(Band(index, top, ImageBounds(bounds.width, height), band_viewport))
    return bands


def check_disjoint(bands: Sequence[Band], height: int) -> None:
    """Make sure ``bands`` cover rows ``0..height`` exactly once."""

    owner: list[Optional[int]] = [None] * height
    for band in bands:
        for row in band.rows:
            if not 0 <= row < height:
                raise PreconditionViolation(f"band {band.index} row {row} is outside the image")
            if owner[row] is not None:
                raise PreconditionViolation(f"row {row} claimed by bands {owner[row]} and {band.index}")
            owner[row] = band.index
    missing = [row for row, index in enumerate(owner) if index is None]
    if missing:
        raise PreconditionViolation(f"rows {missing[0]}..{missing[-1]} are not covered by any band")


def _render_one(band: Band, pixels: np.ndarray, limit: int) -> None:
    start = time.perf_counter()
    render_band(pixels, band.bounds, band.viewport, limit)
    logger.debug("band %d (rows %d-%d) rendered in %.3fs", band.index, band.top,
                 band.top + band.bounds.height - 1, time.perf_counter() - start)


def render_image(
    bounds: ImageBounds,
    viewport: Viewport,
    workers: Optional[int] = None,
    limit: int = DEFAULT_LIMIT,
) -> np.ndarray:
    """Render ``viewport`` into a flat, row-major uint8 buffer.

    Bands are rendered on a thread pool; numpy drops the GIL inside its
    kernels so they proceed in parallel. If any band fails the remaining
    bands are cancelled, the pool is joined and ``RenderError`` is raised
    for the first failing band.
    """

    if workers is None:
        workers = default_workers()

    pixels = np.zeros(bounds.size, dtype=np.uint8)
    image = pixels.reshape((bounds.height, bounds.width))

    bands = plan_bands(bounds, viewport, workers)
    check_disjoint(bands, bounds.height)
    logger.info("rendering %dx%d in %d band(s) of up to %d rows",
                bounds.width, bounds.height, len(bands), bands[0].bounds.height)

    start = time.perf_counter()
    with ThreadPoolExecutor(max_workers=len(bands), thread_name_prefix="band") as executor:
        futures: list[Future] = [
            executor.submit(_render_one, band, band.view(image), limit) for band in bands
        ]
        _, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for future in pending:
            future.cancel()

    for band, future in zip(bands, futures):
        if future.cancelled():
            continue
        error = future.exception()
        if error is not None:
            raise RenderError(band.index, error) from error

    logger.info("render finished in %.3fs", time.perf_counter() - start)
    return pixels
