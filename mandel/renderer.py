"""Escape-time evaluation and rendering of a single band."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .errors import PreconditionViolation
from .geometry import ComplexPoint, ImageBounds, Viewport, pixel_grid

HORIZON_SQUARED = 4.0
DEFAULT_LIMIT = 255


def escape_time(c: ComplexPoint, limit: int) -> Optional[int]:
    """Count the iterations of ``z <- z**2 + c`` survived before ``|z| > 2``.

    Starting from ``z = 0`` the bound is checked after every update; the
    result is the 0-based index of the update that left the disk of radius
    2, so any ``|c| > 2`` gives 0. ``None`` means ``z`` stayed bounded for
    ``limit`` iterations and ``c`` is presumed to be in the set.
    """

    cr, ci = c.re, c.im
    zr = zi = 0.0
    for i in range(limit):
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        if zr * zr + zi * zi > HORIZON_SQUARED:
            return i
    return None


def escape_time_grid(re: np.ndarray, im: np.ndarray, limit: int) -> np.ndarray:
    """Element-wise ``escape_time`` over broadcast grids of real/imag parts.

    Points that never escape are reported as ``-1``.
    """

    cr, ci = np.broadcast_arrays(np.asarray(re, dtype=np.float64), np.asarray(im, dtype=np.float64))
    zr = np.zeros(cr.shape, dtype=np.float64)
    zi = np.zeros(cr.shape, dtype=np.float64)
    counts = np.full(cr.shape, -1, dtype=np.int64)
    active = np.ones(cr.shape, dtype=bool)

    # escaped points keep their first z outside the disk; only their
    # discarded updates, or that first step for a huge c, may overflow
    with np.errstate(over="ignore", invalid="ignore"):
        for i in range(limit):
            new_zr = zr * zr - zi * zi + cr
            new_zi = 2.0 * zr * zi + ci
            np.copyto(zr, new_zr, where=active)
            np.copyto(zi, new_zi, where=active)
            escaped = active & (zr * zr + zi * zi > HORIZON_SQUARED)
            counts[escaped] = i
            active &= ~escaped
            if not active.any():
                break

    return counts


def intensity(count: Optional[int]) -> int:
    """Grey level for an escape count: black inside the set, darker when slower."""

    if count is None:
        return 0
    return max(255 - count, 0)


def render_band(
    band: np.ndarray,
    bounds: ImageBounds,
    viewport: Viewport,
    limit: int = DEFAULT_LIMIT,
) -> None:
    """Fill ``band`` in place with the intensities of ``viewport``.

    ``band`` is a writable uint8 view holding exactly ``bounds.size`` pixels,
    either flat or shaped ``(height, width)``.
    """

    if band.size != bounds.size:
        raise PreconditionViolation(
            f"band holds {band.size} pixels but its bounds are {bounds.width}x{bounds.height}"
        )

    re, im = pixel_grid(bounds, viewport)
    counts = escape_time_grid(re, im, limit)
    pixels = np.where(counts < 0, 0, np.clip(255 - counts, 0, 255)).astype(np.uint8)
    band[...] = pixels.reshape(band.shape)
