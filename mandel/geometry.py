"""Mapping between image pixels and points of the complex plane."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class ImageBounds:
    """Size of a raster in pixels."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"image bounds must be positive, got {self.width}x{self.height}")

    @property
    def size(self) -> int:
        return self.width * self.height


@dataclass(frozen=True)
class ComplexPoint:
    re: float
    im: float

    @classmethod
    def from_complex(cls, value: complex) -> ComplexPoint:
        return cls(float(value.real), float(value.imag))

    def to_complex(self) -> complex:
        return complex(self.re, self.im)


@dataclass(frozen=True)
class Viewport:
    """Rectangle of the complex plane shown by an image.

    Image-space orientation: ``re`` grows to the right and ``im`` shrinks
    downward, so the upper-left corner has the smaller real part and the
    larger imaginary part.
    """

    upper_left: ComplexPoint
    lower_right: ComplexPoint

    def __post_init__(self) -> None:
        ul, lr = self.upper_left, self.lower_right
        if not (ul.re < lr.re and ul.im > lr.im):
            raise ValueError(
                f"upper left ({ul.re}, {ul.im}) must be left of and above lower right ({lr.re}, {lr.im})"
            )

    @property
    def width(self) -> float:
        return self.lower_right.re - self.upper_left.re

    @property
    def height(self) -> float:
        return self.upper_left.im - self.lower_right.im


def pixel_to_point(bounds: ImageBounds, pixel: tuple[int, int], viewport: Viewport) -> ComplexPoint:
    """Return the point of ``viewport`` under ``pixel`` (column, row).

    Columns ``0..bounds.width`` and rows ``0..bounds.height`` are accepted,
    the far edges mapping onto the lower-right corner.
    """

    col, row = pixel
    width, height = viewport.width, viewport.height
    ul = viewport.upper_left
    return ComplexPoint(
        re=ul.re + col * width / bounds.width,
        im=ul.im - row * height / bounds.height,
    )


def pixel_grid(bounds: ImageBounds, viewport: Viewport) -> tuple[np.ndarray, np.ndarray]:
    """Vectorised ``pixel_to_point`` over every column and row of ``bounds``.

    Returns the real parts as a ``(1, width)`` array and the imaginary parts
    as a ``(height, 1)`` array, ready to broadcast against each other.
    """

    width, height = viewport.width, viewport.height
    ul = viewport.upper_left
    cols = np.arange(bounds.width, dtype=np.float64).reshape((1, bounds.width))
    rows = np.arange(bounds.height, dtype=np.float64).reshape((bounds.height, 1))
    re = np.float64(ul.re) + cols * np.float64(width) / np.float64(bounds.width)
    im = np.float64(ul.im) - rows * np.float64(height) / np.float64(bounds.height)
    return re, im
