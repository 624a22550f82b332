"""Parsing of the textual image size and corner arguments."""

from __future__ import annotations

import math
from typing import Callable, Optional, TypeVar

from .errors import ParseError
from .geometry import ComplexPoint, ImageBounds, Viewport

T = TypeVar("T", int, float)


def _parse_number(text: str, kind: Callable[[str], T]) -> Optional[T]:
    # int() and float() tolerate padding and digit separators; we do not
    if not text or text != text.strip() or "_" in text:
        return None
    try:
        return kind(text)
    except ValueError:
        return None


def parse_pair(text: str, separator: str, kind: Callable[[str], T]) -> Optional[tuple[T, T]]:
    """Parse ``"<left><separator><right>"`` into a pair of ``kind`` values.

    The string is split at the first separator. ``None`` is returned when the
    separator is missing or either half does not parse.

    >>> parse_pair("10,20", ",", int)
    (10, 20)
    >>> parse_pair("10,", ",", int) is None
    True
    """

    index = text.find(separator)
    if index < 0:
        return None
    left = _parse_number(text[:index], kind)
    right = _parse_number(text[index + 1:], kind)
    if left is None or right is None:
        return None
    return left, right


def parse_complex(text: str) -> Optional[ComplexPoint]:
    """Parse ``"<re>,<im>"``."""

    pair = parse_pair(text, ",", float)
    if pair is None:
        return None
    return ComplexPoint(*pair)


def parse_bounds(text: str) -> ImageBounds:
    pair = parse_pair(text, "x", int)
    if pair is None:
        raise ParseError(f"error parsing image dimensions {text!r}: expected WIDTHxHEIGHT")
    width, height = pair
    if width <= 0 or height <= 0:
        raise ParseError(f"error parsing image dimensions {text!r}: width and height must be positive")
    return ImageBounds(width, height)


def parse_point(text: str, what: str) -> ComplexPoint:
    point = parse_complex(text)
    if point is None:
        raise ParseError(f"error parsing {what} corner point {text!r}: expected RE,IM")
    if not (math.isfinite(point.re) and math.isfinite(point.im)):
        raise ParseError(f"error parsing {what} corner point {text!r}: coordinates must be finite")
    return point


def parse_viewport(upper_left: str, lower_right: str) -> Viewport:
    ul = parse_point(upper_left, "upper left")
    lr = parse_point(lower_right, "lower right")
    try:
        return Viewport(ul, lr)
    except ValueError as exc:
        raise ParseError(f"invalid viewport: {exc}") from exc
