"""Exceptions raised while parsing, rendering and writing images."""

from __future__ import annotations


class MandelError(Exception):
    """Base class for every error raised by this package."""


class ParseError(MandelError, ValueError):
    """A command-line value could not be parsed."""


class PreconditionViolation(MandelError, AssertionError):
    """Internal contract broken by the caller; a programming error."""


class RenderError(MandelError, RuntimeError):
    """A band failed, so the whole render was abandoned."""

    def __init__(self, band: int, cause: BaseException):
        super().__init__(f"band {band} failed: {cause}")
        self.band = band


class ImageWriteError(MandelError, OSError):
    """The output image could not be created or encoded."""
