"""Public API for banded, multi-threaded Mandelbrot rendering."""

from .bands import Band, check_disjoint, default_workers, plan_bands, render_image, rows_per_band
from .errors import ImageWriteError, MandelError, ParseError, PreconditionViolation, RenderError
from .geometry import ComplexPoint, ImageBounds, Viewport, pixel_grid, pixel_to_point
from .parsing import parse_bounds, parse_complex, parse_pair, parse_point, parse_viewport
from .renderer import DEFAULT_LIMIT, escape_time, escape_time_grid, intensity, render_band

__all__ = [
    "Band",
    "ComplexPoint",
    "DEFAULT_LIMIT",
    "ImageBounds",
    "ImageWriteError",
    "MandelError",
    "ParseError",
    "PreconditionViolation",
    "RenderError",
    "Viewport",
    "check_disjoint",
    "default_workers",
    "escape_time",
    "escape_time_grid",
    "intensity",
    "parse_bounds",
    "parse_complex",
    "parse_pair",
    "parse_point",
    "parse_viewport",
    "pixel_grid",
    "pixel_to_point",
    "plan_bands",
    "render_band",
    "render_image",
    "rows_per_band",
]
