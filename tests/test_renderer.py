import numpy as np
import pytest

from mandel import (
    ComplexPoint,
    ImageBounds,
    PreconditionViolation,
    Viewport,
    escape_time,
    escape_time_grid,
    intensity,
    pixel_grid,
    pixel_to_point,
    render_band,
)

# far outside the set: every pixel escapes on the first iteration
OUTSIDE = Viewport(ComplexPoint(2.5, 3.0), ComplexPoint(3.5, 2.5))


@pytest.mark.parametrize("limit", [1, 10, 255, 1000])
def test_origin_is_in_the_set(limit):
    assert escape_time(ComplexPoint(0.0, 0.0), limit) is None


@pytest.mark.parametrize("c", [(2.5, 0.0), (0.0, -3.0), (-1.5, 1.5), (1e200, 1e200)])
def test_far_points_escape_immediately(c):
    assert escape_time(ComplexPoint(*c), 255) == 0


@pytest.mark.parametrize(
    "c,expected",
    [
        ((1.0, 0.0), 2),  # 1, 2, 5
        ((0.5, 0.0), 4),
        ((-1.0, 0.0), None),  # period-two cycle
        ((-2.0, 0.0), None),  # stays on |z| == 2
        ((0.25, 0.0), None),
    ],
)
def test_escape_time_known_points(c, expected):
    assert escape_time(ComplexPoint(*c), 255) == expected


def test_escape_time_is_below_limit():
    c = ComplexPoint(1.0, 0.0)
    assert escape_time(c, 2) is None
    assert escape_time(c, 3) == 2
    for limit in range(1, 20):
        result = escape_time(ComplexPoint(0.3, 0.5), limit)
        assert result is None or result < limit


def test_grid_matches_scalar_evaluation():
    bounds = ImageBounds(20, 15)
    viewport = Viewport(ComplexPoint(-2.0, 1.2), ComplexPoint(0.6, -1.2))
    re, im = pixel_grid(bounds, viewport)
    counts = escape_time_grid(re, im, 64)
    assert counts.shape == (15, 20)
    for row in range(bounds.height):
        for col in range(bounds.width):
            expected = escape_time(pixel_to_point(bounds, (col, row), viewport), 64)
            assert counts[row, col] == (-1 if expected is None else expected)


def test_intensity():
    assert intensity(None) == 0
    assert intensity(0) == 255
    assert intensity(254) == 1


def test_render_band_rejects_length_mismatch():
    band = np.zeros(10, dtype=np.uint8)
    with pytest.raises(PreconditionViolation):
        render_band(band, ImageBounds(4, 3), OUTSIDE)


def test_precondition_violation_is_an_assertion():
    with pytest.raises(AssertionError):
        render_band(np.zeros((2, 2), dtype=np.uint8), ImageBounds(3, 3), OUTSIDE)


def test_render_band_writes_only_inside_its_view():
    image = np.zeros((10, 8), dtype=np.uint8)
    render_band(image[2:5], ImageBounds(8, 3), OUTSIDE)
    assert (image[2:5] == 255).all()
    assert (image[:2] == 0).all()
    assert (image[5:] == 0).all()


def test_render_band_flat_view():
    image = np.zeros(12, dtype=np.uint8)
    render_band(image, ImageBounds(4, 3), OUTSIDE)
    assert (image == 255).all()


def test_render_band_pixels_follow_escape_time():
    bounds = ImageBounds(30, 20)
    viewport = Viewport(ComplexPoint(-2.0, 1.2), ComplexPoint(0.6, -1.2))
    band = np.zeros((20, 30), dtype=np.uint8)
    render_band(band, bounds, viewport)
    for col, row in [(0, 0), (15, 10), (22, 10), (29, 19), (5, 17)]:
        count = escape_time(pixel_to_point(bounds, (col, row), viewport), 255)
        assert band[row, col] == intensity(count)
