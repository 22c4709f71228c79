import pytest

from lsystems.errors import ConfigError, DegenerateGeometryError
from lsystems.fitting import (
    compute_bounds,
    fit_line_segments,
    layout_grid,
    map_line_segments,
)
from lsystems.turtle import LineSegment


def _flatten(segments: list[LineSegment]) -> list[float]:
    return [c for seg in segments for point in seg for c in point]


class TestComputeBounds:
    def test_basic_bounds(self) -> None:
        segments = [
            LineSegment((0.0, 5.0), (10.0, -2.0)),
            LineSegment((3.0, 8.0), (7.0, 1.0)),
        ]
        assert compute_bounds(segments) == (0.0, -2.0, 10.0, 8.0)

    def test_empty_raises(self) -> None:
        with pytest.raises(DegenerateGeometryError):
            compute_bounds([])


class TestFitLineSegments:
    def setup_method(self) -> None:
        self.segments = [
            LineSegment((10.0, 20.0), (30.0, 20.0)),
            LineSegment((30.0, 20.0), (30.0, 30.0)),
        ]

    def test_translate_and_normalize(self) -> None:
        fitted = fit_line_segments(600, 600, self.segments)
        assert _flatten(fitted) == pytest.approx(
            [0.0, 0.0, 1.0, 0.0, 1.0, 0.0, 1.0, 0.5]
        )

    def test_padding(self) -> None:
        fitted = fit_line_segments(200, 100, self.segments, padding=10)
        # figure size is max(200, 100) - 2 * 10
        assert _flatten(fitted) == pytest.approx(
            [10.0, 10.0, 190.0, 10.0, 190.0, 10.0, 190.0, 100.0]
        )

    def test_idempotent_on_unit_figure(self) -> None:
        unit = [
            LineSegment((0.0, 0.0), (1.0, 0.5)),
            LineSegment((0.25, 1.0), (0.0, 0.0)),
        ]
        fitted = fit_line_segments(1, 1, unit, padding=0)
        assert _flatten(fitted) == pytest.approx(_flatten(unit))

    def test_preserves_order(self) -> None:
        fitted = fit_line_segments(10, 10, list(reversed(self.segments)))
        assert fitted[0].end == pytest.approx((1.0, 0.5))

    def test_zero_extent(self) -> None:
        point = [LineSegment((5.0, 5.0), (5.0, 5.0))]
        with pytest.raises(DegenerateGeometryError):
            fit_line_segments(100, 100, point)

    def test_no_segments(self) -> None:
        with pytest.raises(DegenerateGeometryError):
            fit_line_segments(100, 100, [])

    def test_collinear_figure(self) -> None:
        line = [LineSegment((0.0, 3.0), (4.0, 3.0))]
        fitted = fit_line_segments(100, 100, line)
        assert _flatten(fitted) == pytest.approx([0.0, 0.0, 1.0, 0.0])

    def test_invalid_canvas(self) -> None:
        with pytest.raises(ConfigError):
            fit_line_segments(0, 100, self.segments)
        with pytest.raises(ConfigError):
            fit_line_segments(100, -1, self.segments)
        with pytest.raises(ConfigError):
            fit_line_segments(100, 100, self.segments, padding=-1)
        with pytest.raises(ConfigError):
            fit_line_segments(100, 100, self.segments, padding=50)


class TestLayoutGrid:
    def test_cells(self) -> None:
        square = [LineSegment((0.0, 0.0), (2.0, 2.0))]
        cells = layout_grid(2, 1, 200, 100, [square, square])
        assert _flatten(cells[0]) == pytest.approx([0.0, 0.0, 100.0, 100.0])
        assert _flatten(cells[1]) == pytest.approx([100.0, 0.0, 200.0, 100.0])

    def test_cells_with_padding(self) -> None:
        square = [LineSegment((0.0, 0.0), (2.0, 2.0))]
        cells = layout_grid(1, 2, 100, 200, [square, square], padding=10)
        assert _flatten(cells[1]) == pytest.approx([10.0, 110.0, 90.0, 190.0])

    def test_too_many_figures(self) -> None:
        square = [LineSegment((0.0, 0.0), (1.0, 1.0))]
        with pytest.raises(ConfigError):
            layout_grid(1, 1, 100, 100, [square, square])

    def test_invalid_grid(self) -> None:
        with pytest.raises(ConfigError):
            layout_grid(0, 1, 100, 100, [])


def test_map_line_segments() -> None:
    mapped = map_line_segments(
        lambda x: x * 2, lambda y: y + 1, [LineSegment((1.0, 1.0), (2.0, 3.0))]
    )
    assert mapped == [LineSegment((2.0, 2.0), (4.0, 4.0))]
