"""fitting.py

Normalize turtle output so a figure fits a target viewport, and lay out
several figures on one canvas.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Sequence

from .errors import ConfigError, DegenerateGeometryError, _require
from .turtle import LineSegment

logger = logging.getLogger(__name__)


def _is_number(x: object) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def compute_bounds(
    segments: Iterable[LineSegment],
) -> tuple[float, float, float, float]:
    """Return (min_x, min_y, max_x, max_y) over every segment endpoint."""
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    empty = True
    for seg in segments:
        empty = False
        for x, y in seg:
            if x < min_x:
                min_x = x
            if x > max_x:
                max_x = x
            if y < min_y:
                min_y = y
            if y > max_y:
                max_y = y
    if empty:
        raise DegenerateGeometryError("No drawable geometry produced.")
    return (min_x, min_y, max_x, max_y)


def map_line_segments(
    f_x: Callable[[float], float],
    f_y: Callable[[float], float],
    segments: Iterable[LineSegment],
) -> list[LineSegment]:
    """Apply f_x to every x coordinate and f_y to every y coordinate."""
    return [
        LineSegment((f_x(sx), f_y(sy)), (f_x(ex), f_y(ey)))
        for (sx, sy), (ex, ey) in segments
    ]


def fit_line_segments(
    width: float,
    height: float,
    segments: Sequence[LineSegment],
    *,
    padding: float = 0,
) -> list[LineSegment]:
    """Move and scale segments so the figure fits the screen.

    The figure is translated so its bounding box starts at the origin, then
    scaled uniformly so its longer side spans [0, 1]. With a positive
    padding, the unit figure is stretched to max(width, height) minus the
    padding on both sides and offset by the padding.
    """
    _require(_is_number(width) and width > 0, f"width must be > 0, got {width!r}")
    _require(
        _is_number(height) and height > 0, f"height must be > 0, got {height!r}"
    )
    _require(
        _is_number(padding) and padding >= 0, f"padding must be >= 0, got {padding!r}"
    )
    figure_size = max(width, height) - 2 * padding
    _require(
        figure_size > 0,
        f"padding {padding} leaves no room on a {width}x{height} canvas",
    )

    min_x, min_y, max_x, max_y = compute_bounds(segments)
    max_extent = max(max_x - min_x, max_y - min_y)
    if max_extent == 0:
        raise DegenerateGeometryError(
            f"figure has zero extent (every point at ({min_x}, {min_y}))"
        )
    logger.debug(
        "fitting bounds (%g, %g)-(%g, %g) into %gx%g, padding %g",
        min_x,
        min_y,
        max_x,
        max_y,
        width,
        height,
        padding,
    )

    scaled = map_line_segments(
        lambda x: (x - min_x) / max_extent,
        lambda y: (y - min_y) / max_extent,
        segments,
    )
    if padding == 0:
        return scaled

    def pad(v: float) -> float:
        return padding + v * figure_size

    return map_line_segments(pad, pad, scaled)


# -------------------------
# Grid layout
# -------------------------


def layout_grid(
    columns: int,
    rows: int,
    width: float,
    height: float,
    figures: Sequence[Sequence[LineSegment]],
    *,
    padding: float = 0,
) -> list[list[LineSegment]]:
    """Fit each figure into its own cell of a columns x rows grid.

    Cells are filled row by row from the top left. Returns one list of
    segments per figure, in canvas coordinates.
    """
    for label, v in (("columns", columns), ("rows", rows)):
        _require(
            isinstance(v, int) and not isinstance(v, bool) and v > 0,
            f"{label} must be a positive integer, got {v!r}",
        )
    if len(figures) > columns * rows:
        raise ConfigError(
            f"{len(figures)} figures do not fit a {columns}x{rows} grid"
        )
    _require(_is_number(width) and width > 0, f"width must be > 0, got {width!r}")
    _require(
        _is_number(height) and height > 0, f"height must be > 0, got {height!r}"
    )

    cell_w = width / columns
    cell_h = height / rows
    side = min(cell_w, cell_h)
    out: list[list[LineSegment]] = []
    for i, segments in enumerate(figures):
        col, row = i % columns, i // columns
        fitted = fit_line_segments(side, side, segments, padding=padding)
        if padding == 0:
            # unit-sized figures are scaled up to the cell
            fitted = map_line_segments(
                lambda x: x * side, lambda y: y * side, fitted
            )
        ox, oy = col * cell_w, row * cell_h
        out.append(
            map_line_segments(lambda x: x + ox, lambda y: y + oy, fitted)
        )
    return out
