"""svg.py

Draw line segments as an SVG document, one <line> per segment in list order.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable

from .config import Style
from .errors import _require
from .turtle import LineSegment

logger = logging.getLogger(__name__)


def _ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)) or ".", exist_ok=True)


def _fmt(x: float, precision: int) -> str:
    # Normalise -0.0 so it never produces "-0" in SVG output.
    if not x:
        x = 0.0
    s = f"{x:.{precision}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    if s == "-0":
        s = "0"
    return s or "0"


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def render_svg(
    segments: Iterable[LineSegment],
    *,
    width: float,
    height: float,
    style: Style | None = None,
    precision: int = 3,
    title: str | None = None,
) -> str:
    """Return an SVG document drawing every segment on a width x height canvas."""
    _require(width > 0 and height > 0, "width and height must be > 0")
    _require(0 <= precision <= 10, "precision must be between 0 and 10")
    if style is None:
        style = Style()

    w = _fmt(width, precision)
    h = _fmt(height, precision)
    lines: list[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append(
        '<svg xmlns="http://www.w3.org/2000/svg" version="1.1" '
        f'width="{w}" height="{h}" viewBox="0 0 {w} {h}">'
    )

    if title:
        lines.append(f"  <title>{_escape(title)}</title>")

    if style.background and style.background.lower() != "none":
        lines.append(
            f'  <rect x="0" y="0" width="{w}" height="{h}" '
            f'fill="{style.background}" />'
        )

    lines.append(
        f'  <g stroke="{style.stroke}" '
        f'stroke-width="{_fmt(style.stroke_width, precision)}" '
        f'stroke-linecap="{style.linecap}" fill="none">'
    )
    count = 0
    for (x1, y1), (x2, y2) in segments:
        lines.append(
            f'    <line x1="{_fmt(x1, precision)}" y1="{_fmt(y1, precision)}" '
            f'x2="{_fmt(x2, precision)}" y2="{_fmt(y2, precision)}" />'
        )
        count += 1
    lines.append("  </g>")
    lines.append("</svg>")

    logger.debug("rendered %d segments", count)
    return "\n".join(lines) + "\n"


def write_svg(
    segments: Iterable[LineSegment],
    out_path: str,
    *,
    width: float,
    height: float,
    style: Style | None = None,
    precision: int = 3,
    title: str | None = None,
) -> None:
    content = render_svg(
        segments,
        width=width,
        height=height,
        style=style,
        precision=precision,
        title=title,
    )
    _ensure_parent_dir(out_path)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(content)
    logger.info("wrote %s", out_path)
