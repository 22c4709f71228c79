"""examples.py

A small catalogue of classic figures.

Source for abop-fig1.24: http://algorithmicbotany.org/papers/abop/abop-ch1.pdf
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from .atoms import Atom, AtomLike, from_string
from .config import Style
from .fitting import fit_line_segments, layout_grid
from .productions import nth_step
from .turtle import (
    LineSegment,
    RuleTable,
    execute,
    forward,
    new_pen_state,
    pop_pos_and_angle,
    push_pos_and_angle,
    rotate,
    standard_rule_set,
)


@dataclass(frozen=True)
class Drawing:
    title: str
    segments: list[LineSegment]
    width: int = 600
    height: int = 600
    style: Style = field(default_factory=Style)


def execute_and_fit(
    state: Iterable[AtomLike],
    rules: RuleTable,
    *,
    width: int = 600,
    height: int = 600,
    initial_x: int = 300,
    initial_y: int = 300,
    facing: float = 0,
    fit: bool = True,
    padding: float = 100,
) -> list[LineSegment]:
    """Run state through rules from a fresh pen and optionally fit the result.

    initial_x and initial_y only matter when fit is False.
    """
    pen_state = new_pen_state(initial_x, initial_y, facing=facing)
    segments = list(execute(state, rules, pen_state).lines)
    if not fit:
        return segments
    return fit_line_segments(width, height, segments, padding=padding)


def fractal_binary_tree() -> Drawing:
    # integer atoms for the tree, literal atoms for the brackets
    lb, rb = Atom.literal("["), Atom.literal("]")
    state = nth_step({1: (1, 1), 0: (1, lb, 0, rb, 0)}, 0, 9)
    rules = {
        0: lambda s: forward(s, 0.2),
        1: lambda s: forward(s, 0.4),
        lb: lambda s: rotate(push_pos_and_angle(s), -45),
        rb: lambda s: rotate(pop_pos_and_angle(s), 45),
    }
    return Drawing(
        "Fractal binary tree", execute_and_fit(state, rules, padding=50)
    )


def fractal_plant() -> Drawing:
    width = height = 600
    state = nth_step({"X": "F+[[X]-X]-F[-FX]+X", "F": "FF"}, "X", 6)
    segments = execute_and_fit(
        state,
        standard_rule_set(10, 25),
        facing=-25,
        width=width,
        height=height,
        padding=50,
    )
    style = Style(stroke="forestgreen", stroke_width=1.3, background="honeydew")
    return Drawing("Fractal plant", segments, width, height, style)


def dragon_curve() -> Drawing:
    state = nth_step({"X": "X+YF+", "Y": "-FX-Y"}, from_string("FX"), 10)
    rules = {
        "F": lambda s: forward(s, 10),
        "-": lambda s: rotate(s, -90),
        "+": lambda s: rotate(s, 90),
    }
    segments = execute_and_fit(state, rules, height=400, padding=50)
    style = Style(stroke="white", stroke_width=2, background="skyblue")
    return Drawing("Dragon curve", segments, 600, 400, style)


def abop_fig_1_24() -> Drawing:
    """Six bracketed plants on a 3x2 grid."""
    width = height = 2000
    figures = [
        (nth_step({"F": "F[+F]F[-F]F"}, "F", 5), 25.7),
        (nth_step({"F": "F[+F]F[-F][F]"}, "F", 5), 20),
        (nth_step({"F": "FF-[-F+F+F]+[+F-F-F]"}, "F", 4), 22.5),
        (nth_step({"X": "F[+X]F[-X]+X", "F": "FF"}, "X", 7), 20),
        (nth_step({"X": "F[+X][-X]FX", "F": "FF"}, "X", 7), 25.7),
        (nth_step({"X": "F-[[X]+X]+F[+FX]-X", "F": "FF"}, "X", 5), 22.5),
    ]
    raw = [
        execute_and_fit(state, standard_rule_set(10, angle), fit=False)
        for state, angle in figures
    ]
    cells = layout_grid(3, 2, width, height, raw, padding=50)
    segments = [seg for cell in cells for seg in cell]
    style = Style(stroke="darkgreen", stroke_width=3, background="aliceblue")
    return Drawing("abop-fig1.24", segments, width, height, style)


ALL_EXAMPLES: dict[str, Callable[[], Drawing]] = {
    "fractal-binary-tree": fractal_binary_tree,
    "fractal-plant": fractal_plant,
    "dragon-curve": dragon_curve,
    "abop-fig1.24": abop_fig_1_24,
}
