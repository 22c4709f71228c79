"""L-systems: rewrite symbol sequences and draw them with a turtle."""

from .atoms import (
    Atom,
    SymbolSequence,
    as_atom,
    as_sequence,
    combine_names,
    from_string,
    names_from_string,
    to_string,
)
from .errors import (
    ConfigError,
    DegenerateGeometryError,
    GrowthLimitError,
    InterpretationError,
    LSystemError,
    StackUnderflowError,
)
from .fitting import compute_bounds, fit_line_segments, layout_grid
from .productions import (
    ProductionTable,
    bind_productions,
    generations,
    nth_step,
    step,
    stream_expand,
)
from .turtle import (
    LineSegment,
    PenState,
    PosAndAngle,
    execute,
    forward,
    get_pos_and_angle,
    move,
    new_line_segment,
    new_pen_state,
    pen_down,
    pen_up,
    pop_pos_and_angle,
    push_pos_and_angle,
    rotate,
    standard_rule_set,
)

__version__ = "0.2.0"
