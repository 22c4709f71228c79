import json
import os
import tempfile
from typing import Any

import pytest

from lsystems.atoms import Atom, from_string
from lsystems.config import (
    FigureConfig,
    build_rule_table,
    compute_figure,
    debug_enabled,
    load_config,
    load_json,
    parse_config,
)
from lsystems.errors import ConfigError, GrowthLimitError, InterpretationError
from lsystems.turtle import execute, new_pen_state

_EXAMPLE_DIR = os.path.join(os.path.dirname(__file__), "example")


class TestConfigParsing:
    def test_basic_config(self) -> None:
        config = parse_config(
            {
                "axiom": "F",
                "iterations": 1,
                "rules": {"F": "F+F"},
                "turtle": {
                    "angle": 90,
                    "step": 10,
                    "start": {"x": 5, "y": 7, "facing": 45},
                },
                "canvas": {"width": 300, "height": 200, "padding": 5},
            }
        )
        assert isinstance(config, FigureConfig)
        assert config.axiom == "F"
        assert config.rules["F"] == "F+F"
        assert config.productions[Atom.char("F")] == from_string("F+F")
        assert (config.start_x, config.start_y, config.facing) == (5, 7, 45)
        assert (config.width, config.height, config.padding) == (300, 200, 5)
        assert config.commands is None

    def test_defaults(self) -> None:
        config = parse_config({"axiom": "F"})
        assert config.iterations == 0
        assert config.angle == 90
        assert config.fit
        assert config.max_length is None

    def test_missing_axiom(self) -> None:
        with pytest.raises(ConfigError):
            parse_config({"iterations": 1})

    def test_invalid_types(self) -> None:
        bad: list[dict[str, Any]] = [
            {"axiom": "F", "iterations": "1"},
            {"axiom": "F", "iterations": -1},
            {"axiom": "F", "rules": {"FF": "F"}},
            {"axiom": "F", "turtle": {"start": {"x": 1.5}}},
            {"axiom": "F", "turtle": {"step": 0}},
            {"axiom": "F", "canvas": {"width": 0}},
            {"axiom": "F", "canvas": {"width": 100, "height": 100, "padding": 60}},
            {"axiom": "F", "canvas": {"fit": "yes"}},
            {"axiom": "F", "max_length": 0},
            [],
        ]
        for obj in bad:
            with pytest.raises(ConfigError):
                parse_config(obj)

    def test_bad_command_rejected_at_parse(self) -> None:
        with pytest.raises(ConfigError):
            parse_config(
                {"axiom": "F", "turtle": {"commands": {"F": {"type": "jump"}}}}
            )
        with pytest.raises(ConfigError):
            parse_config(
                {
                    "axiom": "F",
                    "turtle": {"commands": {"+": {"type": "turn", "direction": 2}}},
                }
            )


class TestRuleTables:
    def setup_method(self) -> None:
        self.ps = new_pen_state(0, 0)

    def test_standard_when_no_commands(self) -> None:
        rules = build_rule_table(None, step=10, angle=90)
        assert set(rules) == set(from_string("Ff+-[]"))

    def test_turn_direction_matches_standard(self) -> None:
        commands = {
            "F": {"type": "forward", "draw": True},
            "+": {"type": "turn", "direction": 1},
        }
        rules = build_rule_table(commands, step=10, angle=90)
        executed = execute("+F", rules, self.ps)
        assert executed.x == pytest.approx(-10)
        assert executed.y == pytest.approx(0, abs=1e-9)

    def test_turn_abs_and_step_multiplier(self) -> None:
        commands = {
            "A": {"type": "turn_abs", "angle": 90},
            "G": {"type": "forward", "draw": True, "step": 2.5},
        }
        executed = execute("AG", build_rule_table(commands, step=10, angle=45), self.ps)
        assert executed.x == pytest.approx(25)

    def test_pen_commands(self) -> None:
        commands = {
            "F": {"type": "forward"},
            "u": {"type": "pen_up"},
            "d": {"type": "pen_down"},
            "m": {"type": "forward", "draw": False},
            "X": {"type": "noop"},
        }
        rules = build_rule_table(commands, step=10, angle=90)
        executed = execute("FuFdXFmF", rules, self.ps)
        assert executed.line_count == 3
        assert executed.y == pytest.approx(-50)

    def test_push_pop(self) -> None:
        commands = {"(": {"type": "push"}, ")": {"type": "pop"}}
        rules = build_rule_table(commands, step=10, angle=90)
        assert execute("()", rules, self.ps) == self.ps
        with pytest.raises(InterpretationError):
            execute(")", rules, self.ps)


class TestPipeline:
    def test_koch_fits_canvas(self) -> None:
        cfg = load_config(os.path.join(_EXAMPLE_DIR, "koch.json"))
        segments = compute_figure(cfg)
        assert segments
        xs = [x for seg in segments for x, _ in seg]
        ys = [y for seg in segments for _, y in seg]
        assert min(xs) == pytest.approx(cfg.padding)
        assert max(xs) == pytest.approx(cfg.width - cfg.padding)
        assert min(ys) == pytest.approx(cfg.padding)

    def test_unfitted(self) -> None:
        cfg = parse_config(
            {
                "axiom": "FF",
                "turtle": {"start": {"x": 10, "y": 10}},
                "canvas": {"fit": False},
            }
        )
        segments = compute_figure(cfg)
        # both moves coalesce into one segment
        assert len(segments) == 1
        assert segments[0].start == (10, 10)
        assert segments[0].end == pytest.approx((10, -10))

    def test_max_length(self) -> None:
        cfg = parse_config(
            {"axiom": "F", "iterations": 6, "rules": {"F": "F+F"}, "max_length": 20}
        )
        with pytest.raises(GrowthLimitError):
            compute_figure(cfg)

    @pytest.mark.parametrize(
        "filename",
        ["koch.json", "fractal_tree.json", "hilbert_curve.json", "dragon_curve.json"],
    )
    def test_example_configs(self, filename: str) -> None:
        cfg = load_config(os.path.join(_EXAMPLE_DIR, filename))
        assert compute_figure(cfg)


class TestLoading:
    def test_malformed_json(self) -> None:
        with tempfile.NamedTemporaryFile(suffix=".json", mode="w", delete=False) as tmp:
            tmp.write("{ not valid json }")
            tmp_path = tmp.name
        try:
            with pytest.raises(ConfigError):
                load_json(tmp_path)
        finally:
            os.unlink(tmp_path)

    def test_load_config(self) -> None:
        with tempfile.NamedTemporaryFile(suffix=".json", mode="w", delete=False) as tmp:
            json.dump({"axiom": "F", "iterations": 2, "rules": {"F": "FF"}}, tmp)
            tmp_path = tmp.name
        try:
            assert load_config(tmp_path).iterations == 2
        finally:
            os.unlink(tmp_path)


class TestDebugFlag:
    def test_debug_enabled(self) -> None:
        assert debug_enabled({"LSYSTEMS_DEBUG": "1"})
        assert debug_enabled({"LSYSTEMS_DEBUG": "true"})
        assert not debug_enabled({"LSYSTEMS_DEBUG": "0"})
        assert not debug_enabled({"LSYSTEMS_DEBUG": ""})
        assert not debug_enabled({})
