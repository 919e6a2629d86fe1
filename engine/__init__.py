"""
engine/
-------
Driver & recording layer around the steppers package.

    from engine import Player, Recorder, compare
"""

from engine.player   import Player, PlayerState, SPEED_PRESETS
from engine.recorder import Recorder, RunMetrics, ComparisonResult, compare
from engine.boundary import (
    build_params, build_stepper, build_maze, clamp_cell, event_to_dict,
    format_sudoku, parse_sudoku, stepper_view,
)
from engine.settings import DEFAULTS

__all__ = [
    "Player",
    "PlayerState",
    "SPEED_PRESETS",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
    "build_params",
    "build_stepper",
    "build_maze",
    "clamp_cell",
    "event_to_dict",
    "format_sudoku",
    "parse_sudoku",
    "stepper_view",
    "DEFAULTS",
]
