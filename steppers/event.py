"""
event.py — Step Events
=======================
Every call to `Stepper.step()` returns exactly one StepEvent: a frozen,
tagged record of the single state transition that just happened.

    • kind            – per-family Enum member (SearchEvent.COMPARE_LESS, …)
    • where           – the coordinates relevant to that kind:
                          array indices for search / sort,
                          node ids for graph traversal,
                          (row, col) cells for boards, mazes and paths
    • value           – the value placed / compared, when there is one
    • pseudocode_line – index into the stepper's PSEUDOCODE listing
    • explanation     – plain-English "why" text for Learning Mode

The core never stores events.  Whoever calls step() owns the history.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple


# ---------------------------------------------------------------------------
# Event kinds — one Enum per algorithm family
# ---------------------------------------------------------------------------
class SearchEvent(Enum):
    INIT            = "init"
    HIGHLIGHT_MID   = "highlight_mid"
    COMPARE_EQUAL   = "compare_equal"
    COMPARE_LESS    = "compare_less"
    COMPARE_GREATER = "compare_greater"
    ELIMINATE_LEFT  = "eliminate_left"
    ELIMINATE_RIGHT = "eliminate_right"
    MOVE_BOUNDS     = "move_bounds"
    DONE_FOUND      = "done_found"
    DONE_NOT_FOUND  = "done_not_found"


class SortEvent(Enum):
    INIT_PASS   = "init_pass"     # bubble sort
    INIT_OUTER  = "init_outer"    # selection sort
    INIT_MIN    = "init_min"      # selection sort
    COMPARE     = "compare"
    SWAP        = "swap"
    SET_MIN     = "set_min"       # selection sort
    ADVANCE     = "advance"       # bubble sort
    END_SCAN    = "end_scan"      # selection sort
    MARK_SORTED = "mark_sorted"
    DONE        = "done"


class TraversalEvent(Enum):
    INIT         = "init"
    DISCOVER     = "discover"
    EXPLORE_EDGE = "explore_edge"
    BACKTRACK    = "backtrack"
    DONE         = "done"


class BacktrackEvent(Enum):
    CHECK     = "check"
    PLACE     = "place"
    BACKTRACK = "backtrack"
    SOLUTION  = "solution"
    DONE      = "done"


class MazeEvent(Enum):
    INIT      = "init"
    CARVE     = "carve"
    BACKTRACK = "backtrack"       # randomised DFS only
    DONE      = "done"


class PathEvent(Enum):
    INIT       = "init"
    VISIT      = "visit"
    FRONTIER   = "frontier"
    FOUND      = "found"
    RECON_PATH = "recon_path"
    NO_PATH    = "no_path"
    DONE       = "done"


# ---------------------------------------------------------------------------
# StepEvent
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StepEvent:
    """
    Attributes:
        kind            : Enum member from one of the families above.
        step_number     : 0-based index of this event in the run.
        where           : Indices / node ids / cells this event touches.
        value           : Placed or compared value (or None).
        pseudocode_line : 0-based line of the stepper's PSEUDOCODE.
        explanation     : Human-readable "why" text.
        is_final        : True on the terminal event of a run.
    """

    kind:             Enum
    step_number:      int              = 0
    where:            Tuple[Any, ...]  = ()
    value:            Optional[Any]    = None
    pseudocode_line:  int              = 0
    explanation:      str              = ""
    is_final:         bool             = False

    @property
    def name(self) -> str:
        return self.kind.name
