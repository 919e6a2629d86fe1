"""
search.py — Binary Search
==========================
Phase machine:

    INIT → HIGHLIGHT → COMPARE ─┬→ FOUND → (DONE_FOUND)
                                ├→ ELIMINATE_LEFT  ─┐
                                └→ ELIMINATE_RIGHT ─┴→ MOVE_BOUNDS ─┬→ HIGHLIGHT
                                                                   └→ NOT_FOUND

One step() performs exactly one phase.  The sorted input is copied in and
never mutated.  An empty array finishes on its first step with
DONE_NOT_FOUND.
"""

from enum import Enum
from typing import List, Optional, Sequence

from steppers.base import Stepper
from steppers.errors import InvalidParameterError
from steppers.event import SearchEvent, StepEvent


PSEUDOCODE: List[str] = [
    "def binary_search(a, target):",            # 0
    "    low, high ← 0, len(a) - 1",            # 1
    "    while low <= high:",                   # 2
    "        mid ← low + (high - low) // 2",    # 3
    "        if a[mid] == target: return mid",  # 4
    "        if a[mid] < target:",              # 5
    "            low ← mid + 1",                # 6
    "        else:",                            # 7
    "            high ← mid - 1",               # 8
    "    return NOT FOUND",                     # 9
]


class SearchPhase(Enum):
    INIT            = "init"
    HIGHLIGHT       = "highlight"
    COMPARE         = "compare"
    ELIMINATE_LEFT  = "eliminate_left"
    ELIMINATE_RIGHT = "eliminate_right"
    MOVE_BOUNDS     = "move_bounds"
    FOUND           = "found"
    NOT_FOUND       = "not_found"


class BinarySearchStepper(Stepper):
    """
    Attributes:
        array       : Sorted input values (read-only copy).
        target      : Value being searched for.
        low / high  : Inclusive bounds of the live window.
        mid         : Floor midpoint of the window (-1 for an empty array).
        found_index : Index of the target once found, else -1.
    """

    KEY        = "binary_search"
    PSEUDOCODE = PSEUDOCODE
    _STATE     = ("low", "mid", "high", "found_index", "phase")

    def __init__(self, array: Sequence[int], target: int):
        super().__init__()
        values = list(array)
        if any(values[k] > values[k + 1] for k in range(len(values) - 1)):
            raise InvalidParameterError("binary search needs an array sorted ascending")
        self.array: tuple = tuple(values)
        self.target = target
        self.reset()

    def _signature(self):
        return (self.array, self.target)

    def _reset(self) -> None:
        n = len(self.array)
        self.low   = 0
        self.high  = n - 1
        self.mid   = self.low + (self.high - self.low) // 2 if n else -1
        self.found_index = -1
        self.phase = SearchPhase.INIT if n else SearchPhase.NOT_FOUND

    @property
    def succeeded(self) -> bool:
        return self.found_index >= 0

    # ------------------------------------------------------------------
    def _advance(self) -> Optional[StepEvent]:
        phase = self.phase

        if phase is SearchPhase.INIT:
            self.phase = SearchPhase.HIGHLIGHT
            return self._emit(
                SearchEvent.INIT, self.low, self.mid, self.high, value=self.target, line=1,
                explanation=f"Search window is [{self.low}, {self.high}] for target {self.target}.",
            )

        if phase is SearchPhase.HIGHLIGHT:
            self.phase = SearchPhase.COMPARE
            return self._emit(
                SearchEvent.HIGHLIGHT_MID, self.low, self.mid, self.high,
                value=self.array[self.mid], line=3,
                explanation=f"Midpoint of [{self.low}, {self.high}] is index {self.mid}.",
            )

        if phase is SearchPhase.COMPARE:
            probe = self.array[self.mid]
            if probe == self.target:
                self.phase = SearchPhase.FOUND
                kind, line, text = SearchEvent.COMPARE_EQUAL, 4, "equals"
            elif probe < self.target:
                self.phase = SearchPhase.ELIMINATE_LEFT
                kind, line, text = SearchEvent.COMPARE_LESS, 5, "is less than"
            else:
                self.phase = SearchPhase.ELIMINATE_RIGHT
                kind, line, text = SearchEvent.COMPARE_GREATER, 7, "is greater than"
            return self._emit(
                kind, self.low, self.mid, self.high, value=probe, line=line,
                explanation=f"a[{self.mid}] = {probe} {text} target {self.target}.",
            )

        if phase is SearchPhase.ELIMINATE_LEFT:
            self.phase = SearchPhase.MOVE_BOUNDS
            return self._emit(
                SearchEvent.ELIMINATE_LEFT, self.low, self.mid, line=6,
                explanation=f"Indices {self.low}..{self.mid} cannot hold the target.",
            )

        if phase is SearchPhase.ELIMINATE_RIGHT:
            self.phase = SearchPhase.MOVE_BOUNDS
            return self._emit(
                SearchEvent.ELIMINATE_RIGHT, self.mid, self.high, line=8,
                explanation=f"Indices {self.mid}..{self.high} cannot hold the target.",
            )

        if phase is SearchPhase.MOVE_BOUNDS:
            if self.array[self.mid] < self.target:
                self.low = self.mid + 1
            else:
                self.high = self.mid - 1
            if self.low > self.high:
                self.phase = SearchPhase.NOT_FOUND
            else:
                self.mid   = self.low + (self.high - self.low) // 2
                self.phase = SearchPhase.HIGHLIGHT
            return self._emit(
                SearchEvent.MOVE_BOUNDS, self.low, self.mid, self.high, line=2,
                explanation=f"New window is [{self.low}, {self.high}].",
            )

        if phase is SearchPhase.FOUND:
            self.found_index = self.mid
            return self._emit(
                SearchEvent.DONE_FOUND, self.mid, value=self.target, line=4, final=True,
                explanation=f"Target {self.target} found at index {self.mid}.",
            )

        return self._emit(
            SearchEvent.DONE_NOT_FOUND, self.low, self.high, value=self.target, line=9, final=True,
            explanation=f"Window is empty: {self.target} is not in the array.",
        )

    def describe(self) -> str:
        if self.done:
            if self.found_index >= 0:
                return f"Found target at index {self.found_index}"
            return "Not found. low > high"
        probe = f", a[mid]={self.array[self.mid]}" if 0 <= self.mid < len(self.array) else ""
        return f"low={self.low}, mid={self.mid}, high={self.high}, target={self.target}{probe}"
