"""
sorting.py — Comparison Sorts
==============================
Bubble sort and selection sort as phase machines.  Each step() performs
one phase (a comparison, a swap, a cursor move, …) and reports it.

Invariants after every step:
  - the array is a permutation of the input (only positions change);
  - bubble sort: after pass i the last i+1 slots hold their final values;
  - selection sort: after boundary i the first i+1 slots do.

Arrays of length 0 or 1 finish on the first step with DONE.
"""

from enum import Enum
from typing import List, Optional, Sequence

from steppers.base import Stepper
from steppers.event import SortEvent, StepEvent


BUBBLE_PSEUDOCODE: List[str] = [
    "def bubble_sort(a):",                          # 0
    "    for i in 0 .. n-2:",                       # 1
    "        for j in 0 .. n-2-i:",                 # 2
    "            if a[j] > a[j+1]:",                # 3
    "                swap(a[j], a[j+1])",           # 4
    "        a[n-1-i] is in its final place",       # 5
    "    return a",                                 # 6
]

SELECTION_PSEUDOCODE: List[str] = [
    "def selection_sort(a):",                       # 0
    "    for i in 0 .. n-2:",                       # 1
    "        min ← i",                              # 2
    "        for j in i+1 .. n-1:",                 # 3
    "            if a[j] < a[min]:",                # 4
    "                min ← j",                      # 5
    "        if min != i: swap(a[i], a[min])",      # 6
    "        a[i] is in its final place",           # 7
    "    return a",                                 # 8
]


# ---------------------------------------------------------------------------
# Bubble sort
# ---------------------------------------------------------------------------
class BubblePhase(Enum):
    INIT_PASS   = "init_pass"
    COMPARE     = "compare"
    SWAP        = "swap"
    ADVANCE     = "advance"
    MARK_SORTED = "mark_sorted"
    DONE        = "done"


class BubbleSortStepper(Stepper):
    """
    Attributes:
        array : Working copy being sorted in place.
        i     : Current pass (0 .. n-2).
        j     : Left index of the adjacent pair under comparison.
    """

    KEY        = "bubble_sort"
    PSEUDOCODE = BUBBLE_PSEUDOCODE
    _STATE     = ("array", "i", "j", "phase")

    def __init__(self, array: Sequence[int]):
        super().__init__()
        self.initial: tuple = tuple(array)
        self.reset()

    def _signature(self):
        return (self.initial,)

    def _reset(self) -> None:
        self.array: List[int] = list(self.initial)
        self.i = 0
        self.j = 0
        self.phase = BubblePhase.INIT_PASS if len(self.array) > 1 else BubblePhase.DONE

    def _advance(self) -> Optional[StepEvent]:
        a, n = self.array, len(self.array)

        if self.phase is BubblePhase.INIT_PASS:
            self.phase = BubblePhase.COMPARE
            return self._emit(
                SortEvent.INIT_PASS, self.i, line=1,
                explanation=f"Pass {self.i}: bubble the largest of a[0..{n - 1 - self.i}] to the end.",
            )

        if self.phase is BubblePhase.COMPARE:
            j = self.j
            self.phase = BubblePhase.SWAP if a[j] > a[j + 1] else BubblePhase.ADVANCE
            return self._emit(
                SortEvent.COMPARE, j, j + 1, line=3,
                explanation=f"Compare a[{j}] = {a[j]} with a[{j + 1}] = {a[j + 1]}.",
            )

        if self.phase is BubblePhase.SWAP:
            j = self.j
            a[j], a[j + 1] = a[j + 1], a[j]
            self.phase = BubblePhase.ADVANCE
            return self._emit(
                SortEvent.SWAP, j, j + 1, line=4,
                explanation=f"Out of order: swap positions {j} and {j + 1}.",
            )

        if self.phase is BubblePhase.ADVANCE:
            self.j += 1
            end_of_pass = self.j >= n - 1 - self.i
            self.phase = BubblePhase.MARK_SORTED if end_of_pass else BubblePhase.COMPARE
            return self._emit(SortEvent.ADVANCE, self.j, line=2)

        if self.phase is BubblePhase.MARK_SORTED:
            settled = n - 1 - self.i
            self.i += 1
            self.j = 0
            self.phase = BubblePhase.INIT_PASS if self.i < n - 1 else BubblePhase.DONE
            return self._emit(
                SortEvent.MARK_SORTED, settled, value=a[settled], line=5,
                explanation=f"a[{settled}] = {a[settled]} is now in its final position.",
            )

        return self._emit(SortEvent.DONE, line=6, final=True,
                          explanation=f"Done. Array sorted (n={n}).")


# ---------------------------------------------------------------------------
# Selection sort
# ---------------------------------------------------------------------------
class SelectionPhase(Enum):
    INIT_OUTER  = "init_outer"
    INIT_MIN    = "init_min"
    COMPARE     = "compare"
    SET_MIN     = "set_min"
    END_SCAN    = "end_scan"
    SWAP        = "swap"
    MARK_SORTED = "mark_sorted"
    DONE        = "done"


class SelectionSortStepper(Stepper):
    """
    Attributes:
        array     : Working copy being sorted in place.
        i         : Boundary; a[:i] is final.
        j         : Scan index.
        min_index : Index of the smallest value seen in the current scan.
    """

    KEY        = "selection_sort"
    PSEUDOCODE = SELECTION_PSEUDOCODE
    _STATE     = ("array", "i", "j", "min_index", "phase")

    def __init__(self, array: Sequence[int]):
        super().__init__()
        self.initial: tuple = tuple(array)
        self.reset()

    def _signature(self):
        return (self.initial,)

    def _reset(self) -> None:
        self.array: List[int] = list(self.initial)
        self.i = 0
        self.j = 1
        self.min_index = 0
        self.phase = SelectionPhase.INIT_OUTER if len(self.array) > 1 else SelectionPhase.DONE

    def _scan_next(self) -> None:
        self.j += 1
        self.phase = SelectionPhase.COMPARE if self.j < len(self.array) else SelectionPhase.END_SCAN

    def _advance(self) -> Optional[StepEvent]:
        a, n = self.array, len(self.array)

        if self.phase is SelectionPhase.INIT_OUTER:
            self.phase = SelectionPhase.INIT_MIN
            return self._emit(SortEvent.INIT_OUTER, self.i, line=1,
                              explanation=f"Find the smallest value in a[{self.i}..{n - 1}].")

        if self.phase is SelectionPhase.INIT_MIN:
            self.min_index = self.i
            self.j = self.i + 1
            self.phase = SelectionPhase.COMPARE
            return self._emit(SortEvent.INIT_MIN, self.i, value=a[self.i], line=2,
                              explanation=f"Assume a[{self.i}] = {a[self.i]} is the minimum.")

        if self.phase is SelectionPhase.COMPARE:
            j, m = self.j, self.min_index
            if a[j] < a[m]:
                self.phase = SelectionPhase.SET_MIN
            else:
                self._scan_next()
            return self._emit(
                SortEvent.COMPARE, j, m, line=4,
                explanation=f"Compare a[{j}] = {a[j]} with current minimum a[{m}] = {a[m]}.",
            )

        if self.phase is SelectionPhase.SET_MIN:
            self.min_index = self.j
            event = self._emit(SortEvent.SET_MIN, self.j, value=a[self.j], line=5,
                               explanation=f"New minimum a[{self.j}] = {a[self.j]}.")
            self._scan_next()
            return event

        if self.phase is SelectionPhase.END_SCAN:
            self.phase = SelectionPhase.SWAP if self.min_index != self.i else SelectionPhase.MARK_SORTED
            return self._emit(SortEvent.END_SCAN, self.i, self.min_index, line=6,
                              explanation=f"Scan complete: minimum is at index {self.min_index}.")

        if self.phase is SelectionPhase.SWAP:
            i, m = self.i, self.min_index
            a[i], a[m] = a[m], a[i]
            self.phase = SelectionPhase.MARK_SORTED
            return self._emit(SortEvent.SWAP, i, m, line=6,
                              explanation=f"Swap positions {i} and {m}.")

        if self.phase is SelectionPhase.MARK_SORTED:
            settled = self.i
            self.i += 1
            self.phase = SelectionPhase.INIT_OUTER if self.i < n - 1 else SelectionPhase.DONE
            return self._emit(SortEvent.MARK_SORTED, settled, value=a[settled], line=7,
                              explanation=f"a[{settled}] = {a[settled]} is now in its final position.")

        return self._emit(SortEvent.DONE, line=8, final=True,
                          explanation=f"Done. Array sorted (n={n}).")
