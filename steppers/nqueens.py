"""
nqueens.py — N-Queens Enumeration
==================================
Backtracking placement search that enumerates *every* solution, driven one
micro-step at a time.

State replaces the recursive solver's call stack:
    queens[row] = col   (-1 = unplaced)
    used columns / "/" diagonals (row+col) / "\\" diagonals (row-col+n-1)
    (row, col)          the cursor the next step will test

One step() does exactly one of:
    row == n            → SOLUTION   (record, then lift the last queen)
    col <  n, safe      → PLACE      (advance to (row+1, 0))
    col <  n, unsafe    → CHECK      (advance the column cursor)
    col == n, row > 0   → BACKTRACK  (lift queen of row-1, resume at lastCol+1)
    col == n, row == 0  → DONE
"""

from typing import List, Tuple

from steppers.base import Stepper
from steppers.errors import InvalidParameterError
from steppers.event import BacktrackEvent, StepEvent


PSEUDOCODE: List[str] = [
    "def place(row):",                                  # 0
    "    if row == N: record solution; return",         # 1
    "    for col in 0 .. N-1:",                         # 2
    "        if safe(row, col):",                       # 3
    "            put queen at (row, col)",              # 4
    "            place(row + 1)",                       # 5
    "            remove queen from (row, col)",         # 6
    "place(0)",                                         # 7
]


class NQueensStepper(Stepper):
    """
    Attributes:
        n         : Board size.
        queens    : queens[row] = column, -1 when the row is empty.
        row, col  : Cursor of the next placement test.
        solutions : Every full placement found so far, as column tuples.
    """

    KEY        = "n_queens"
    PSEUDOCODE = PSEUDOCODE
    _STATE     = ("queens", "cols", "diag1", "diag2", "row", "col", "solutions")

    def __init__(self, n: int = 8):
        super().__init__()
        if n < 0:
            raise InvalidParameterError(f"Board size must be non-negative, got {n}")
        self.n = n
        self.reset()

    def _signature(self):
        return (self.n,)

    def _reset(self) -> None:
        n = self.n
        self.queens: List[int]  = [-1] * n
        self.cols:   List[bool] = [False] * n
        self.diag1:  List[bool] = [False] * max(2 * n - 1, 0)
        self.diag2:  List[bool] = [False] * max(2 * n - 1, 0)
        self.row = 0
        self.col = 0
        self.solutions: List[Tuple[int, ...]] = []

    @property
    def succeeded(self) -> bool:
        return bool(self.solutions)

    # ------------------------------------------------------------------
    # Board bookkeeping
    # ------------------------------------------------------------------
    def is_safe(self, row: int, col: int) -> bool:
        return not (self.cols[col]
                    or self.diag1[row + col]
                    or self.diag2[row - col + self.n - 1])

    def _place(self, row: int, col: int) -> None:
        self.queens[row] = col
        self.cols[col] = self.diag1[row + col] = self.diag2[row - col + self.n - 1] = True

    def _lift(self, row: int) -> int:
        col = self.queens[row]
        self.queens[row] = -1
        self.cols[col] = self.diag1[row + col] = self.diag2[row - col + self.n - 1] = False
        return col

    # ------------------------------------------------------------------
    def _advance(self) -> StepEvent:
        n = self.n
        if n == 0:
            return self._emit(BacktrackEvent.DONE, line=7, final=True,
                              explanation="Empty board: nothing to place.")

        if self.row == n:
            solution = tuple(self.queens)
            self.solutions.append(solution)
            last = n - 1
            col = self._lift(last)
            self.row, self.col = last, col + 1
            return self._emit(
                BacktrackEvent.SOLUTION, last, col, value=solution, line=1,
                explanation=f"All {n} queens placed: solution #{len(self.solutions)}. "
                            f"Lift row {last} and keep searching.",
            )

        if self.col < n:
            row, col = self.row, self.col
            if self.is_safe(row, col):
                self._place(row, col)
                self.row, self.col = row + 1, 0
                return self._emit(BacktrackEvent.PLACE, row, col, line=4,
                                  explanation=f"({row}, {col}) is not attacked: place a queen.")
            self.col += 1
            return self._emit(BacktrackEvent.CHECK, row, col, value=False, line=3,
                              explanation=f"({row}, {col}) is attacked by an earlier queen.")

        if self.row == 0:
            return self._emit(BacktrackEvent.DONE, line=7, final=True,
                              explanation=f"Search space exhausted: {len(self.solutions)} solution(s).")

        row = self.row - 1
        col = self._lift(row)
        self.row, self.col = row, col + 1
        return self._emit(BacktrackEvent.BACKTRACK, row, col, line=6,
                          explanation=f"No column fits row {row + 1}: lift the queen at ({row}, {col}).")

    def describe(self) -> str:
        if self.done:
            return f"Done. Solutions found={len(self.solutions)}"
        return f"row={self.row}, col={self.col}, solutions={len(self.solutions)}"


# ---------------------------------------------------------------------------
# Reference enumerator
# ---------------------------------------------------------------------------
def solve_all(n: int) -> List[Tuple[int, ...]]:
    """Every solution for an n×n board, in lexicographic column order.
    An empty board (n = 0) has none."""
    if n <= 0:
        return []
    out: List[Tuple[int, ...]] = []
    queens: List[int] = []

    def place(row: int) -> None:
        if row == n:
            out.append(tuple(queens))
            return
        for col in range(n):
            if all(col != c and abs(col - c) != row - r for r, c in enumerate(queens)):
                queens.append(col)
                place(row + 1)
                queens.pop()

    place(0)
    return out
