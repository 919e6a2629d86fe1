"""
sudoku.py — Sudoku Solver & Puzzle Generator
=============================================
Two halves:

  1. SudokuStepper     backtracking fill driven one micro-step at a time.
                       The empty cells are listed row-major; a stack of
                       frames [position_index, next_candidate] replaces the
                       recursive solver's call stack.

  2. Generator         plain (non-stepped) helpers: randomised MRV fill of
                       a complete grid, solution counting, and a puzzle
                       maker that blanks cells while the puzzle stays
                       solvable (or uniquely solvable).

Grids are 9×9 lists of ints, 0 = blank.
"""

import random
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from steppers.base import Stepper
from steppers.errors import InvalidParameterError
from steppers.event import BacktrackEvent, StepEvent

Grid = List[List[int]]

SIZE = 9
BOX  = 3


PSEUDOCODE: List[str] = [
    "def solve(k):",                                        # 0
    "    if k == len(empties): return True",                # 1
    "    (r, c) ← empties[k]",                              # 2
    "    for v in cursor .. 9:",                            # 3
    "        if legal(r, c, v):",                           # 4
    "            grid[r][c] ← v",                           # 5
    "            if solve(k + 1): return True",             # 6
    "    grid[r][c] ← 0; return False   # backtrack",       # 7
    "solve(0) or report NO SOLUTION",                       # 8
]


# ---------------------------------------------------------------------------
# Grid helpers
# ---------------------------------------------------------------------------
def coerce_grid(values) -> Grid:
    """Accept a 9×9 nested sequence or a flat sequence of 81 values."""
    values = list(values)
    if len(values) == SIZE * SIZE and all(not isinstance(v, (list, tuple)) for v in values):
        rows = [values[r * SIZE:(r + 1) * SIZE] for r in range(SIZE)]
    elif all(isinstance(row, (list, tuple)) for row in values):
        rows = [list(row) for row in values]
    else:
        raise InvalidParameterError("Sudoku grid must be 9x9 (or 81 flat values)")
    if len(rows) != SIZE or any(len(row) != SIZE for row in rows):
        raise InvalidParameterError("Sudoku grid must be 9x9 (or 81 flat values)")
    try:
        grid = [[int(v) for v in row] for row in rows]
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"Sudoku grid holds a non-integer value: {exc}") from exc
    if any(not 0 <= v <= SIZE for row in grid for v in row):
        raise InvalidParameterError("Sudoku values must be in 0..9 (0 = blank)")
    return grid


def copy_grid(grid: Grid) -> Grid:
    return [list(row) for row in grid]


def is_legal(grid: Grid, r: int, c: int, v: int) -> bool:
    """Whether v can go at (r, c) given every *other* cell."""
    for k in range(SIZE):
        if k != c and grid[r][k] == v:
            return False
        if k != r and grid[k][c] == v:
            return False
    br, bc = (r // BOX) * BOX, (c // BOX) * BOX
    for i in range(br, br + BOX):
        for j in range(bc, bc + BOX):
            if (i, j) != (r, c) and grid[i][j] == v:
                return False
    return True


def candidates(grid: Grid, r: int, c: int) -> List[int]:
    used = set(grid[r]) | {grid[k][c] for k in range(SIZE)}
    br, bc = (r // BOX) * BOX, (c // BOX) * BOX
    used |= {grid[i][j] for i in range(br, br + BOX) for j in range(bc, bc + BOX)}
    return [v for v in range(1, SIZE + 1) if v not in used]


def is_valid_grid(grid: Grid) -> bool:
    """No duplicate among the filled cells of any row, column or box."""
    return all(
        grid[r][c] == 0 or is_legal(grid, r, c, grid[r][c])
        for r in range(SIZE)
        for c in range(SIZE)
    )


def is_complete(grid: Grid) -> bool:
    return all(v != 0 for row in grid for v in row) and is_valid_grid(grid)


# ---------------------------------------------------------------------------
# Stepper
# ---------------------------------------------------------------------------
class SudokuPhase(Enum):
    SEARCH   = "search"
    FINISHED = "finished"


class SudokuStepper(Stepper):
    """
    Attributes:
        givens  : The puzzle as constructed (read-only copy).
        fixed   : fixed[r][c] → True for clue cells the search never touches.
        grid    : Working board.
        empties : Row-major list of the non-fixed cells.
        stack   : Frames [index into empties, next candidate value].
        solved  : True once every empty cell holds a legal value.
    """

    KEY        = "sudoku"
    PSEUDOCODE = PSEUDOCODE
    _STATE     = ("grid", "stack", "solved", "phase")

    def __init__(self, grid, fixed: Optional[Sequence[Sequence[bool]]] = None):
        super().__init__()
        givens = coerce_grid(grid)
        if fixed is None:
            mask = [[v != 0 for v in row] for row in givens]
        else:
            mask = [[bool(f) for f in row] for row in fixed]
            if len(mask) != SIZE or any(len(row) != SIZE for row in mask):
                raise InvalidParameterError("Fixed mask must be 9x9")
            if any(mask[r][c] and givens[r][c] == 0 for r in range(SIZE) for c in range(SIZE)):
                raise InvalidParameterError("A fixed cell cannot be blank")

        self.givens: Tuple[Tuple[int, ...], ...] = tuple(tuple(row) for row in givens)
        self.fixed:  Tuple[Tuple[bool, ...], ...] = tuple(tuple(row) for row in mask)
        self.empties: List[Tuple[int, int]] = [
            (r, c) for r in range(SIZE) for c in range(SIZE) if not mask[r][c]
        ]
        self.reset()

    def _signature(self):
        return (self.givens, self.fixed)

    def _reset(self) -> None:
        self.grid: Grid = [
            [v if self.fixed[r][c] else 0 for c, v in enumerate(row)]
            for r, row in enumerate(self.givens)
        ]
        # conflicting givens never start a search
        searchable = self.empties and is_valid_grid(self.grid)
        self.stack: List[List[int]] = [[0, 1]] if searchable else []
        self.solved = False
        self.phase  = SudokuPhase.SEARCH

    @property
    def succeeded(self) -> bool:
        return self.solved

    # ------------------------------------------------------------------
    def _advance(self) -> StepEvent:
        if self.phase is SudokuPhase.FINISHED:
            return self._emit(BacktrackEvent.DONE, value=self.solved, line=8, final=True,
                              explanation="Board solved." if self.solved else "Board has no solution.")

        if not self.stack:
            # first step only: nothing to fill, or the givens conflict
            self.phase = SudokuPhase.FINISHED
            if not is_valid_grid(self.grid):
                return self._emit(BacktrackEvent.DONE, value=False, line=8, final=True,
                                  explanation="The givens already conflict: no solution.")
            self.solved = True
            return self._emit(BacktrackEvent.SOLUTION, line=1,
                              explanation="Every cell is already filled.")

        frame = self.stack[-1]
        index, start = frame
        r, c = self.empties[index]
        self.grid[r][c] = 0

        for v in range(start, SIZE + 1):
            if not is_legal(self.grid, r, c, v):
                continue
            self.grid[r][c] = v
            frame[1] = v + 1
            if index == len(self.empties) - 1:
                self.solved = True
                self.phase  = SudokuPhase.FINISHED
                return self._emit(BacktrackEvent.SOLUTION, r, c, value=v, line=1,
                                  explanation=f"Place {v} at ({r}, {c}): last empty cell filled.")
            self.stack.append([index + 1, 1])
            return self._emit(BacktrackEvent.PLACE, r, c, value=v, line=5,
                              explanation=f"{v} is the lowest legal value for ({r}, {c}).")

        self.stack.pop()
        if not self.stack:
            self.phase = SudokuPhase.FINISHED
            return self._emit(BacktrackEvent.DONE, r, c, value=False, line=8, final=True,
                              explanation=f"No value fits ({r}, {c}) and nothing is left to undo: "
                                          "the puzzle has no solution.")
        return self._emit(BacktrackEvent.BACKTRACK, r, c, line=7,
                          explanation=f"No value in {start}..9 fits ({r}, {c}): backtrack.")

    def describe(self) -> str:
        if self.done:
            return "Solved" if self.solved else "No solution"
        if not self.stack:
            return "Ready"
        index, cursor = self.stack[-1]
        r, c = self.empties[index]
        return f"cell=({r}, {c}), next candidate={cursor}, depth={len(self.stack)}/{len(self.empties)}"


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def _fill_mrv(grid: Grid, rng: random.Random) -> bool:
    best, best_cands = None, None
    for r in range(SIZE):
        for c in range(SIZE):
            if grid[r][c] == 0:
                cands = candidates(grid, r, c)
                if best_cands is None or len(cands) < len(best_cands):
                    best, best_cands = (r, c), cands
    if best is None:
        return True
    r, c = best
    rng.shuffle(best_cands)
    for v in best_cands:
        grid[r][c] = v
        if _fill_mrv(grid, rng):
            return True
    grid[r][c] = 0
    return False


def generate_solved(rng: Optional[random.Random] = None) -> Grid:
    """A complete random grid (fewest-candidates-first backtracking)."""
    grid = [[0] * SIZE for _ in range(SIZE)]
    _fill_mrv(grid, rng or random.Random())
    return grid


def count_solutions(grid: Grid, limit: int = 2) -> int:
    """Number of completions of `grid`, counting stops at `limit`."""
    g = copy_grid(grid)
    if not is_valid_grid(g):
        return 0
    count = 0

    def search() -> bool:
        nonlocal count
        best, best_cands = None, None
        for r in range(SIZE):
            for c in range(SIZE):
                if g[r][c] == 0:
                    cands = candidates(g, r, c)
                    if best_cands is None or len(cands) < len(best_cands):
                        best, best_cands = (r, c), cands
        if best is None:
            count += 1
            return count >= limit
        r, c = best
        for v in best_cands:
            g[r][c] = v
            if search():
                return True
        g[r][c] = 0
        return False

    search()
    return count


def has_solution(grid: Grid) -> bool:
    return count_solutions(grid, limit=1) >= 1


def generate_puzzle(target_blanks: int = 45, seed: Optional[int] = None, unique: bool = True) -> Grid:
    """
    Blank up to `target_blanks` cells of a random solved grid.

    Positions are visited in shuffled order; a removal is kept only when the
    puzzle still has a solution (exactly one, when `unique`).  The result may
    hold fewer blanks than requested if no further cell can go.
    """
    rng = random.Random(seed)
    puzzle = generate_solved(rng)
    positions = [(r, c) for r in range(SIZE) for c in range(SIZE)]
    rng.shuffle(positions)

    target = max(0, min(target_blanks, SIZE * SIZE))
    blanks = 0
    for r, c in positions:
        if blanks >= target:
            break
        backup = puzzle[r][c]
        puzzle[r][c] = 0
        ok = count_solutions(puzzle, limit=2) == 1 if unique else has_solution(puzzle)
        if ok:
            blanks += 1
        else:
            puzzle[r][c] = backup
    return puzzle
