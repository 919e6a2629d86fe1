import random

import pytest

from steppers import BacktrackEvent, InvalidParameterError
from steppers.sudoku import (
    SudokuStepper,
    count_solutions,
    generate_puzzle,
    generate_solved,
    has_solution,
    is_complete,
    is_valid_grid,
)

PUZZLE = (
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)
SOLUTION = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)


def _grid(text):
    return [[int(text[r * 9 + c]) for c in range(9)] for r in range(9)]


def _flat(grid):
    return "".join(str(v) for row in grid for v in row)


def _run(stepper):
    events = []
    while not stepper.is_done():
        events.append(stepper.step())
    return events


def test_solves_classic_puzzle():
    s = SudokuStepper(_grid(PUZZLE))
    events = _run(s)
    assert _flat(s.grid) == SOLUTION
    assert s.succeeded
    assert [e.kind for e in events[-2:]] == [BacktrackEvent.SOLUTION, BacktrackEvent.DONE]
    assert BacktrackEvent.BACKTRACK in {e.kind for e in events}


def test_clue_cells_never_change():
    givens = _grid(PUZZLE)
    s = SudokuStepper(givens)
    while not s.is_done():
        s.step()
        for r in range(9):
            for c in range(9):
                if givens[r][c]:
                    assert s.grid[r][c] == givens[r][c]


def test_flat_input_accepted():
    s = SudokuStepper([int(ch) for ch in PUZZLE])
    _run(s)
    assert _flat(s.grid) == SOLUTION


def test_unsolvable_board_reports_failure():
    grid = [[0] * 9 for _ in range(9)]
    grid[0] = [1, 2, 3, 4, 5, 6, 7, 8, 0]
    grid[1][8] = 9
    assert is_valid_grid(grid)

    s = SudokuStepper(grid)
    events = _run(s)
    assert events[-1].kind is BacktrackEvent.DONE
    assert events[-1].value is False
    assert not s.succeeded
    assert BacktrackEvent.SOLUTION not in {e.kind for e in events}


def test_conflicting_givens_finish_immediately():
    grid = [[0] * 9 for _ in range(9)]
    grid[0][0] = grid[0][5] = 5
    s = SudokuStepper(grid)
    event = s.step()
    assert event.kind is BacktrackEvent.DONE and event.is_final
    assert not s.succeeded


def test_full_valid_board():
    s = SudokuStepper(_grid(SOLUTION))
    kinds = [e.kind for e in _run(s)]
    assert kinds == [BacktrackEvent.SOLUTION, BacktrackEvent.DONE]
    assert s.succeeded


def test_fixed_mask_limits_clues():
    givens = _grid(SOLUTION)
    fixed = [[(r + c) % 2 == 0 for c in range(9)] for r in range(9)]
    s = SudokuStepper(givens, fixed=fixed)
    assert len(s.empties) == 40
    assert all(s.grid[r][c] == 0 for r, c in s.empties)
    _run(s)
    assert s.succeeded
    assert is_complete(s.grid)


@pytest.mark.parametrize("bad", [
    [[0] * 9] * 8,
    [0] * 80,
    [[10] * 9 for _ in range(9)],
    [["x"] * 9 for _ in range(9)],
])
def test_malformed_grids_rejected(bad):
    with pytest.raises(InvalidParameterError):
        SudokuStepper(bad)


def test_blank_fixed_cell_rejected():
    fixed = [[True] * 9 for _ in range(9)]
    with pytest.raises(InvalidParameterError):
        SudokuStepper(_grid(PUZZLE), fixed=fixed)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def test_generate_solved_is_complete():
    for seed in range(3):
        assert is_complete(generate_solved(random.Random(seed)))


def test_count_solutions():
    assert count_solutions(_grid(PUZZLE), limit=2) == 1
    assert count_solutions([[0] * 9 for _ in range(9)], limit=3) == 3
    assert has_solution(_grid(PUZZLE))


def test_generate_puzzle_unique_and_deterministic():
    puzzle = generate_puzzle(target_blanks=40, seed=3)
    blanks = sum(v == 0 for row in puzzle for v in row)
    assert 0 < blanks <= 40
    assert count_solutions(puzzle, limit=2) == 1
    assert generate_puzzle(target_blanks=40, seed=3) == puzzle


def test_generated_puzzle_is_solved_by_stepper():
    puzzle = generate_puzzle(target_blanks=30, seed=11)
    s = SudokuStepper(puzzle)
    _run(s)
    assert s.succeeded
    assert is_complete(s.grid)
