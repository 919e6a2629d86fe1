import pytest

from steppers import BacktrackEvent, InvalidParameterError
from steppers.nqueens import NQueensStepper, solve_all

KNOWN_COUNTS = {1: 1, 2: 0, 3: 0, 4: 2, 5: 10, 6: 4, 7: 40, 8: 92}


def _run(stepper):
    events = []
    while not stepper.is_done():
        events.append(stepper.step())
    return events


@pytest.mark.parametrize("n", sorted(KNOWN_COUNTS))
def test_enumerates_same_solutions_as_recursive_solver(n):
    s = NQueensStepper(n)
    _run(s)
    reference = solve_all(n)
    assert len(reference) == KNOWN_COUNTS[n]
    assert s.solutions == reference
    assert s.succeeded == bool(reference)


def test_four_queens_keeps_searching_after_first_solution():
    s = NQueensStepper(4)
    events = _run(s)
    solutions = [e for e in events if e.kind is BacktrackEvent.SOLUTION]
    assert [e.value for e in solutions] == [(1, 3, 0, 2), (2, 0, 3, 1)]
    assert events[-1].kind is BacktrackEvent.DONE
    assert events.index(solutions[0]) < events.index(solutions[1])


def test_one_queen():
    kinds = [e.kind for e in _run(NQueensStepper(1))]
    assert kinds == [BacktrackEvent.PLACE, BacktrackEvent.SOLUTION, BacktrackEvent.DONE]


def test_board_is_never_under_attack():
    s = NQueensStepper(6)
    while not s.is_done():
        s.step()
        placed = [(r, c) for r, c in enumerate(s.queens) if c >= 0]
        for i, (r1, c1) in enumerate(placed):
            for r2, c2 in placed[i + 1:]:
                assert c1 != c2
                assert abs(c1 - c2) != abs(r1 - r2)


def test_backtrack_resumes_past_last_column():
    s = NQueensStepper(4)
    events = _run(s)
    first_backtrack = next(e for e in events if e.kind is BacktrackEvent.BACKTRACK)
    row, col = first_backtrack.where
    # the next test in that row starts one column further on
    following = events[events.index(first_backtrack) + 1]
    assert following.where[0] == row
    assert following.where[1] == col + 1


def test_empty_board_finishes_on_first_step():
    s = NQueensStepper(0)
    assert not s.is_done()
    event = s.step()
    assert event.kind is BacktrackEvent.DONE
    assert s.solutions == []
    assert solve_all(0) == []


def test_negative_size_rejected():
    with pytest.raises(InvalidParameterError):
        NQueensStepper(-1)
