"""Properties every registered stepper shares: determinism, undo, reset."""

import pytest

from engine.boundary import build_maze
from graph import Graph
from steppers import REGISTRY, SnapshotMismatchError, create
from steppers.sorting import BubbleSortStepper

SUDOKU = (
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


def _sudoku_with_blanks():
    grid = [[int(SUDOKU[r * 9 + c]) for c in range(9)] for r in range(9)]
    for r, c in [(0, 0), (0, 4), (1, 1), (2, 8), (4, 4), (5, 2), (6, 6), (7, 1), (8, 8), (8, 0)]:
        grid[r][c] = 0
    return grid


def _params(key):
    """Small, fixed instance for every registry key."""
    if key == "binary_search":
        return {"array": [1, 3, 5, 7, 9, 11], "target": 9}
    if key in ("bubble_sort", "selection_sort"):
        return {"array": [5, 1, 4, 2, 8, 3]}
    if key == "dfs_traversal":
        return {"graph": Graph.generate_random(num_nodes=8, edge_probability=0.3, seed=4)}
    if key == "n_queens":
        return {"n": 5}
    if key == "sudoku":
        return {"grid": _sudoku_with_blanks()}
    if key.startswith("maze_"):
        return {"rows": 4, "cols": 5, "seed": 11}
    params = {"grid": build_maze("maze_prim", 5, 5, seed=2, loop_percent=20)}
    if key == "path_astar":
        params["heuristic"] = "euclidean"
    return params


def _run(stepper):
    events = []
    while not stepper.is_done():
        events.append(stepper.step())
    return events


KEYS = list(REGISTRY)


@pytest.mark.parametrize("key", KEYS)
def test_independent_runs_are_identical(key):
    assert _run(create(key, **_params(key))) == _run(create(key, **_params(key)))


@pytest.mark.parametrize("key", KEYS)
def test_restore_replays_the_same_future(key):
    reference = _run(create(key, **_params(key)))
    for cut in sorted({0, 1, len(reference) // 3, len(reference) // 2, len(reference) - 1}):
        s = create(key, **_params(key))
        for _ in range(cut):
            s.step()
        snap = s.snapshot()
        # wander ahead, then come back
        for _ in range(5):
            s.step()
        s.restore(snap)
        assert _run(s) == reference[cut:]


@pytest.mark.parametrize("key", KEYS)
def test_snapshot_is_not_aliased(key):
    s = create(key, **_params(key))
    s.step()
    snap = s.snapshot()
    before = repr(snap.state)
    for _ in range(10):
        s.step()
    assert repr(snap.state) == before


@pytest.mark.parametrize("key", KEYS)
def test_reset_returns_to_initial_configuration(key):
    s = create(key, **_params(key))
    first = _run(s)
    s.reset()
    assert not s.is_done()
    assert s.steps_taken == 0
    assert _run(s) == first


@pytest.mark.parametrize("key", KEYS)
def test_event_contract(key):
    s = create(key, **_params(key))
    assert not s.is_done()
    events = _run(s)
    assert [e.step_number for e in events] == list(range(len(events)))
    assert [e.is_final for e in events] == [False] * (len(events) - 1) + [True]
    for e in events:
        assert 0 <= e.pseudocode_line < len(s.PSEUDOCODE)
    assert s.step() is None


def test_foreign_snapshot_rejected():
    a = BubbleSortStepper([3, 1, 2])
    b = BubbleSortStepper([1, 2, 3])
    with pytest.raises(SnapshotMismatchError):
        b.restore(a.snapshot())


def test_snapshot_from_other_grid_size_rejected():
    small = create("maze_dfs", rows=3, cols=3, seed=1)
    large = create("maze_dfs", rows=4, cols=4, seed=1)
    with pytest.raises(SnapshotMismatchError):
        large.restore(small.snapshot())


def test_snapshot_from_other_algorithm_rejected():
    grid = build_maze("open", 3, 3)
    bfs = create("path_bfs", grid=grid)
    dfs = create("path_dfs", grid=grid)
    with pytest.raises(SnapshotMismatchError):
        dfs.restore(bfs.snapshot())


def test_unknown_key_rejected():
    with pytest.raises(ValueError):
        create("bogo_sort", array=[1])
