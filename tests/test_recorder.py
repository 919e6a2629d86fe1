import json

import pytest

from engine.boundary import build_maze
from engine.recorder import Recorder, RunMetrics, compare


def _recorded(key, **params):
    rec = Recorder()
    rec.start(key, **params)
    rec.run_to_completion()
    return rec


def test_metrics_for_a_finished_run():
    rec = _recorded("selection_sort", array=[3, 1, 2])
    m = rec.get_metrics()
    assert m.key == "selection_sort"
    assert m.label == "Selection Sort"
    assert m.finished and m.success
    assert m.final_event == "DONE"
    assert m.total_steps == len(rec.events) == sum(m.event_counts.values())
    assert m.wall_time_ms >= 0


def test_failed_search_is_not_a_success():
    m = _recorded("binary_search", array=[1, 2, 3], target=7).metrics
    assert m.finished
    assert not m.success
    assert m.final_event == "DONE_NOT_FOUND"


def test_step_cap_leaves_run_unfinished():
    rec = Recorder()
    rec.start("n_queens", n=8)
    m = rec.run_to_completion(max_steps=10)
    assert m.total_steps == 10
    assert not m.finished
    assert not m.success


def test_unknown_key():
    with pytest.raises(ValueError):
        Recorder().start("quantum_sort")


def test_run_before_start():
    with pytest.raises(RuntimeError):
        Recorder().run_to_completion()


def test_export_is_json_serialisable():
    grid = build_maze("maze_kruskal", 4, 4, seed=3)
    rec = _recorded("path_astar", grid=grid, heuristic="octile")
    dumped = json.loads(json.dumps(rec.export()))
    assert dumped["key"] == "path_astar"
    assert dumped["params"]["grid"]["rows"] == 4
    assert len(dumped["events"]) == dumped["metrics"]["total_steps"]
    assert dumped["events"][-1]["is_final"]
    assert dumped["events"][0]["family"] == "PathEvent"


def test_compare_same_instance():
    array = [9, 4, 7, 1, 8, 2]
    left = _recorded("bubble_sort", array=array)
    right = _recorded("selection_sort", array=array)
    result = compare(left, right)
    assert result.same_outcome
    fewer = min((left.metrics, right.metrics), key=lambda m: m.total_steps)
    if left.metrics.total_steps == right.metrics.total_steps:
        assert result.winner_steps == "tie"
    else:
        assert result.winner_steps == fewer.label


def test_compare_tie_and_mixed_outcome():
    a = _recorded("binary_search", array=[1, 3, 5], target=3)
    b = _recorded("binary_search", array=[1, 3, 5], target=3)
    assert compare(a, b).winner_steps == "tie"

    miss = _recorded("binary_search", array=[1, 3, 5], target=4)
    assert not compare(a, miss).same_outcome


def test_compare_without_metrics():
    result = compare(Recorder(), Recorder())
    assert result.left == RunMetrics()
    assert result.winner_steps == "tie"
