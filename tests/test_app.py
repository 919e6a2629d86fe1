import pytest

import main
from steppers import REGISTRY


@pytest.fixture
def client():
    main.app.config["TESTING"] = True
    main._PLAYERS.clear()
    with main.app.test_client() as c:
        yield c
    main._PLAYERS.clear()


def _run(client, key, **params):
    return client.post("/api/run", json={"algo_key": key, "params": params})


def test_algorithm_cards(client):
    cards = client.get("/api/algorithms").get_json()
    assert [c["key"] for c in cards] == list(REGISTRY)
    astar = next(c for c in cards if c["key"] == "path_astar")
    assert astar["has_heuristic"]
    assert astar["pseudocode"]


def test_state_before_any_run(client):
    state = client.get("/api/state").get_json()
    assert state["state"] == "idle"
    assert state["view"] is None
    assert state["current_event"] is None


def test_run_and_navigate(client):
    resp = _run(client, "bubble_sort", array=[2, 1])
    assert resp.status_code == 200
    assert resp.get_json()["state"] == "paused"

    first = client.post("/api/step/next").get_json()
    assert first["steps_taken"] == 1
    assert first["current_event"]["kind"] == "init_pass"
    assert first["can_undo"]

    client.post("/api/step/next")
    back = client.post("/api/step/prev").get_json()
    assert back["current_event"] == first["current_event"]

    end = client.post("/api/step/end").get_json()
    assert end["state"] == "finished"
    assert end["view"]["array"] == [1, 2]
    assert end["view"]["succeeded"]
    assert client.post("/api/step/next").status_code == 400

    reset = client.post("/api/step/reset").get_json()
    assert reset["steps_taken"] == 0
    assert reset["view"]["array"] == [2, 1]


@pytest.mark.parametrize("body", [
    {},
    {"algo_key": "bogo_sort"},
    {"algo_key": "n_queens", "params": {"n": "many"}},
    {"algo_key": "dfs_traversal", "params": {"graph": "no separator here"}},
    {"algo_key": ["bubble_sort"]},
    {"algo_key": "bubble_sort", "params": [3, 1, 2]},
    {"algo_key": "path_bfs", "params": {"start": 5}},
    {"algo_key": "path_bfs", "params": {"goal": [1]}},
])
def test_run_rejects_bad_requests(client, body):
    resp = client.post("/api/run", json=body)
    assert resp.status_code == 400
    assert "error" in resp.get_json()


def test_run_rejects_non_object_body(client):
    resp = client.post("/api/run", json=["bubble_sort"])
    assert resp.status_code == 400
    assert client.post("/api/sudoku/generate", json=[1, 2]).status_code == 200


def test_sessions_beyond_the_cap_are_evicted(client):
    main.app.config["MAX_SESSIONS"] = 2
    try:
        first = main.app.test_client()
        _run(first, "bubble_sort", array=[2, 1])
        for _ in range(2):
            _run(main.app.test_client(), "bubble_sort", array=[2, 1])
        assert len(main._PLAYERS) == 2
        # the oldest session starts over with a fresh player
        assert first.get("/api/state").get_json()["state"] == "idle"
        assert len(main._PLAYERS) == 2
    finally:
        main.app.config["MAX_SESSIONS"] = main.DEFAULTS["MAX_SESSIONS"]


def test_recent_sessions_survive_eviction(client):
    main.app.config["MAX_SESSIONS"] = 2
    try:
        first, second = main.app.test_client(), main.app.test_client()
        _run(first, "bubble_sort", array=[2, 1])
        _run(second, "bubble_sort", array=[2, 1])
        first.get("/api/state")
        _run(main.app.test_client(), "bubble_sort", array=[2, 1])
        assert first.get("/api/state").get_json()["state"] == "paused"
        assert second.get("/api/state").get_json()["state"] == "idle"
    finally:
        main.app.config["MAX_SESSIONS"] = main.DEFAULTS["MAX_SESSIONS"]


def test_navigation_without_a_run(client):
    for route in ("next", "prev", "reset", "end", "play"):
        assert client.post(f"/api/step/{route}").status_code == 400


def test_play_toggle_and_tick(client):
    _run(client, "path_bfs", rows=3, cols=3, maze="open")
    assert client.post("/api/step/play").get_json()["is_playing"]
    tick = client.post("/api/step/tick").get_json()
    assert "advanced" in tick
    assert client.post("/api/step/play").get_json()["state"] == "paused"


def test_speed_config(client):
    assert client.post("/api/config/speed", json={"speed": "fast"}).get_json()["speed"] == 0.15
    assert client.post("/api/config/speed", json={"speed": 0.5}).get_json()["speed"] == 0.5
    assert client.post("/api/config/speed", json={"speed": 0}).get_json()["speed"] == 0.02
    assert client.post("/api/config/speed", json={"speed": "warp"}).status_code == 400
    assert client.post("/api/config/speed", json={"speed": [1]}).status_code == 400


def test_sudoku_generate(client):
    body = client.post("/api/sudoku/generate", json={"blanks": 20, "seed": 4}).get_json()
    assert len(body["puzzle"]) == 81
    assert 0 < body["puzzle"].count("0") <= 20
    again = client.post("/api/sudoku/generate", json={"blanks": 20, "seed": 4}).get_json()
    assert again["puzzle"] == body["puzzle"]

    run = _run(client, "sudoku", puzzle=body["puzzle"])
    assert run.status_code == 200
    end = client.post("/api/step/end").get_json()
    assert end["view"]["solved"]


def test_compare(client):
    resp = client.post("/api/compare", json={
        "left": {"algo_key": "path_bfs"},
        "right": {"algo_key": "path_astar", "params": {"heuristic": "manhattan"}},
        "params": {"rows": 6, "cols": 6, "maze": "maze_prim", "loop_percent": 30},
    })
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["same_outcome"]
    assert body["left"]["success"] and body["right"]["success"]
    assert body["winner_steps"] in ("tie", body["left"]["label"], body["right"]["label"])


def test_compare_requires_both_sides(client):
    assert client.post("/api/compare", json={"left": {"algo_key": "bubble_sort"}}).status_code == 400
    resp = client.post("/api/compare", json={
        "left": {"algo_key": "bubble_sort"}, "right": {"algo_key": "heap_sort"},
    })
    assert resp.status_code == 400


@pytest.mark.parametrize("body", [
    {"left": "bubble_sort", "right": {"algo_key": "selection_sort"}},
    {"left": {"algo_key": "bubble_sort"}, "right": {"algo_key": 7}},
    {"left": {"algo_key": "bubble_sort"}, "right": {"algo_key": "selection_sort"}, "params": [1]},
    {"left": {"algo_key": "bubble_sort", "params": [1]}, "right": {"algo_key": "selection_sort"}},
    {"left": {"algo_key": "path_bfs", "params": {"start": 5}}, "right": {"algo_key": "path_dfs"}},
])
def test_compare_rejects_malformed_sides(client, body):
    resp = client.post("/api/compare", json=body)
    assert resp.status_code == 400
    assert "error" in resp.get_json()
