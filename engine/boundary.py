"""
boundary.py — Outer-Edge Conversions
=====================================
Everything between raw caller input (JSON bodies, puzzle text, clicked
coordinates) and stepper construction lives here, so nothing malformed or
out of range ever reaches stepper state.

Responsibilities:
  1. Sudoku text codec             (81 digits, 0 = blank)
  2. Clamping of external cells    (clicks outside the grid)
  3. JSON payload → constructor kwargs, per registry key
  4. StepEvent / stepper view → JSON-safe dicts
"""

import random
import re
from collections import deque
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence

from engine.settings import DEFAULTS
from graph import Graph, WallGrid
from steppers import REGISTRY, InvalidParameterError, StepEvent, Stepper, create, generate_puzzle
from steppers.sudoku import Grid


# ---------------------------------------------------------------------------
# Sudoku text
# ---------------------------------------------------------------------------
def parse_sudoku(text: str) -> Grid:
    """
    Read a puzzle written as 81 digits.  Every non-digit (spaces, newlines,
    box separators) is ignored; '.' is not a digit, so write blanks as 0.
    """
    digits = re.sub(r"[^0-9]", "", text or "")
    if len(digits) != 81:
        raise InvalidParameterError(f"Sudoku text needs exactly 81 digits, got {len(digits)}")
    return [[int(digits[r * 9 + c]) for c in range(9)] for r in range(9)]


def format_sudoku(grid: Sequence[Sequence[int]]) -> str:
    return "".join(str(int(v)) for row in grid for v in row)


# ---------------------------------------------------------------------------
# Clamping
# ---------------------------------------------------------------------------
def clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def clamp_cell(cell: Optional[Sequence[int]], rows: int, cols: int) -> Optional[tuple]:
    """Nearest in-bounds (row, col); None for a missing cell or an empty grid."""
    if cell is None or rows <= 0 or cols <= 0:
        return None
    if not isinstance(cell, (list, tuple)) or len(cell) != 2:
        raise InvalidParameterError(f"A cell must be a [row, col] pair, got {cell!r}")
    r, c = _as_int(cell[0], "row"), _as_int(cell[1], "col")
    return (clamp(r, 0, rows - 1), clamp(c, 0, cols - 1))


def _as_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"'{name}' must be an integer, got {value!r}") from exc


def _int(payload: Mapping[str, Any], name: str, default: int, lo: int, hi: int) -> int:
    return clamp(_as_int(payload.get(name, default), name), lo, hi)


def _seed(payload: Mapping[str, Any]) -> Optional[int]:
    seed = payload.get("seed")
    return None if seed is None else _as_int(seed, "seed")


def _int_list(payload: Mapping[str, Any], name: str, limit: int) -> Optional[list]:
    values = payload.get(name)
    if values is None:
        return None
    if isinstance(values, str):
        values = [v for v in re.split(r"[\s,]+", values.strip()) if v]
    if not isinstance(values, (list, tuple)):
        raise InvalidParameterError(f"'{name}' must be a list of integers")
    return [_as_int(v, name) for v in values[:limit]]


def _probability(value: Any) -> float:
    try:
        p = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"'edge_probability' must be a number, got {value!r}") from exc
    return max(0.0, min(1.0, p))


# ---------------------------------------------------------------------------
# Grids
# ---------------------------------------------------------------------------
def build_maze(
    algorithm: str,
    rows: int,
    cols: int,
    seed: Optional[int] = None,
    loop_percent: int = 0,
) -> WallGrid:
    """Run a maze generator to completion and hand back its grid.
    `algorithm="open"` gives a grid with no interior walls."""
    if algorithm == "open":
        return WallGrid.open(rows, cols)
    info = REGISTRY.get(algorithm)
    if info is None or info.family != "maze":
        raise InvalidParameterError(f"Unknown maze algorithm '{algorithm}'")
    maze = info.factory(rows=rows, cols=cols, seed=seed, loop_percent=loop_percent)
    while maze.step() is not None:
        pass
    return maze.grid


def _grid_from_dict(data: Mapping[str, Any], max_side: int) -> WallGrid:
    """WallGrid from its to_dict() form (rows, cols, optional walls)."""
    rows, cols = _as_int(data.get("rows"), "rows"), _as_int(data.get("cols"), "cols")
    if not (0 <= rows <= max_side and 0 <= cols <= max_side):
        raise InvalidParameterError(f"Grid sides must be in 0..{max_side}, got {rows}x{cols}")
    try:
        return WallGrid.from_dict({**data, "rows": rows, "cols": cols})
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"Malformed wall grid: {exc}") from exc


def _graph_from_dict(data: Mapping[str, Any], max_nodes: int) -> Graph:
    """Graph from its to_dict() form (nodes, edges, directed)."""
    try:
        graph = Graph.from_dict(data)
        graph.node_ids()    # ids must be mutually sortable
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"Malformed graph: {exc}") from exc
    if graph.node_count() > max_nodes:
        raise InvalidParameterError(f"Graph has {graph.node_count()} nodes; the limit is {max_nodes}")
    return graph


# ---------------------------------------------------------------------------
# Payload → constructor parameters
# ---------------------------------------------------------------------------
def build_params(key: str, payload: Optional[Mapping[str, Any]] = None,
                 settings: Mapping[str, Any] = DEFAULTS) -> Dict[str, Any]:
    """
    Translate a loose JSON body into the keyword arguments of REGISTRY[key].
    Sizes are clamped to the configured ceilings; missing values get
    seeded random (or fixed demo) defaults.
    """
    info = REGISTRY.get(key)
    if info is None:
        raise InvalidParameterError(f"Unknown algorithm '{key}'")
    payload = payload or {}
    if not isinstance(payload, Mapping):
        raise InvalidParameterError("Parameters must be a JSON object")
    seed = _seed(payload)
    max_array = int(settings["MAX_ARRAY"])
    max_grid  = int(settings["MAX_GRID"])

    if info.family == "search":
        array = _int_list(payload, "array", max_array)
        if array is None:
            array = [1, 3, 5, 7, 9, 11]
        target = _as_int(payload.get("target", array[len(array) // 2] if array else 0), "target")
        return {"array": sorted(array), "target": target}

    if info.family == "sorting":
        array = _int_list(payload, "array", max_array)
        if array is None:
            size = _int(payload, "size", 10, 0, max_array)
            array = random.Random(seed).sample(range(1, 100), min(size, 99))
        return {"array": array}

    if key == "dfs_traversal":
        source = payload.get("graph")
        if isinstance(source, Mapping):
            graph = _graph_from_dict(source, max_array)
        elif source:
            graph = Graph.from_adjacency_list(str(source), directed=bool(payload.get("directed")))
        else:
            graph = Graph.generate_random(
                num_nodes=_int(payload, "nodes", 8, 0, max_array),
                edge_probability=_probability(payload.get("edge_probability", 0.3)),
                directed=bool(payload.get("directed")),
                connected=bool(payload.get("connected", True)),
                seed=seed,
            )
        params: Dict[str, Any] = {"graph": graph}
        start = payload.get("start")
        if start is not None:
            # adjacency-list labels are ints whenever every label is numeric
            ids = graph.node_ids()
            params["start"] = start if start in ids else _as_int(start, "start")
        return params

    if key == "n_queens":
        return {"n": _int(payload, "n", 8, 0, int(settings["MAX_QUEENS"]))}

    if key == "sudoku":
        if payload.get("puzzle"):
            grid = parse_sudoku(str(payload["puzzle"]))
        else:
            blanks = _int(payload, "blanks", int(settings["SUDOKU_BLANKS"]), 0, 81)
            grid = generate_puzzle(blanks, seed=seed, unique=bool(payload.get("unique", True)))
        return {"grid": grid}

    rows = _int(payload, "rows", 10, 0, max_grid)
    cols = _int(payload, "cols", 10, 0, max_grid)
    loop_percent = _int(payload, "loop_percent", 0, 0, 100)

    if info.family == "maze":
        return {"rows": rows, "cols": cols, "seed": seed, "loop_percent": loop_percent}

    # pathfinding: an explicit wall grid wins over a generated maze
    if isinstance(payload.get("grid"), Mapping):
        grid = _grid_from_dict(payload["grid"], max_grid)
        rows, cols = grid.rows, grid.cols
    else:
        grid = build_maze(str(payload.get("maze", "maze_dfs")), rows, cols, seed, loop_percent)
    params = {
        "grid":  grid,
        "start": clamp_cell(payload.get("start", (0, 0)), rows, cols) or (0, 0),
        "goal":  clamp_cell(payload.get("goal", (rows - 1, cols - 1)), rows, cols),
    }
    if key in ("path_dijkstra", "path_astar"):
        params["relax_all"] = bool(payload.get("relax_all", False))
    if info.has_heuristic:
        params["heuristic"] = str(payload.get("heuristic", "manhattan"))
    return params


def build_stepper(key: str, payload: Optional[Mapping[str, Any]] = None,
                  settings: Mapping[str, Any] = DEFAULTS) -> Stepper:
    return create(key, **build_params(key, payload, settings))


# ---------------------------------------------------------------------------
# JSON views
# ---------------------------------------------------------------------------
def to_jsonable(value: Any) -> Any:
    """Recursively convert stepper values into JSON-safe structures."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (WallGrid, Graph)):
        return value.to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (set, frozenset)):
        return [to_jsonable(v) for v in sorted(value)]
    if isinstance(value, (list, tuple, deque)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, float) and value == float("inf"):
        return None
    return value


def event_to_dict(event: StepEvent) -> Dict[str, Any]:
    return {
        "family":          type(event.kind).__name__,
        "kind":            event.kind.value,
        "step_number":     event.step_number,
        "where":           to_jsonable(event.where),
        "value":           to_jsonable(event.value),
        "pseudocode_line": event.pseudocode_line,
        "explanation":     event.explanation,
        "is_final":        event.is_final,
    }


# read-only query surface per registry key
VIEW_FIELDS: Dict[str, Sequence[str]] = {
    "binary_search":  ("array", "target", "low", "mid", "high", "found_index"),
    "bubble_sort":    ("array", "i", "j"),
    "selection_sort": ("array", "i", "j", "min_index"),
    "dfs_traversal":  ("adjacency", "order", "visited"),
    "n_queens":       ("n", "queens", "row", "col", "solutions"),
    "sudoku":         ("grid", "fixed", "solved"),
    "maze_dfs":       ("grid", "stack", "carved"),
    "maze_prim":      ("grid", "in_maze", "carved"),
    "maze_kruskal":   ("grid", "cursor", "carved"),
    "path_bfs":       ("grid", "start", "goal", "visited", "queue", "path", "found"),
    "path_dfs":       ("grid", "start", "goal", "visited", "path", "found"),
    "path_dijkstra":  ("grid", "start", "goal", "visited", "dist", "path", "found"),
    "path_astar":     ("grid", "start", "goal", "visited", "dist", "path", "found"),
}


def stepper_view(stepper: Stepper) -> Dict[str, Any]:
    view: Dict[str, Any] = {
        "key":         stepper.KEY,
        "done":        stepper.is_done(),
        "succeeded":   stepper.succeeded,
        "steps_taken": stepper.steps_taken,
    }
    for name in VIEW_FIELDS.get(stepper.KEY, ()):
        value = getattr(stepper, name)
        if name == "dist":
            value = [[list(cell), d] for cell, d in value.items()]
        elif name == "adjacency":
            value = [[node, nbrs] for node, nbrs in value.items()]
        view[name] = to_jsonable(value)
    describe = getattr(stepper, "describe", None)
    if describe is not None:
        view["status"] = describe()
    return view
