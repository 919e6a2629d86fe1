"""
steppers/__init__.py — Stepper Registry
========================================
Single source of truth for every algorithm the player can drive.

    from steppers import REGISTRY, create

    stepper = create("bubble_sort", array=[5, 3, 8])

REGISTRY is a dict:
    {
        "bubble_sort": StepperInfo(key, label, factory, family, pseudocode, …),
        …
    }

Adding an algorithm means writing one Stepper subclass and one entry here.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from steppers.base import Snapshot, Stepper
from steppers.errors import InvalidParameterError, SnapshotMismatchError, StepperError
from steppers.event import (
    BacktrackEvent, MazeEvent, PathEvent, SearchEvent, SortEvent, StepEvent, TraversalEvent,
)
from steppers.maze import MazeDFSStepper, MazeKruskalStepper, MazePrimStepper
from steppers.nqueens import NQueensStepper, solve_all
from steppers.pathfinding import (
    HEURISTICS, AStarPathStepper, BFSPathStepper, DFSPathStepper, DijkstraPathStepper,
)
from steppers.search import BinarySearchStepper
from steppers.sorting import BubbleSortStepper, SelectionSortStepper
from steppers.sudoku import SudokuStepper, generate_puzzle
from steppers.traversal import DFSTraversalStepper


# ---------------------------------------------------------------------------
# StepperInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class StepperInfo:
    key:              str                   # registry key, e.g. "maze_prim"
    label:            str                   # human label, e.g. "Prim's Maze"
    factory:          Callable[..., Stepper]
    family:           str                   # search / sorting / traversal / backtracking / maze / pathfinding
    pseudocode:       List[str]
    tags:             List[str] = field(default_factory=list)
    randomized:       bool      = False     # accepts / needs a seed
    has_heuristic:    bool      = False     # expose heuristic selector?
    complexity_time:  str       = ""
    complexity_space: str       = ""
    description:      str       = ""


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, StepperInfo] = {

    "binary_search": StepperInfo(
        key="binary_search", label="Binary Search", factory=BinarySearchStepper,
        family="search", pseudocode=BinarySearchStepper.PSEUDOCODE,
        tags=["array", "divide-and-conquer"],
        complexity_time="O(log n)", complexity_space="O(1)",
        description="Halves a sorted window until the target is found or the window is empty.",
    ),

    "bubble_sort": StepperInfo(
        key="bubble_sort", label="Bubble Sort", factory=BubbleSortStepper,
        family="sorting", pseudocode=BubbleSortStepper.PSEUDOCODE,
        tags=["array", "comparison-sort", "stable"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Swaps adjacent out-of-order pairs; each pass settles the largest remaining value.",
    ),

    "selection_sort": StepperInfo(
        key="selection_sort", label="Selection Sort", factory=SelectionSortStepper,
        family="sorting", pseudocode=SelectionSortStepper.PSEUDOCODE,
        tags=["array", "comparison-sort"],
        complexity_time="O(n²)", complexity_space="O(1)",
        description="Finds the minimum of the unsorted suffix and swaps it to the boundary.",
    ),

    "dfs_traversal": StepperInfo(
        key="dfs_traversal", label="Depth-First Traversal", factory=DFSTraversalStepper,
        family="traversal", pseudocode=DFSTraversalStepper.PSEUDOCODE,
        tags=["graph", "traversal"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Dives deep before backtracking; restarts on every unvisited component.",
    ),

    "n_queens": StepperInfo(
        key="n_queens", label="N-Queens", factory=NQueensStepper,
        family="backtracking", pseudocode=NQueensStepper.PSEUDOCODE,
        tags=["board", "backtracking", "enumeration"],
        complexity_time="O(N!)", complexity_space="O(N)",
        description="Places one queen per row and enumerates every non-attacking placement.",
    ),

    "sudoku": StepperInfo(
        key="sudoku", label="Sudoku Solver", factory=SudokuStepper,
        family="backtracking", pseudocode=SudokuStepper.PSEUDOCODE,
        tags=["board", "backtracking", "constraint"],
        complexity_time="O(9^k)", complexity_space="O(k)",
        description="Fills blanks in row-major order with the lowest legal digit, undoing dead ends.",
    ),

    "maze_dfs": StepperInfo(
        key="maze_dfs", label="Recursive Backtracker", factory=MazeDFSStepper,
        family="maze", pseudocode=MazeDFSStepper.PSEUDOCODE,
        tags=["grid", "maze", "spanning-tree"], randomized=True,
        complexity_time="O(R·C)", complexity_space="O(R·C)",
        description="Random walk that carves until stuck, then backtracks. Long, winding corridors.",
    ),

    "maze_prim": StepperInfo(
        key="maze_prim", label="Prim's Maze", factory=MazePrimStepper,
        family="maze", pseudocode=MazePrimStepper.PSEUDOCODE,
        tags=["grid", "maze", "spanning-tree"], randomized=True,
        complexity_time="O(R·C)", complexity_space="O(R·C)",
        description="Grows from one cell by opening random frontier walls. Short, bushy branches.",
    ),

    "maze_kruskal": StepperInfo(
        key="maze_kruskal", label="Kruskal's Maze", factory=MazeKruskalStepper,
        family="maze", pseudocode=MazeKruskalStepper.PSEUDOCODE,
        tags=["grid", "maze", "spanning-tree", "union-find"], randomized=True,
        complexity_time="O(R·C · α(R·C))", complexity_space="O(R·C)",
        description="Opens shuffled walls that join two separate regions until one region remains.",
    ),

    "path_bfs": StepperInfo(
        key="path_bfs", label="Breadth-First Search", factory=BFSPathStepper,
        family="pathfinding", pseudocode=BFSPathStepper.PSEUDOCODE,
        tags=["grid", "shortest-path", "unweighted"],
        complexity_time="O(R·C)", complexity_space="O(R·C)",
        description="Explores layer by layer. Finds the shortest path by move count.",
    ),

    "path_dfs": StepperInfo(
        key="path_dfs", label="Depth-First Search", factory=DFSPathStepper,
        family="pathfinding", pseudocode=DFSPathStepper.PSEUDOCODE,
        tags=["grid", "unweighted"],
        complexity_time="O(R·C)", complexity_space="O(R·C)",
        description="Dives deep before backtracking. Does NOT guarantee the shortest path.",
    ),

    "path_dijkstra": StepperInfo(
        key="path_dijkstra", label="Dijkstra's Algorithm", factory=DijkstraPathStepper,
        family="pathfinding", pseudocode=DijkstraPathStepper.PSEUDOCODE,
        tags=["grid", "shortest-path"],
        complexity_time="O(R·C log(R·C))", complexity_space="O(R·C)",
        description="Finalises the closest open cell first, relaxing one neighbour per step.",
    ),

    "path_astar": StepperInfo(
        key="path_astar", label="A* Search", factory=AStarPathStepper,
        family="pathfinding", pseudocode=AStarPathStepper.PSEUDOCODE,
        tags=["grid", "shortest-path", "heuristic"], has_heuristic=True,
        complexity_time="O(R·C log(R·C))", complexity_space="O(R·C)",
        description="Dijkstra plus a goal-distance estimate. Optimal with an admissible heuristic.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_stepper(key: str) -> Optional[StepperInfo]:
    """Return StepperInfo by key, or None."""
    return REGISTRY.get(key)


def list_steppers() -> List[StepperInfo]:
    """All registered steppers in insertion order."""
    return list(REGISTRY.values())


def steppers_by_family(family: str) -> List[StepperInfo]:
    return [s for s in REGISTRY.values() if s.family == family]


def create(key: str, **params) -> Stepper:
    """Build a fresh stepper.  Unknown keys raise ValueError."""
    info = REGISTRY.get(key)
    if info is None:
        raise ValueError(f"Unknown algorithm '{key}'")
    return info.factory(**params)


__all__ = [
    "StepperInfo",
    "REGISTRY",
    "get_stepper",
    "list_steppers",
    "steppers_by_family",
    "create",
    "Stepper",
    "Snapshot",
    "StepEvent",
    "StepperError",
    "InvalidParameterError",
    "SnapshotMismatchError",
    "SearchEvent",
    "SortEvent",
    "TraversalEvent",
    "BacktrackEvent",
    "MazeEvent",
    "PathEvent",
    "HEURISTICS",
    "solve_all",
    "generate_puzzle",
]
