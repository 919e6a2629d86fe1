"""
pathfinding.py — Grid Shortest-Path Steppers
=============================================
BFS, DFS, Dijkstra and A* over a WallGrid (4-connected, unit cost, moves
blocked by walls).  All four share one lifecycle:

    INIT ──► SEARCH ──► RECONSTRUCT ──► DONE
               │
               └──► NO_PATH            (frontier exhausted)

SEARCH events:
    VISIT     a cell is expanded (BFS/DFS: first time at the head/top;
              Dijkstra/A*: popped and finalised)
    FRONTIER  a neighbour gets a new parent pointer and joins the frontier
    FOUND     the goal is reached; BFS/DFS on discovery, Dijkstra/A* on
              finalisation (the point at which their distance is exact)

RECONSTRUCT follows one parent pointer per RECON_PATH event, from the goal
back to the start, prepending each cell to `path`.  Once the start is
reached `path` holds the finished route start → goal.

Silent transitions folded into the next event: BFS dropping an exhausted
head, DFS popping an exhausted frame, Dijkstra/A* skipping a stale heap
entry or finishing a cell's neighbour scan.
"""

import heapq
import math
from abc import abstractmethod
from collections import deque
from enum import Enum
from itertools import chain
from typing import Callable, Deque, Dict, List, Optional, Set, Tuple

from graph.grid import DIRECTIONS, Cell, WallGrid
from steppers.base import Stepper
from steppers.errors import InvalidParameterError
from steppers.event import PathEvent, StepEvent


# ---------------------------------------------------------------------------
# Heuristics (all admissible on a 4-connected unit-cost grid)
# ---------------------------------------------------------------------------
def manhattan(a: Cell, b: Cell) -> float:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def euclidean(a: Cell, b: Cell) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def octile(a: Cell, b: Cell) -> float:
    dr, dc = abs(a[0] - b[0]), abs(a[1] - b[1])
    return max(dr, dc) + (math.sqrt(2) - 1) * min(dr, dc)


def zero(a: Cell, b: Cell) -> float:
    return 0.0


HEURISTICS: Dict[str, Callable[[Cell, Cell], float]] = {
    "manhattan": manhattan,
    "euclidean": euclidean,
    "octile":    octile,
    "zero":      zero,
}


class PathPhase(Enum):
    INIT        = "init"
    SEARCH      = "search"
    RECONSTRUCT = "reconstruct"
    FINISHED    = "finished"


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------
class GridPathStepper(Stepper):
    """
    Attributes:
        grid        : Private copy of the wall grid.
        start, goal : Endpoints (goal defaults to the bottom-right cell).
        visited     : Cells already expanded.
        parent      : {cell: predecessor} for every discovered cell.
        path        : Route built so far, start → goal once reconstruction ends.
        recon_cell  : Next cell to prepend while reconstructing.
        found       : True once the goal is reached.
    """

    _COMMON_STATE = ("visited", "parent", "path", "recon_cell", "found", "phase")

    _VISIT_LINE    = 0
    _FRONTIER_LINE = 0

    def __init__(self, grid: WallGrid, start: Cell = (0, 0), goal: Optional[Cell] = None):
        super().__init__()
        self.grid: WallGrid = grid.copy()
        if self.grid.size:
            if goal is None:
                goal = (self.grid.rows - 1, self.grid.cols - 1)
            start, goal = tuple(start), tuple(goal)
            for label, cell in (("start", start), ("goal", goal)):
                if not self.grid.in_bounds(*cell):
                    raise InvalidParameterError(
                        f"{label} {cell} is outside the {self.grid.rows}x{self.grid.cols} grid")
        self.start = start
        self.goal  = goal

    def _signature(self):
        walls = tuple(tuple(row) for row in self.grid.walls)
        return (self.grid.rows, self.grid.cols, walls, self.start, self.goal)

    def _reset(self) -> None:
        self.visited: Set[Cell] = set()
        self.parent:  Dict[Cell, Optional[Cell]] = {}
        self.path:    List[Cell] = []
        self.recon_cell: Optional[Cell] = None
        self.found = False
        self.phase = PathPhase.INIT
        self._reset_family()

    def _reset_family(self) -> None:
        ...

    @property
    def succeeded(self) -> bool:
        return self.found

    @property
    def path_length(self) -> Optional[int]:
        """Moves on the found path, None until reconstruction has finished."""
        if self.found and self.phase is PathPhase.FINISHED:
            return len(self.path) - 1
        return None

    # ------------------------------------------------------------------
    # Family hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _seed(self) -> None:
        ...

    @abstractmethod
    def _search(self) -> Optional[StepEvent]:
        ...

    # ------------------------------------------------------------------
    def _advance(self) -> Optional[StepEvent]:
        if self.phase is PathPhase.INIT:
            if not self.grid.size:
                return self._no_path("The grid is empty.")
            self._seed()
            self.phase = PathPhase.SEARCH
            return self._emit(PathEvent.INIT, *self.start, value=self.goal, line=0,
                              explanation=f"Search from {self.start} to {self.goal}.")

        if self.phase is PathPhase.SEARCH:
            return self._search()

        if self.phase is PathPhase.RECONSTRUCT:
            cell = self.recon_cell
            self.path.insert(0, cell)
            self.recon_cell = self.parent.get(cell)
            if self.recon_cell is None:
                self.phase = PathPhase.FINISHED
            return self._emit(PathEvent.RECON_PATH, *cell, value=len(self.path) - 1,
                              line=len(self.PSEUDOCODE) - 2,
                              explanation=f"Path cell {cell} (following parent pointers back to the start).")

        return self._emit(PathEvent.DONE, value=len(self.path) - 1, line=len(self.PSEUDOCODE) - 1,
                          final=True, explanation=f"Route found: {len(self.path) - 1} move(s).")

    def _open_neighbour(self, cell: Cell, direction: int) -> Optional[Cell]:
        r, c = cell
        if self.grid.has_wall(r, c, direction):
            return None
        return self.grid.neighbour(r, c, direction)

    def _reach_goal(self, *where) -> StepEvent:
        self.found = True
        self.recon_cell = self.goal
        self.phase = PathPhase.RECONSTRUCT
        return self._emit(PathEvent.FOUND, *where, value=self.goal, line=self._FRONTIER_LINE,
                          explanation=f"Reached the goal {self.goal}; trace parent pointers back to the start.")

    def _no_path(self, reason: str) -> StepEvent:
        self.phase = PathPhase.FINISHED
        return self._emit(PathEvent.NO_PATH, line=len(self.PSEUDOCODE) - 1, final=True,
                          explanation=f"{reason} No path to the goal.")


# ---------------------------------------------------------------------------
# BFS
# ---------------------------------------------------------------------------
BFS_PSEUDOCODE: List[str] = [
    "queue ← [start]; seen ← {start}",                  # 0
    "while queue is not empty:",                        # 1
    "    u ← queue.front()",                            # 2
    "    for v in open neighbours of u:",               # 3
    "        if v not in seen:",                        # 4
    "            parent[v] ← u; seen.add(v)",           # 5
    "            if v == goal: reconstruct",            # 6
    "            queue.push(v)",                        # 7
    "    queue.pop_front()",                            # 8
    "walk parent pointers goal → start",                # 9
    "return path",                                      # 10
]


class BFSPathStepper(GridPathStepper):
    """
    Attributes:
        queue  : FIFO of discovered cells; the head is being expanded.
        seen   : Cells already given a parent.
        cursor : Index into DIRECTIONS of the head's next untried side.
    """

    KEY            = "path_bfs"
    PSEUDOCODE     = BFS_PSEUDOCODE
    _STATE         = GridPathStepper._COMMON_STATE + ("queue", "seen", "cursor")
    _VISIT_LINE    = 2
    _FRONTIER_LINE = 6

    def __init__(self, grid: WallGrid, start: Cell = (0, 0), goal: Optional[Cell] = None):
        super().__init__(grid, start, goal)
        self.reset()

    def _reset_family(self) -> None:
        self.queue:  Deque[Cell] = deque()
        self.seen:   Set[Cell]   = set()
        self.cursor = 0

    def _seed(self) -> None:
        self.queue.append(self.start)
        self.seen.add(self.start)
        self.parent[self.start] = None

    def _search(self) -> Optional[StepEvent]:
        if not self.queue:
            return self._no_path(f"Queue exhausted after {len(self.visited)} cell(s).")

        head = self.queue[0]
        if head not in self.visited:
            self.visited.add(head)
            self.cursor = 0
            if head == self.goal:
                return self._reach_goal(*head)
            return self._emit(PathEvent.VISIT, *head, line=self._VISIT_LINE,
                              explanation=f"Expand {head}, the oldest cell in the queue.")

        while self.cursor < len(DIRECTIONS):
            nxt = self._open_neighbour(head, DIRECTIONS[self.cursor])
            self.cursor += 1
            if nxt is None or nxt in self.seen:
                continue
            self.seen.add(nxt)
            self.parent[nxt] = head
            self.queue.append(nxt)
            if nxt == self.goal:
                return self._reach_goal(*head, *nxt)
            return self._emit(PathEvent.FRONTIER, *head, *nxt, line=7,
                              explanation=f"Enqueue {nxt}, reached from {head}.")

        self.queue.popleft()
        return None


# ---------------------------------------------------------------------------
# DFS
# ---------------------------------------------------------------------------
DFS_PSEUDOCODE: List[str] = [
    "stack ← [start]; seen ← {start}",                  # 0
    "while stack is not empty:",                        # 1
    "    u ← stack.top()",                              # 2
    "    v ← next open, unseen neighbour of u",         # 3
    "    if v exists:",                                 # 4
    "        parent[v] ← u; seen.add(v)",               # 5
    "        if v == goal: reconstruct",                # 6
    "        stack.push(v)",                            # 7
    "    else: stack.pop()",                            # 8
    "walk parent pointers goal → start",                # 9
    "return path",                                      # 10
]


class DFSPathStepper(GridPathStepper):
    """
    Attributes:
        stack : Frames [cell, next direction index], top at the end.
        seen  : Cells already given a parent.
    """

    KEY            = "path_dfs"
    PSEUDOCODE     = DFS_PSEUDOCODE
    _STATE         = GridPathStepper._COMMON_STATE + ("stack", "seen")
    _VISIT_LINE    = 2
    _FRONTIER_LINE = 6

    def __init__(self, grid: WallGrid, start: Cell = (0, 0), goal: Optional[Cell] = None):
        super().__init__(grid, start, goal)
        self.reset()

    def _reset_family(self) -> None:
        self.stack: List[list] = []
        self.seen:  Set[Cell]  = set()

    def _seed(self) -> None:
        self.stack.append([self.start, 0])
        self.seen.add(self.start)
        self.parent[self.start] = None

    def _search(self) -> Optional[StepEvent]:
        if not self.stack:
            return self._no_path(f"Stack exhausted after {len(self.visited)} cell(s).")

        frame = self.stack[-1]
        cell = frame[0]
        if cell not in self.visited:
            self.visited.add(cell)
            if cell == self.goal:
                return self._reach_goal(*cell)
            return self._emit(PathEvent.VISIT, *cell, line=self._VISIT_LINE,
                              explanation=f"Descend into {cell}.")

        while frame[1] < len(DIRECTIONS):
            nxt = self._open_neighbour(cell, DIRECTIONS[frame[1]])
            frame[1] += 1
            if nxt is None or nxt in self.seen:
                continue
            self.seen.add(nxt)
            self.parent[nxt] = cell
            self.stack.append([nxt, 0])
            if nxt == self.goal:
                return self._reach_goal(*cell, *nxt)
            return self._emit(PathEvent.FRONTIER, *cell, *nxt, line=7,
                              explanation=f"Push {nxt}, reached from {cell}.")

        self.stack.pop()
        return None


# ---------------------------------------------------------------------------
# Dijkstra / A*
# ---------------------------------------------------------------------------
DIJKSTRA_PSEUDOCODE: List[str] = [
    "dist[start] ← 0; heap ← [(0, start)]",                     # 0
    "while heap is not empty:",                                 # 1
    "    u ← heap.pop_min(); skip if already final",            # 2
    "    mark u final; if u == goal: reconstruct",              # 3
    "    for v in open neighbours of u:",                       # 4
    "        if dist[u] + 1 < dist[v]:",                        # 5
    "            dist[v] ← dist[u] + 1; parent[v] ← u",         # 6
    "            heap.push((priority(v), v))",                  # 7
    "walk parent pointers goal → start",                        # 8
    "return path",                                              # 9
]


class DijkstraPathStepper(GridPathStepper):
    """
    Attributes:
        dist      : Best known distance from the start.
        heap      : (priority, insertion counter, cell) entries; may hold
                    stale duplicates, skipped on pop.
        current   : Finalised cell whose neighbours are being relaxed.
        cursor    : Index into DIRECTIONS of current's next neighbour.
        relax_all : Relax every neighbour of `current` in a single step.
    """

    KEY            = "path_dijkstra"
    PSEUDOCODE     = DIJKSTRA_PSEUDOCODE
    _STATE         = GridPathStepper._COMMON_STATE + ("dist", "heap", "counter", "current", "cursor")
    _VISIT_LINE    = 3
    _FRONTIER_LINE = 3

    def __init__(
        self,
        grid: WallGrid,
        start: Cell = (0, 0),
        goal: Optional[Cell] = None,
        relax_all: bool = False,
    ):
        super().__init__(grid, start, goal)
        self.relax_all = relax_all
        self.reset()

    def _signature(self):
        return super()._signature() + (self.relax_all,)

    def _priority(self, cell: Cell, g: int) -> float:
        return g

    def _reset_family(self) -> None:
        self.dist:    Dict[Cell, int] = {}
        self.heap:    List[Tuple[float, int, Cell]] = []
        self.counter = 0
        self.current: Optional[Cell] = None
        self.cursor  = 0

    def _push(self, cell: Cell) -> None:
        heapq.heappush(self.heap, (self._priority(cell, self.dist[cell]), self.counter, cell))
        self.counter += 1

    def _seed(self) -> None:
        self.dist[self.start] = 0
        self.parent[self.start] = None
        self._push(self.start)

    def _relax(self, u: Cell, direction: int) -> Optional[Cell]:
        """Improve the neighbour through `direction` if possible; returns it when improved."""
        v = self._open_neighbour(u, direction)
        if v is None or v in self.visited:
            return None
        tentative = self.dist[u] + 1
        if tentative >= self.dist.get(v, math.inf):
            return None
        self.dist[v] = tentative
        self.parent[v] = u
        self._push(v)
        return v

    def _search(self) -> Optional[StepEvent]:
        if self.current is None:
            while self.heap:
                priority, _, cell = heapq.heappop(self.heap)
                if cell in self.visited:
                    continue
                self.visited.add(cell)
                self.current, self.cursor = cell, 0
                if cell == self.goal:
                    return self._reach_goal(*cell)
                return self._emit(
                    PathEvent.VISIT, *cell, value=self.dist[cell], line=self._VISIT_LINE,
                    explanation=f"Finalise {cell} at distance {self.dist[cell]} "
                                f"(priority {priority:g}).",
                )
            return self._no_path(f"Priority queue exhausted after {len(self.visited)} cell(s).")

        u = self.current
        if self.relax_all:
            improved = [v for v in (self._relax(u, d) for d in DIRECTIONS[self.cursor:]) if v is not None]
            self.current = None
            if not improved:
                return None
            return self._emit(
                PathEvent.FRONTIER, *chain(u, *improved), value=self.dist[u] + 1, line=7,
                explanation=f"Relax {len(improved)} neighbour(s) of {u} to distance {self.dist[u] + 1}.",
            )

        while self.cursor < len(DIRECTIONS):
            d = DIRECTIONS[self.cursor]
            self.cursor += 1
            v = self._relax(u, d)
            if v is not None:
                return self._emit(
                    PathEvent.FRONTIER, *u, *v, value=self.dist[v], line=7,
                    explanation=f"{v} improves to distance {self.dist[v]} via {u}.",
                )
        self.current = None
        return None


ASTAR_PSEUDOCODE: List[str] = [
    "g[start] ← 0; open ← [(h(start), start)]",                 # 0
    "while open is not empty:",                                 # 1
    "    u ← open.pop_min_f(); skip if already closed",         # 2
    "    close u; if u == goal: reconstruct",                   # 3
    "    for v in open neighbours of u:",                       # 4
    "        if g[u] + 1 < g[v]:",                              # 5
    "            g[v] ← g[u] + 1; parent[v] ← u",               # 6
    "            open.push((g[v] + h(v), v))",                  # 7
    "walk parent pointers goal → start",                        # 8
    "return path",                                              # 9
]


class AStarPathStepper(DijkstraPathStepper):
    """
    Dijkstra ordered by f = g + h(cell, goal).

    Attributes:
        heuristic : Name of the estimate in HEURISTICS.
    """

    KEY        = "path_astar"
    PSEUDOCODE = ASTAR_PSEUDOCODE

    def __init__(
        self,
        grid: WallGrid,
        start: Cell = (0, 0),
        goal: Optional[Cell] = None,
        heuristic: str = "manhattan",
        relax_all: bool = False,
    ):
        if heuristic not in HEURISTICS:
            raise InvalidParameterError(
                f"Unknown heuristic {heuristic!r}; choose from {', '.join(HEURISTICS)}")
        self.heuristic = heuristic
        self._h = HEURISTICS[heuristic]
        super().__init__(grid, start, goal, relax_all=relax_all)

    def _signature(self):
        return super()._signature() + (self.heuristic,)

    def _priority(self, cell: Cell, g: int) -> float:
        return g + self._h(cell, self.goal)
