"""
maze.py — Maze Generators
==========================
Three randomised spanning-tree builders over a WallGrid that starts with
every wall standing.  All draw randomness from the stepper-owned generator,
so a seed fixes the maze and the exact event sequence.

    maze_dfs      recursive backtracker on an explicit cell stack
    maze_prim     random frontier-edge growth from (0, 0)
    maze_kruskal  shuffled edge list + union-find

Each run emits INIT, then CARVE (and BACKTRACK for DFS) events, then DONE.
A Prim frontier edge whose far cell is already in the maze, and a Kruskal
edge inside one component, are skipped silently inside the same step.

With `loop_percent` > 0 the finished tree is braided by add_loops() just
before DONE; the DONE event's value is the number of walls it opened.
"""

import logging
from enum import Enum
from typing import List, Optional, Set, Tuple

from graph.grid import DIRECTIONS, DIRECTION_NAMES, E, S, Cell, WallGrid, add_loops
from steppers.base import Stepper
from steppers.errors import InvalidParameterError
from steppers.event import MazeEvent, StepEvent

logger = logging.getLogger(__name__)


class MazePhase(Enum):
    INIT     = "init"
    CARVING  = "carving"
    FINISHED = "finished"


class MazeStepper(Stepper):
    """
    Shared state for the three generators.

    Attributes:
        rows, cols   : Grid dimensions (0 gives an empty grid).
        loop_percent : Braiding density applied once the tree is complete.
        grid         : The WallGrid being carved.
        carved       : Number of walls removed so far.
    """

    _COMMON_STATE = ("grid", "carved", "phase")
    _CARVE_LINE   = 0

    def __init__(self, rows: int, cols: int, seed: Optional[int] = None, loop_percent: int = 0):
        super().__init__(seed)
        if rows < 0 or cols < 0:
            raise InvalidParameterError(f"Maze dimensions must be non-negative, got {rows}x{cols}")
        if not 0 <= loop_percent <= 100:
            raise InvalidParameterError(f"loop_percent must be in 0..100, got {loop_percent}")
        self.rows = rows
        self.cols = cols
        self.loop_percent = loop_percent
        self.reset()

    def _signature(self):
        return (self.rows, self.cols, self.seed, self.loop_percent)

    def _reset(self) -> None:
        self.grid = WallGrid.full(self.rows, self.cols)
        self.carved = 0
        self.phase = MazePhase.INIT if self.grid.size else MazePhase.FINISHED
        self._reset_family()

    def _reset_family(self) -> None:
        ...

    def _carve(self, cell: Cell, direction: int) -> StepEvent:
        r, c = cell
        nr, nc = self.grid.carve(r, c, direction)
        self.carved += 1
        return self._emit(
            MazeEvent.CARVE, r, c, nr, nc, value=DIRECTION_NAMES[direction], line=self._CARVE_LINE,
            explanation=f"Knock down the {DIRECTION_NAMES[direction]} wall of ({r}, {c}) "
                        f"to join ({nr}, {nc}).",
        )

    def _finish(self) -> StepEvent:
        self.phase = MazePhase.FINISHED
        opened = 0
        if self.loop_percent and self.grid.size:
            opened = add_loops(self.grid, self.loop_percent, self._rng)
            logger.debug("%s braided %d extra walls", self.KEY, opened)
        text = f"Maze complete: {self.carved} passages carved."
        if opened:
            text += f" {opened} extra walls opened for loops."
        return self._emit(MazeEvent.DONE, value=opened, line=len(self.PSEUDOCODE) - 1,
                          final=True, explanation=text)


# ---------------------------------------------------------------------------
# Recursive backtracker
# ---------------------------------------------------------------------------
DFS_PSEUDOCODE: List[str] = [
    "stack ← [(0, 0)]; mark (0, 0) visited",                  # 0
    "while stack is not empty:",                              # 1
    "    cell ← stack.top()",                                 # 2
    "    for dir in shuffled(N, E, S, W):",                   # 3
    "        if neighbour(cell, dir) is unvisited:",          # 4
    "            carve wall; mark visited; push neighbour",   # 5
    "            continue while",                             # 6
    "    stack.pop()   # dead end, backtrack",                # 7
    "done",                                                   # 8
]


class MazeDFSStepper(MazeStepper):
    """
    Attributes:
        stack   : Cells on the current carving path, top at the end.
        visited : Cells already part of the maze.
    """

    KEY         = "maze_dfs"
    PSEUDOCODE  = DFS_PSEUDOCODE
    _STATE      = MazeStepper._COMMON_STATE + ("stack", "visited")
    _CARVE_LINE = 5

    def _reset_family(self) -> None:
        self.stack:   List[Cell] = []
        self.visited: Set[Cell]  = set()

    def _advance(self) -> Optional[StepEvent]:
        if self.phase is MazePhase.FINISHED:
            return self._finish()

        if self.phase is MazePhase.INIT:
            self.stack.append((0, 0))
            self.visited.add((0, 0))
            self.phase = MazePhase.CARVING
            return self._emit(MazeEvent.INIT, 0, 0, line=0,
                              explanation="Start carving from the top-left cell.")

        if not self.stack:
            return self._finish()

        r, c = self.stack[-1]
        order = list(DIRECTIONS)
        self._rng.shuffle(order)
        for d in order:
            nxt = self.grid.neighbour(r, c, d)
            if nxt is not None and nxt not in self.visited:
                self.visited.add(nxt)
                self.stack.append(nxt)
                return self._carve((r, c), d)

        self.stack.pop()
        return self._emit(MazeEvent.BACKTRACK, r, c, line=7,
                          explanation=f"({r}, {c}) has no unvisited neighbour: backtrack.")


# ---------------------------------------------------------------------------
# Prim
# ---------------------------------------------------------------------------
PRIM_PSEUDOCODE: List[str] = [
    "maze ← {(0, 0)}; frontier ← walls of (0, 0)",            # 0
    "while frontier is not empty:",                           # 1
    "    (cell, dir) ← remove random edge from frontier",     # 2
    "    if far side is not in maze:",                        # 3
    "        carve wall; add far side to maze",               # 4
    "        frontier += walls of far side",                  # 5
    "done",                                                   # 6
]


class MazePrimStepper(MazeStepper):
    """
    Attributes:
        in_maze  : Cells already joined.
        frontier : Unordered list of (cell, direction) candidate edges.
    """

    KEY         = "maze_prim"
    PSEUDOCODE  = PRIM_PSEUDOCODE
    _STATE      = MazeStepper._COMMON_STATE + ("in_maze", "frontier")
    _CARVE_LINE = 4

    def _reset_family(self) -> None:
        self.in_maze:  Set[Cell] = set()
        self.frontier: List[Tuple[Cell, int]] = []

    def _grow(self, cell: Cell) -> None:
        self.in_maze.add(cell)
        r, c = cell
        for d in DIRECTIONS:
            nxt = self.grid.neighbour(r, c, d)
            if nxt is not None and nxt not in self.in_maze:
                self.frontier.append((cell, d))

    def _advance(self) -> Optional[StepEvent]:
        if self.phase is MazePhase.FINISHED:
            return self._finish()

        if self.phase is MazePhase.INIT:
            self._grow((0, 0))
            self.phase = MazePhase.CARVING
            return self._emit(MazeEvent.INIT, 0, 0, value=len(self.frontier), line=0,
                              explanation=f"Seed the maze at (0, 0); {len(self.frontier)} frontier edge(s).")

        if not self.frontier:
            return self._finish()

        # swap-remove a uniformly random edge
        k = self._rng.randrange(len(self.frontier))
        self.frontier[k], self.frontier[-1] = self.frontier[-1], self.frontier[k]
        cell, d = self.frontier.pop()
        far = self.grid.neighbour(cell[0], cell[1], d)
        if far in self.in_maze:
            return None
        self._grow(far)
        return self._carve(cell, d)


# ---------------------------------------------------------------------------
# Kruskal
# ---------------------------------------------------------------------------
KRUSKAL_PSEUDOCODE: List[str] = [
    "edges ← shuffled(all interior walls); each cell its own set",    # 0
    "for (a, b) in edges:",                                           # 1
    "    if find(a) != find(b):",                                     # 2
    "        carve wall between a and b",                             # 3
    "        union(a, b)",                                            # 4
    "done",                                                           # 5
]


class MazeKruskalStepper(MazeStepper):
    """
    Attributes:
        edges  : Shuffled (row, col, direction) list, E and S walls only.
        cursor : Index of the next edge to consume.
        parent : Union-find parent per cell id (row * cols + col).
        rank   : Union-by-rank heights.
    """

    KEY         = "maze_kruskal"
    PSEUDOCODE  = KRUSKAL_PSEUDOCODE
    _STATE      = MazeStepper._COMMON_STATE + ("edges", "cursor", "parent", "rank")
    _CARVE_LINE = 3

    def _reset_family(self) -> None:
        self.edges: List[Tuple[int, int, int]] = [
            (r, c, d)
            for r, c in self.grid.cells()
            for d in (E, S)
            if self.grid.neighbour(r, c, d) is not None
        ]
        self._rng.shuffle(self.edges)
        self.cursor = 0
        self.parent: List[int] = list(range(self.grid.size))
        self.rank:   List[int] = [0] * self.grid.size

    def _find(self, x: int) -> int:
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def _union(self, a: int, b: int) -> bool:
        ra, rb = self._find(a), self._find(b)
        if ra == rb:
            return False
        if self.rank[ra] < self.rank[rb]:
            ra, rb = rb, ra
        self.parent[rb] = ra
        if self.rank[ra] == self.rank[rb]:
            self.rank[ra] += 1
        return True

    def _advance(self) -> Optional[StepEvent]:
        if self.phase is MazePhase.FINISHED:
            return self._finish()

        if self.phase is MazePhase.INIT:
            self.phase = MazePhase.CARVING
            return self._emit(MazeEvent.INIT, 0, 0, value=len(self.edges), line=0,
                              explanation=f"Shuffle {len(self.edges)} interior walls; "
                                          f"{self.grid.size} cells start as separate sets.")

        if self.cursor >= len(self.edges):
            return self._finish()

        r, c, d = self.edges[self.cursor]
        self.cursor += 1
        nr, nc = self.grid.neighbour(r, c, d)
        if not self._union(r * self.cols + c, nr * self.cols + nc):
            return None
        return self._carve((r, c), d)
