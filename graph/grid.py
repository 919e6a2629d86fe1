"""
grid.py — Wall Grid
====================
rows × cols cells, each carrying a 4-bit wall mask:

    N = 1, E = 2, S = 4, W = 8        ALL_WALLS = 15

A wall between two neighbours is always stored on both sides; `carve()`
and `build_wall()` keep the pair consistent.  Maze generators start from
`WallGrid.full()`, path finders read the result (or an `open()` grid).
"""

import random
from collections import deque
from typing import Dict, Iterator, List, Optional, Tuple

Cell = Tuple[int, int]

N, E, S, W = 1, 2, 4, 8
ALL_WALLS  = N | E | S | W

# fixed exploration order for every grid algorithm
DIRECTIONS: Tuple[int, ...] = (N, E, S, W)

DELTA: Dict[int, Cell] = {
    N: (-1, 0),
    E: (0, 1),
    S: (1, 0),
    W: (0, -1),
}

OPPOSITE: Dict[int, int] = {N: S, E: W, S: N, W: E}

DIRECTION_NAMES: Dict[int, str] = {N: "N", E: "E", S: "S", W: "W"}


class WallGrid:
    """
    Attributes:
        rows, cols : Grid dimensions (either may be 0 for an empty grid).
        walls      : walls[r][c] → bitmask of the walls still standing.
    """

    def __init__(self, rows: int, cols: int, fill: int = ALL_WALLS):
        if rows < 0 or cols < 0:
            raise ValueError(f"Grid dimensions must be non-negative, got {rows}x{cols}")
        self.rows: int = rows
        self.cols: int = cols
        self.walls: List[List[int]] = [[fill] * cols for _ in range(rows)]
        if fill != ALL_WALLS:
            self._seal_border()

    @classmethod
    def full(cls, rows: int, cols: int) -> "WallGrid":
        return cls(rows, cols, ALL_WALLS)

    @classmethod
    def open(cls, rows: int, cols: int) -> "WallGrid":
        """No interior walls; only the outer border stands."""
        return cls(rows, cols, 0)

    def _seal_border(self) -> None:
        for r in range(self.rows):
            for c in range(self.cols):
                for d in DIRECTIONS:
                    if self.neighbour(r, c, d) is None:
                        self.walls[r][c] |= d

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    @property
    def size(self) -> int:
        return self.rows * self.cols

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def clamp(self, r: int, c: int) -> Cell:
        """Nearest in-bounds cell (the grid must not be empty)."""
        return (min(max(r, 0), self.rows - 1), min(max(c, 0), self.cols - 1))

    def neighbour(self, r: int, c: int, direction: int) -> Optional[Cell]:
        dr, dc = DELTA[direction]
        nr, nc = r + dr, c + dc
        return (nr, nc) if self.in_bounds(nr, nc) else None

    def cells(self) -> Iterator[Cell]:
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    # ------------------------------------------------------------------
    # Walls
    # ------------------------------------------------------------------
    def has_wall(self, r: int, c: int, direction: int) -> bool:
        return bool(self.walls[r][c] & direction)

    def carve(self, r: int, c: int, direction: int) -> Cell:
        """Remove the wall between (r, c) and its neighbour; returns the neighbour."""
        nr, nc = self.neighbour(r, c, direction)
        self.walls[r][c]   &= ~direction
        self.walls[nr][nc] &= ~OPPOSITE[direction]
        return (nr, nc)

    def build_wall(self, r: int, c: int, direction: int) -> None:
        self.walls[r][c] |= direction
        other = self.neighbour(r, c, direction)
        if other is not None:
            self.walls[other[0]][other[1]] |= OPPOSITE[direction]

    def passages(self, r: int, c: int) -> List[Tuple[int, Cell]]:
        """[(direction, neighbour)] for every open side, in DIRECTIONS order."""
        out = []
        for d in DIRECTIONS:
            if not self.walls[r][c] & d:
                nxt = self.neighbour(r, c, d)
                if nxt is not None:
                    out.append((d, nxt))
        return out

    def carved_pairs(self) -> int:
        """Number of open walls between neighbouring cells (each counted once)."""
        count = 0
        for r, c in self.cells():
            for d in (E, S):
                if self.neighbour(r, c, d) is not None and not self.walls[r][c] & d:
                    count += 1
        return count

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------
    def reachable_from(self, start: Cell) -> Dict[Cell, int]:
        """BFS distances over open passages from `start`."""
        dist = {start: 0}
        queue = deque([start])
        while queue:
            r, c = queue.popleft()
            for _, nxt in self.passages(r, c):
                if nxt not in dist:
                    dist[nxt] = dist[(r, c)] + 1
                    queue.append(nxt)
        return dist

    def shortest_distance(self, start: Cell, goal: Cell) -> Optional[int]:
        return self.reachable_from(start).get(goal)

    def is_spanning_tree(self) -> bool:
        """Connected and acyclic: every cell reachable with exactly size-1 passages."""
        if self.size == 0:
            return True
        return (len(self.reachable_from((0, 0))) == self.size
                and self.carved_pairs() == self.size - 1)

    # ------------------------------------------------------------------
    # Copy / serialisation
    # ------------------------------------------------------------------
    def copy(self) -> "WallGrid":
        clone = WallGrid.__new__(WallGrid)
        clone.rows  = self.rows
        clone.cols  = self.cols
        clone.walls = [list(row) for row in self.walls]
        return clone

    def to_dict(self) -> dict:
        return {"rows": self.rows, "cols": self.cols, "walls": [list(row) for row in self.walls]}

    @classmethod
    def from_dict(cls, data: dict) -> "WallGrid":
        g = cls(data["rows"], data["cols"])
        walls = data.get("walls")
        if walls is not None:
            if len(walls) != g.rows or any(len(row) != g.cols for row in walls):
                raise ValueError("Wall mask does not match grid dimensions")
            g.walls = [[int(w) & ALL_WALLS for w in row] for row in walls]
            g._seal_border()
            # a wall recorded on either side stands on both
            for r, c in g.cells():
                for d in (E, S):
                    other = g.neighbour(r, c, d)
                    if other is not None and (g.has_wall(r, c, d) or
                                              g.has_wall(other[0], other[1], OPPOSITE[d])):
                        g.build_wall(r, c, d)
        return g

    def __eq__(self, other) -> bool:
        return isinstance(other, WallGrid) and self.walls == other.walls and \
            (self.rows, self.cols) == (other.rows, other.cols)

    def __repr__(self) -> str:
        return f"WallGrid({self.rows}x{self.cols}, passages={self.carved_pairs()})"


# ---------------------------------------------------------------------------
# Braiding
# ---------------------------------------------------------------------------
def add_loops(grid: WallGrid, percent: int, rng: Optional[random.Random] = None) -> int:
    """
    Knock out extra interior walls so a perfect maze gains loops.
    Opens min(candidates, percent * rows * cols // 200) walls chosen
    uniformly among the E/S walls still standing.  Returns the number opened.
    """
    if percent <= 0:
        return 0
    rng = rng or random.Random()
    candidates = [
        (r, c, d)
        for r, c in grid.cells()
        for d in (E, S)
        if grid.neighbour(r, c, d) is not None and grid.has_wall(r, c, d)
    ]
    rng.shuffle(candidates)
    openings = min(len(candidates), percent * grid.rows * grid.cols // 200)
    for r, c, d in candidates[:openings]:
        grid.carve(r, c, d)
    return openings
