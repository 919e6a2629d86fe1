"""
graph/
-----
Problem-instance data layer.  Public API:

    from graph import Graph
    from graph import WallGrid, N, E, S, W, add_loops
"""

from graph.graph import Graph
from graph.grid  import (
    WallGrid,
    Cell,
    N, E, S, W,
    ALL_WALLS,
    DIRECTIONS,
    DELTA,
    OPPOSITE,
    add_loops,
)

__all__ = [
    "Graph",
    "WallGrid", "Cell",
    "N", "E", "S", "W",
    "ALL_WALLS", "DIRECTIONS", "DELTA", "OPPOSITE",
    "add_loops",
]
