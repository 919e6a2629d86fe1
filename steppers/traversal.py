"""
traversal.py — Depth-First Traversal
=====================================
Iterative DFS over a general graph with an explicit stack of frames
(no Python recursion).  Each frame is the resumable analogue of one
recursive call: the node plus a cursor into its sorted neighbour list.

One step() does exactly one of:
  1. start a component   → INIT         (root pushed)
  2. discover top node   → DISCOVER     (mark visited, append to order)
  3. advance the cursor to the next unvisited neighbour and push it
                         → EXPLORE_EDGE
  4. cursor exhausted    → BACKTRACK    (pop)
  5. nothing left        → DONE

When the stack empties while nodes remain unvisited, the smallest
unvisited node roots the next component.
"""

from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Set, Union

from graph import Graph
from steppers.base import Stepper
from steppers.errors import InvalidParameterError
from steppers.event import StepEvent, TraversalEvent


PSEUDOCODE: List[str] = [
    "def DFS(graph, start):",                       # 0
    "    stack ← [frame(start)]",                   # 1
    "    while stack is not empty:",                # 2
    "        u ← stack.top()",                      # 3
    "        if u not visited: visit(u)",           # 4
    "        v ← next unvisited neighbour of u",    # 5
    "        if v exists: stack.push(frame(v))",    # 6
    "        else: stack.pop()",                    # 7
    "    restart from next unvisited node",         # 8
]


@dataclass
class Frame:
    node:       Hashable
    next_index: int = 0


class DFSTraversalStepper(Stepper):
    """
    Attributes:
        adjacency : {node: sorted neighbour list} (private copy).
        start     : First root.
        visited   : Set of discovered nodes.
        stack     : List of Frames, top at the end.
        order     : Discovery order so far.
    """

    KEY        = "dfs_traversal"
    PSEUDOCODE = PSEUDOCODE
    _STATE     = ("visited", "stack", "order", "_started")

    def __init__(
        self,
        graph: Union[Graph, Mapping[Hashable, Iterable[Hashable]]],
        start: Optional[Hashable] = None,
    ):
        super().__init__()
        if not isinstance(graph, Graph):
            graph = Graph.from_mapping(graph)
        self.adjacency: Dict[Hashable, List[Hashable]] = graph.adjacency()
        self.nodes: List[Hashable] = list(self.adjacency)

        if start is None and self.nodes:
            start = self.nodes[0]
        if self.nodes and start not in self.adjacency:
            raise InvalidParameterError(f"Start node {start!r} is not in the graph")
        self.start = start
        self.reset()

    def _signature(self):
        return (tuple((n, tuple(v)) for n, v in self.adjacency.items()), self.start)

    def _reset(self) -> None:
        self.visited: Set[Hashable] = set()
        self.stack:   List[Frame]   = []
        self.order:   List[Hashable] = []
        self._started = False

    # ------------------------------------------------------------------
    def _next_root(self) -> Optional[Hashable]:
        if not self._started and self.nodes:
            return self.start
        for n in self.nodes:
            if n not in self.visited:
                return n
        return None

    def _advance(self) -> Optional[StepEvent]:
        if not self.stack:
            root = self._next_root()
            if root is None:
                return self._emit(TraversalEvent.DONE, line=8, final=True,
                                  explanation=f"All {len(self.order)} node(s) visited.")
            fresh = self._started
            self._started = True
            self.stack.append(Frame(root))
            text = (f"Unvisited node {root} starts a new component." if fresh
                    else f"Push start node {root}.")
            return self._emit(TraversalEvent.INIT, root, line=8 if fresh else 1, explanation=text)

        top = self.stack[-1]
        u = top.node
        if u not in self.visited:
            self.visited.add(u)
            self.order.append(u)
            return self._emit(TraversalEvent.DISCOVER, u, value=len(self.order) - 1, line=4,
                              explanation=f"Discover {u} (#{len(self.order)} in traversal order).")

        nbrs = self.adjacency[u]
        while top.next_index < len(nbrs):
            v = nbrs[top.next_index]
            top.next_index += 1
            if v not in self.visited:
                self.stack.append(Frame(v))
                return self._emit(TraversalEvent.EXPLORE_EDGE, u, v, line=6,
                                  explanation=f"Edge {u}→{v}: {v} is unvisited, descend.")

        self.stack.pop()
        return self._emit(TraversalEvent.BACKTRACK, u, line=7,
                          explanation=f"All neighbours of {u} explored, backtrack.")

    def describe(self) -> str:
        if self.done:
            return f"DFS complete. Traversal size={len(self.order)}"
        if not self.stack:
            return "Ready"
        top = self.stack[-1]
        return f"At node {top.node}, next neighbour index={top.next_index}, stack size={len(self.stack)}"
