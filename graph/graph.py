"""
graph.py — Graph Container & Generator
=======================================
Problem instance for the graph-traversal stepper.

Responsibilities:
  1. Node / edge insertion
  2. Adjacency queries                      (neighbours sorted ascending)
  3. Seeded random generation               (Erdős–Rényi + spanning backbone)
  4. Import from adjacency-list text        (text → graph)
  5. Serialisation round-trip               (to_dict / from_dict, JSON payloads)

Design decisions:
  - Node ids are plain sortable values (ints for generated / numeric input).
    Neighbour lists are always returned sorted so every consumer explores
    them in the same order.
  - Adjacency is a dict of sets internally; duplicates and self-loops are
    dropped on insert.
  - Generation takes its own random.Random(seed); nothing touches the
    module-level random state.
"""

import random
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Set, Tuple


class Graph:
    """
    Attributes:
        directed : bool – edges only run source → target when True.
        _adj     : {node_id: {neighbour_id, …}}
    """

    def __init__(self, directed: bool = False):
        self.directed: bool = directed
        self._adj: Dict[Hashable, Set[Hashable]] = {}

    # ==================================================================
    # MUTATION
    # ==================================================================
    def add_node(self, node_id: Hashable) -> Hashable:
        self._adj.setdefault(node_id, set())
        return node_id

    def add_edge(self, source: Hashable, target: Hashable) -> None:
        self.add_node(source)
        self.add_node(target)
        if source == target:
            return
        self._adj[source].add(target)
        if not self.directed:
            self._adj[target].add(source)

    # ==================================================================
    # QUERIES
    # ==================================================================
    def neighbours(self, node_id: Hashable) -> List[Hashable]:
        return sorted(self._adj.get(node_id, ()))

    def has_node(self, node_id: Hashable) -> bool:
        return node_id in self._adj

    def has_edge(self, source: Hashable, target: Hashable) -> bool:
        return target in self._adj.get(source, ())

    def node_ids(self) -> List[Hashable]:
        return sorted(self._adj)

    def node_count(self) -> int:
        return len(self._adj)

    def edge_count(self) -> int:
        total = sum(len(nbrs) for nbrs in self._adj.values())
        return total if self.directed else total // 2

    def adjacency(self) -> Dict[Hashable, List[Hashable]]:
        """Fresh {node: sorted neighbour list} copy."""
        return {n: sorted(nbrs) for n, nbrs in sorted(self._adj.items())}

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        edges = []
        for src in self.node_ids():
            for tgt in self.neighbours(src):
                if self.directed or src < tgt:
                    edges.append([src, tgt])
        return {"directed": self.directed, "nodes": self.node_ids(), "edges": edges}

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        g = cls(directed=bool(data.get("directed", False)))
        for n in data.get("nodes", []):
            g.add_node(n)
        for src, tgt in data.get("edges", []):
            g.add_edge(src, tgt)
        return g

    @classmethod
    def from_mapping(cls, adjacency: Mapping[Hashable, Iterable[Hashable]], directed: bool = True) -> "Graph":
        """Wrap an explicit {node: neighbours} mapping.  Directed by default:
        the mapping is taken exactly as written."""
        g = cls(directed=directed)
        for src, targets in adjacency.items():
            g.add_node(src)
            for tgt in targets:
                g.add_edge(src, tgt)
        return g

    # ==================================================================
    # GENERATORS
    # ==================================================================
    @classmethod
    def generate_random(
        cls,
        num_nodes: int = 10,
        edge_probability: float = 0.3,
        directed: bool = False,
        connected: bool = True,
        seed: Optional[int] = None,
    ) -> "Graph":
        """
        Erdős–Rényi style random graph on nodes 0..num_nodes-1.
        With `connected`, a shuffled spanning-path backbone is added.
        """
        rng = random.Random(seed)
        g = cls(directed=directed)
        ids = list(range(num_nodes))
        for nid in ids:
            g.add_node(nid)

        for i in ids:
            for j in (ids if directed else ids[i + 1:]):
                if i != j and rng.random() < edge_probability:
                    g.add_edge(i, j)

        if connected:
            shuffled = list(ids)
            rng.shuffle(shuffled)
            for k in range(1, len(shuffled)):
                if not g.has_edge(shuffled[k - 1], shuffled[k]):
                    g.add_edge(shuffled[k - 1], shuffled[k])
        return g

    @classmethod
    def from_adjacency_list(cls, text: str, directed: bool = False) -> "Graph":
        """
        Parse a simple text adjacency list.

        Supported formats (one node per line):
            0: 1 2 3            → 0 connects to 1, 2, 3
            0 → 1,2,3           → alternate arrow syntax
            A -> B C            → non-numeric labels stay strings

        Blank lines and lines starting with '#' are ignored.  Weights in
        parentheses ("B(3)") are accepted and dropped.
        """
        pairs: List[Tuple[str, Optional[str]]] = []

        for line in text.strip().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if ":" in line:
                parts = line.split(":", 1)
            elif "→" in line:
                parts = line.split("→", 1)
            elif "->" in line:
                parts = line.split("->", 1)
            else:
                raise ValueError(f"Cannot parse adjacency line: {line!r}")

            src = parts[0].strip()
            pairs.append((src, None))
            for token in parts[1].replace(",", " ").split():
                if "(" in token and token.endswith(")"):
                    token = token.split("(", 1)[0]
                pairs.append((src, token))

        labels = {s for s, _ in pairs} | {t for _, t in pairs if t is not None}
        convert = int if all(_is_int(x) for x in labels) else str

        g = cls(directed=directed)
        for src, tgt in pairs:
            if tgt is None:
                g.add_node(convert(src))
            else:
                g.add_edge(convert(src), convert(tgt))
        return g

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()}, directed={self.directed})"


def _is_int(token: str) -> bool:
    try:
        int(token)
    except ValueError:
        return False
    return True
