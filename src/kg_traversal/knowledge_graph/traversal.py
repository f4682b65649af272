"""Deterministic traversals over a per-request `Graph`.

None of these raise for "nothing found": an unreachable target or an unknown
start node yields `found=False` or an empty record list.

Note the two depth conventions. `find_shortest_path` bounds the number of
*nodes* in a path (`len(path) < max_depth` before extending), while
`explore_neighborhood` bounds the edge distance from the start node.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .graph import Graph
from .models import Node, Relationship


@dataclass(frozen=True, slots=True)
class TraversalRecord:
    node: Node
    depth: int

    def to_dict(self) -> dict[str, Any]:
        return {"node": self.node.to_dict(), "depth": self.depth}


@dataclass(slots=True)
class PathResult:
    found: bool
    node_ids: list[str] = field(default_factory=list)
    nodes: list[Node | None] = field(default_factory=list)

    @property
    def length(self) -> int:
        """Number of edges on the path."""
        return max(len(self.node_ids) - 1, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "found": self.found,
            "node_ids": list(self.node_ids),
            "path": [n.to_dict() if n is not None else None for n in self.nodes],
            "length": self.length,
        }


@dataclass(slots=True)
class NeighborhoodResult:
    records: list[TraversalRecord]

    @property
    def total(self) -> int:
        return len(self.records)

    def to_dict(self) -> dict[str, Any]:
        return {"nodes": [r.to_dict() for r in self.records], "total": self.total}


@dataclass(slots=True)
class CentralityResult:
    node_id: str
    in_degree: int = 0
    out_degree: int = 0
    node: Node | None = None

    @property
    def total_degree(self) -> int:
        return self.in_degree + self.out_degree

    def to_dict(self) -> dict[str, Any]:
        return {
            "node_id": self.node_id,
            "in_degree": self.in_degree,
            "out_degree": self.out_degree,
            "total_degree": self.total_degree,
            "node": self.node.to_dict() if self.node is not None else None,
        }


@dataclass(slots=True)
class InfluenceResult:
    score: float
    records: list[TraversalRecord]

    @property
    def nodes_influenced(self) -> int:
        return len(self.records)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "nodes_influenced": self.nodes_influenced,
            "nodes": [r.to_dict() for r in self.records],
        }


AnalysisResult = PathResult | NeighborhoodResult | CentralityResult | InfluenceResult


def find_shortest_path(graph: Graph, source_id: str, target_id: str, max_depth: int) -> PathResult:
    """Unweighted BFS returning *a* path with the fewest edges.

    The visited set is global, so only one of several equally short paths is
    returned; which one depends on edge-list order.
    """
    queue: deque[list[str]] = deque([[source_id]])
    visited = {source_id}

    while queue:
        path = queue.popleft()
        current = path[-1]
        if current == target_id:
            return PathResult(found=True, node_ids=path, nodes=[graph.node(i) for i in path])

        if len(path) >= max_depth:
            continue
        for edge in graph.out_edges(current):
            if edge.to in visited:
                continue
            visited.add(edge.to)
            queue.append(path + [edge.to])

    return PathResult(found=False)


def explore_neighborhood(graph: Graph, start_id: str, max_depth: int) -> list[TraversalRecord]:
    """Depth-first enumeration of nodes within `max_depth` edges of `start_id`.

    Each node is reported once, at the depth of its first DFS discovery
    (not necessarily its shortest distance). Uses an explicit stack with
    children pushed in reverse, which reproduces recursive visiting order.
    """
    visited: set[str] = set()
    out: list[TraversalRecord] = []
    stack: list[tuple[str, int]] = [(start_id, 0)]

    while stack:
        node_id, depth = stack.pop()
        if depth > max_depth or node_id in visited:
            continue
        node = graph.node(node_id)
        if node is None:
            # start id or dangling target
            continue
        visited.add(node_id)
        out.append(TraversalRecord(node=node, depth=depth))
        for edge in reversed(graph.out_edges(node_id)):
            stack.append((edge.to, depth + 1))

    return out


def calculate_centrality(relationships: Iterable[Relationship], node_id: str) -> CentralityResult:
    """Degree counts over the raw relationship list.

    Deliberately ignores the graph's node filter: relationships whose other
    endpoint is missing still count.
    """
    res = CentralityResult(node_id=node_id)
    for rel in relationships:
        if rel.to_node_id == node_id:
            res.in_degree += 1
        if rel.from_node_id == node_id:
            res.out_degree += 1
    return res


def score_influence(graph: Graph, start_id: str, max_depth: int) -> InfluenceResult:
    """Depth-decayed reach: sum of 1/(depth+1) over the explored neighborhood.

    A ranking heuristic, not a validated centrality measure. An isolated
    start node scores exactly 1.0.
    """
    records = explore_neighborhood(graph, start_id, max_depth)
    score = sum(1.0 / (r.depth + 1) for r in records)
    return InfluenceResult(score=score, records=records)
