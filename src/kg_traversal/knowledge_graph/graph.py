from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .models import Node, Relationship

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OutEdge:
    to: str
    relationship: Relationship


@dataclass(slots=True)
class GraphEntry:
    node: Node
    edges: list[OutEdge] = field(default_factory=list)


@dataclass(slots=True)
class Graph:
    """Directed adjacency list keyed by node id.

    Built fresh per request and never shared. Edge lists keep the order in
    which relationships were loaded, which fixes traversal order.
    """

    entries: dict[str, GraphEntry] = field(default_factory=dict)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def node(self, node_id: str) -> Node | None:
        entry = self.entries.get(node_id)
        return entry.node if entry else None

    def out_edges(self, node_id: str) -> list[OutEdge]:
        entry = self.entries.get(node_id)
        return entry.edges if entry else []


def build_graph(nodes: Iterable[Node], relationships: Iterable[Relationship]) -> Graph:
    """Build the adjacency list.

    Relationships whose source node is not loaded are dropped. Targets are
    not checked; consumers treat unknown targets as not found.
    """
    graph = Graph()
    for n in nodes:
        graph.entries[n.id] = GraphEntry(node=n)

    dropped = 0
    for rel in relationships:
        entry = graph.entries.get(rel.from_node_id)
        if entry is None:
            dropped += 1
            continue
        entry.edges.append(OutEdge(to=rel.to_node_id, relationship=rel))

    if dropped:
        logger.debug("Dropped %d relationships with unknown source node", dropped)
    return graph
