from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from .models import Node, Relationship


@dataclass(slots=True)
class IndustryCluster:
    industry: str
    count: int
    entities: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"industry": self.industry, "count": self.count, "entities": list(self.entities)}


@dataclass(slots=True)
class GraphSummary:
    total_nodes: int
    total_relationships: int
    node_types: dict[str, int] = field(default_factory=dict)
    relationship_types: dict[str, int] = field(default_factory=dict)
    avg_connections: float = 0.0
    hubs: list[tuple[Node, int]] = field(default_factory=list)
    isolated_nodes: int = 0
    isolated_examples: list[str] = field(default_factory=list)
    clusters: list[IndustryCluster] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_nodes": self.total_nodes,
            "total_relationships": self.total_relationships,
            "node_types": dict(self.node_types),
            "relationship_types": dict(self.relationship_types),
            "avg_connections": self.avg_connections,
            "hubs": [{"node": n.to_dict(), "connections": c} for n, c in self.hubs],
            "isolated_nodes": self.isolated_nodes,
            "isolated_examples": list(self.isolated_examples),
            "clusters": [c.to_dict() for c in self.clusters],
        }


def summarize_graph(
    nodes: list[Node],
    relationships: list[Relationship],
    *,
    hub_limit: int = 10,
    isolated_examples: int = 5,
    cluster_limit: int = 5,
    cluster_examples: int = 3,
) -> GraphSummary:
    """Whole-graph statistics: type histograms, hubs, isolated nodes and
    industry clusters.

    Connection counts include both endpoints of every relationship in the raw
    list, whether or not the other endpoint is a loaded node.
    """
    connections: Counter[str] = Counter()
    for rel in relationships:
        connections[rel.from_node_id] += 1
        connections[rel.to_node_id] += 1

    # sorted() is stable, so ties keep snapshot order
    connected = [(n, connections[n.id]) for n in nodes if connections[n.id] > 0]
    hubs = sorted(connected, key=lambda x: x[1], reverse=True)[:hub_limit]
    isolated = [n for n in nodes if connections[n.id] == 0]

    avg = 0.0
    if nodes and relationships:
        avg = round(len(relationships) * 2 / len(nodes), 2)

    by_industry: dict[str, list[Node]] = {}
    for n in nodes:
        industry = n.properties.get("industry") or "unknown"
        by_industry.setdefault(str(industry), []).append(n)
    clusters = sorted(
        (
            IndustryCluster(industry=k, count=len(v), entities=[n.label for n in v[:cluster_examples]])
            for k, v in by_industry.items()
        ),
        key=lambda c: c.count,
        reverse=True,
    )[:cluster_limit]

    return GraphSummary(
        total_nodes=len(nodes),
        total_relationships=len(relationships),
        node_types=dict(Counter(n.node_type for n in nodes)),
        relationship_types=dict(Counter(r.relationship_type for r in relationships)),
        avg_connections=avg,
        hubs=hubs,
        isolated_nodes=len(isolated),
        isolated_examples=[n.label for n in isolated[:isolated_examples]],
        clusters=clusters,
    )
