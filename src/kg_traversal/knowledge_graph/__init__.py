"""Knowledge graph model and in-memory algorithms.

This module provides:
- Node/Relationship records and the entity store abstraction
- A per-request adjacency-list graph loader
- BFS shortest path, DFS neighborhood, degree centrality and influence scoring
- Whole-graph summary statistics
"""

from .graph import Graph, build_graph
from .models import Node, Relationship
from .store import EntityStore, StaticEntityStore
from .summary import GraphSummary, IndustryCluster, summarize_graph
from .traversal import (
    calculate_centrality,
    explore_neighborhood,
    find_shortest_path,
    score_influence,
)

__all__ = [
    "Node",
    "Relationship",
    "EntityStore",
    "StaticEntityStore",
    "Graph",
    "build_graph",
    "find_shortest_path",
    "explore_neighborhood",
    "calculate_centrality",
    "score_influence",
    "GraphSummary",
    "IndustryCluster",
    "summarize_graph",
]
