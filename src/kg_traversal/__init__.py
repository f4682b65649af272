"""Knowledge graph traversal service.

Loads a node/relationship snapshot per request and runs one deterministic
graph algorithm over it (shortest path, neighborhood, centrality, influence).
"""

__version__ = "0.1.0"
