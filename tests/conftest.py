"""Shared fixtures: the four-node diamond A->B->C, A->D->C."""

import pytest
from fastapi.testclient import TestClient

from kg_traversal.analysis_service.app import create_app
from kg_traversal.analysis_service.auth import ApiKeyAuthResolver
from kg_traversal.knowledge_graph import Node, Relationship, StaticEntityStore, build_graph


def make_nodes(*ids, node_type="company"):
    return [Node(id=i, label=f"{i} Corp", node_type=node_type) for i in ids]


def make_rels(*pairs, rel_type="partners_with"):
    return [
        Relationship(id=f"r{k}", from_node_id=a, to_node_id=b, relationship_type=rel_type)
        for k, (a, b) in enumerate(pairs)
    ]


@pytest.fixture
def diamond_nodes():
    return make_nodes("A", "B", "C", "D")


@pytest.fixture
def diamond_rels():
    return make_rels(("A", "B"), ("B", "C"), ("A", "D"), ("D", "C"))


@pytest.fixture
def diamond_graph(diamond_nodes, diamond_rels):
    return build_graph(diamond_nodes, diamond_rels)


@pytest.fixture
def diamond_store(diamond_nodes, diamond_rels):
    return StaticEntityStore(nodes=diamond_nodes, relationships=diamond_rels)


@pytest.fixture
def client(diamond_store):
    app = create_app(diamond_store, auth=ApiKeyAuthResolver(api_key=None))
    return TestClient(app)
