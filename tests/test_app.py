import httpx
from fastapi.testclient import TestClient

from kg_traversal.analysis_service.app import create_app
from kg_traversal.analysis_service.auth import ApiKeyAuthResolver, HttpAuthResolver
from kg_traversal.knowledge_graph import StaticEntityStore

from conftest import make_nodes, make_rels


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_shortest_path(client):
    resp = client.post(
        "/v1/graph/analyze",
        json={"source_node_id": "A", "target_node_id": "C", "analysis_type": "shortest_path"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["analysis_type"] == "shortest_path"
    assert body["result"]["found"] is True
    assert body["result"]["length"] == 2
    assert [n["id"] for n in body["result"]["path"]][::2] == ["A", "C"]


def test_shortest_path_is_default_type(client):
    resp = client.post("/v1/graph/analyze", json={"source_node_id": "A", "target_node_id": "D"})
    assert resp.json()["analysis_type"] == "shortest_path"
    assert resp.json()["result"]["node_ids"] == ["A", "D"]


def test_shortest_path_not_found_is_200(client):
    resp = client.post("/v1/graph/analyze", json={"source_node_id": "C", "target_node_id": "A"})
    assert resp.status_code == 200
    assert resp.json()["result"]["found"] is False


def test_neighborhood(client):
    resp = client.post(
        "/v1/graph/analyze",
        json={"source_node_id": "A", "max_depth": 1, "analysis_type": "neighborhood"},
    )
    result = resp.json()["result"]
    assert result["total"] == 3
    assert {(r["node"]["id"], r["depth"]) for r in result["nodes"]} == {("A", 0), ("B", 1), ("D", 1)}


def test_centrality(client):
    resp = client.post("/v1/graph/analyze", json={"source_node_id": "C", "analysis_type": "centrality"})
    result = resp.json()["result"]
    assert (result["in_degree"], result["out_degree"], result["total_degree"]) == (2, 0, 2)
    assert result["node"]["label"] == "C Corp"


def test_influence(client):
    resp = client.post(
        "/v1/graph/analyze",
        json={"source_node_id": "A", "max_depth": 2, "analysis_type": "influence"},
    )
    result = resp.json()["result"]
    assert abs(result["score"] - 7 / 3) < 1e-9
    assert result["nodes_influenced"] == 4


def test_missing_source(client):
    resp = client.post("/v1/graph/analyze", json={"analysis_type": "neighborhood"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "source_node_id is required"}


def test_empty_body(client):
    resp = client.post("/v1/graph/analyze")
    assert resp.status_code == 400
    assert resp.json() == {"error": "source_node_id is required"}


def test_shortest_path_requires_target(client):
    resp = client.post("/v1/graph/analyze", json={"source_node_id": "A"})
    assert resp.status_code == 400
    assert "target_node_id" in resp.json()["error"]


def test_invalid_analysis_type(client):
    resp = client.post("/v1/graph/analyze", json={"source_node_id": "A", "analysis_type": "bogus"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid analysis_type"}


def test_malformed_max_depth(client):
    resp = client.post(
        "/v1/graph/analyze",
        json={"source_node_id": "A", "analysis_type": "neighborhood", "max_depth": "deep"},
    )
    assert resp.status_code == 400
    assert "max_depth" in resp.json()["error"]


def test_api_key_required_when_configured(diamond_store):
    client = TestClient(create_app(diamond_store, auth=ApiKeyAuthResolver(api_key="secret")))
    payload = {"source_node_id": "A", "analysis_type": "centrality"}

    resp = client.post("/v1/graph/analyze", json=payload)
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}

    resp = client.post("/v1/graph/analyze", json=payload, headers={"X-API-Key": "secret"})
    assert resp.status_code == 200


def test_auth_checked_before_validation(diamond_store):
    client = TestClient(create_app(diamond_store, auth=ApiKeyAuthResolver(api_key="secret")))
    resp = client.post("/v1/graph/analyze", json={})
    assert resp.status_code == 401


def test_remote_auth_resolver(diamond_store):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.headers.get("authorization") == "Bearer good":
            return httpx.Response(200, json={"id": "u1", "email": "u1@example.com"})
        return httpx.Response(401, json={"message": "no session"})

    auth = HttpAuthResolver("http://auth.test", transport=httpx.MockTransport(handler))
    client = TestClient(create_app(diamond_store, auth=auth))
    payload = {"source_node_id": "A", "analysis_type": "influence"}

    assert client.post("/v1/graph/analyze", json=payload).status_code == 401
    assert (
        client.post("/v1/graph/analyze", json=payload, headers={"Authorization": "Bearer bad"}).status_code
        == 401
    )
    ok = client.post("/v1/graph/analyze", json=payload, headers={"Authorization": "Bearer good"})
    assert ok.status_code == 200


class _BrokenStore:
    async def list_nodes(self):
        raise RuntimeError("store unreachable at 10.0.0.3")

    async def list_relationships(self):
        return []


def test_unexpected_error_is_generic_500():
    client = TestClient(create_app(_BrokenStore(), auth=ApiKeyAuthResolver()))
    resp = client.post("/v1/graph/analyze", json={"source_node_id": "A", "target_node_id": "B"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}


def test_validation_happens_before_store_io():
    client = TestClient(create_app(_BrokenStore(), auth=ApiKeyAuthResolver()))
    resp = client.post("/v1/graph/analyze", json={"analysis_type": "bogus"})
    assert resp.status_code == 400


def test_dangling_edges_excluded_from_traversal_but_counted_in_centrality():
    store = StaticEntityStore(
        nodes=make_nodes("A", "B"),
        relationships=make_rels(("A", "B"), ("ghost", "B"), ("ghost", "A")),
    )
    client = TestClient(create_app(store, auth=ApiKeyAuthResolver()))

    hood = client.post(
        "/v1/graph/analyze", json={"source_node_id": "ghost", "analysis_type": "neighborhood"}
    ).json()["result"]
    assert hood == {"nodes": [], "total": 0}

    cent = client.post(
        "/v1/graph/analyze", json={"source_node_id": "B", "analysis_type": "centrality"}
    ).json()["result"]
    assert cent["in_degree"] == 2


def test_summary_endpoint(client):
    resp = client.post("/v1/graph/summary")
    assert resp.status_code == 200
    summary = resp.json()["summary"]
    assert summary["total_nodes"] == 4
    assert summary["isolated_nodes"] == 0


def test_summary_without_nodes():
    client = TestClient(create_app(StaticEntityStore(), auth=ApiKeyAuthResolver()))
    resp = client.post("/v1/graph/summary")
    assert resp.status_code == 400
    assert resp.json() == {"error": "No graph data available for analysis"}


def test_malformed_json_from_unknown_caller_is_unauthorized(diamond_store):
    client = TestClient(create_app(diamond_store, auth=ApiKeyAuthResolver(api_key="secret")))

    resp = client.post(
        "/v1/graph/analyze", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 401
    assert resp.json() == {"error": "Unauthorized"}

    resp = client.post(
        "/v1/graph/analyze",
        content=b"{not json",
        headers={"Content-Type": "application/json", "X-API-Key": "secret"},
    )
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_app_closes_auth_client_it_built(diamond_store, monkeypatch):
    from kg_traversal.settings import settings

    monkeypatch.setattr(settings, "auth_url", "http://auth.test")
    app = create_app(diamond_store)
    assert isinstance(app.state.auth, HttpAuthResolver)

    with TestClient(app) as client:
        assert client.get("/health").status_code == 200
    assert app.state.auth._client.is_closed


def test_app_leaves_injected_auth_client_open(diamond_store):
    auth = HttpAuthResolver("http://auth.test", transport=httpx.MockTransport(lambda r: httpx.Response(401)))
    app = create_app(diamond_store, auth=auth)

    with TestClient(app) as client:
        client.get("/health")
    assert not auth._client.is_closed
