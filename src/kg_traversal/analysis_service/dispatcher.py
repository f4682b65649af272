from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from kg_traversal.knowledge_graph.graph import Graph, build_graph
from kg_traversal.knowledge_graph.models import Node, Relationship
from kg_traversal.knowledge_graph.store import EntityStore
from kg_traversal.knowledge_graph.summary import summarize_graph
from kg_traversal.knowledge_graph.traversal import (
    AnalysisResult,
    NeighborhoodResult,
    calculate_centrality,
    explore_neighborhood,
    find_shortest_path,
    score_influence,
)
from kg_traversal.settings import settings

from .errors import AnalysisError, RequestValidationFailed

logger = logging.getLogger(__name__)

ANALYSIS_TYPES = ("shortest_path", "neighborhood", "centrality", "influence")


class AnalysisRequest(BaseModel):
    source_node_id: str | None = None
    target_node_id: str | None = None
    max_depth: int = Field(default_factory=lambda: settings.default_max_depth)
    analysis_type: str = "shortest_path"


def describe_validation_error(errors: list[dict[str, Any]]) -> str:
    if not errors:
        return "Invalid request body"
    first = errors[0]
    loc = ".".join(str(p) for p in first.get("loc", ()))
    msg = first.get("msg") or "invalid value"
    return f"{loc}: {msg}" if loc else msg


def parse_request(raw: bytes) -> AnalysisRequest:
    """Decode a JSON request body; an empty body means all defaults."""
    if not raw.strip():
        return AnalysisRequest()
    try:
        return AnalysisRequest.model_validate_json(raw)
    except ValidationError as e:
        raise RequestValidationFailed(describe_validation_error(e.errors())) from e


def validate_request(req: AnalysisRequest) -> None:
    """Fail fast before any store I/O."""
    if not req.source_node_id:
        raise RequestValidationFailed("source_node_id is required")
    if req.analysis_type == "shortest_path" and not req.target_node_id:
        raise RequestValidationFailed("target_node_id is required for shortest_path")
    if req.analysis_type not in ANALYSIS_TYPES:
        raise RequestValidationFailed("Invalid analysis_type")


async def load_snapshot(
    store: EntityStore, *, timeout_s: float | None = None
) -> tuple[list[Node], list[Relationship]]:
    # Both reads are independent; start them together.
    nodes, relationships = await asyncio.wait_for(
        asyncio.gather(store.list_nodes(), store.list_relationships()),
        timeout=timeout_s,
    )
    return nodes, relationships


def dispatch(req: AnalysisRequest, graph: Graph, relationships: list[Relationship]) -> AnalysisResult:
    source = req.source_node_id or ""
    if req.analysis_type == "shortest_path":
        return find_shortest_path(graph, source, req.target_node_id or "", req.max_depth)
    if req.analysis_type == "neighborhood":
        return NeighborhoodResult(explore_neighborhood(graph, source, req.max_depth))
    if req.analysis_type == "centrality":
        res = calculate_centrality(relationships, source)
        res.node = graph.node(source)
        return res
    if req.analysis_type == "influence":
        return score_influence(graph, source, req.max_depth)
    raise RequestValidationFailed("Invalid analysis_type")


async def run_analysis(
    store: EntityStore, req: AnalysisRequest, *, fetch_timeout_s: float | None = None
) -> dict[str, Any]:
    """Validate, load the graph, run one algorithm and build the response body.

    Raises `RequestValidationFailed` for bad input and a generic
    `AnalysisError` for anything unexpected (logged with traceback here).
    """
    validate_request(req)
    timeout = settings.fetch_timeout_s if fetch_timeout_s is None else fetch_timeout_s

    t0 = time.perf_counter()
    try:
        nodes, relationships = await load_snapshot(store, timeout_s=timeout)
        graph = build_graph(nodes, relationships)
        result = dispatch(req, graph, relationships).to_dict()
    except AnalysisError:
        raise
    except Exception as e:
        logger.exception("Graph analysis failed (type=%s)", req.analysis_type)
        raise AnalysisError() from e

    logger.info(
        "analysis type=%s source=%s nodes=%d relationships=%d took=%.1fms",
        req.analysis_type,
        req.source_node_id,
        len(nodes),
        len(relationships),
        (time.perf_counter() - t0) * 1000.0,
    )
    return {"success": True, "analysis_type": req.analysis_type, "result": result}


async def run_summary(store: EntityStore, *, fetch_timeout_s: float | None = None) -> dict[str, Any]:
    timeout = settings.fetch_timeout_s if fetch_timeout_s is None else fetch_timeout_s
    try:
        nodes, relationships = await load_snapshot(store, timeout_s=timeout)
    except Exception as e:
        logger.exception("Failed to load graph snapshot")
        raise AnalysisError() from e

    if not nodes:
        raise RequestValidationFailed("No graph data available for analysis")
    return {"success": True, "summary": summarize_graph(nodes, relationships).to_dict()}
