from __future__ import annotations

from typing import Any

import httpx

from kg_traversal.clients import build_async_client, retry_backend_reads

from .models import Node, Relationship


def _items(body: Any) -> list[dict[str, Any]]:
    # BaaS list endpoints return either a bare list or an envelope.
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        for key in ("items", "data", "results"):
            if isinstance(body.get(key), list):
                return body[key]
    raise ValueError(f"unexpected entity list payload: {type(body).__name__}")


class HttpEntityStore:
    """Entity store backed by the BaaS REST API.

    Reads `GET /entities/{name}` for the node and relationship collections.
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        node_entity: str = "KnowledgeGraphNode",
        relationship_entity: str = "KnowledgeGraphRelationship",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = build_async_client(base_url, headers=headers, transport=transport)
        self.node_entity = node_entity
        self.relationship_entity = relationship_entity

    async def aclose(self) -> None:
        await self._client.aclose()

    @retry_backend_reads
    async def _list(self, entity: str) -> list[dict[str, Any]]:
        r = await self._client.get(f"/entities/{entity}")
        r.raise_for_status()
        return _items(r.json())

    async def list_nodes(self) -> list[Node]:
        return [Node.from_record(d) for d in await self._list(self.node_entity)]

    async def list_relationships(self) -> list[Relationship]:
        return [Relationship.from_record(d) for d in await self._list(self.relationship_entity)]
