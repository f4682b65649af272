from __future__ import annotations

import asyncio
import logging

import uvicorn

from kg_traversal.knowledge_graph.http_store import HttpEntityStore
from kg_traversal.knowledge_graph.store import EntityStore, StaticEntityStore
from kg_traversal.settings import TraversalSettings, settings

from .app import create_app
from .auth import HttpAuthResolver, build_auth_resolver

logger = logging.getLogger(__name__)


def build_entity_store(cfg: TraversalSettings) -> EntityStore:
    if cfg.store_url:
        return HttpEntityStore(
            cfg.store_url,
            api_key=cfg.store_api_key,
            node_entity=cfg.node_entity,
            relationship_entity=cfg.relationship_entity,
        )
    if cfg.snapshot_path:
        return StaticEntityStore.from_json_file(cfg.snapshot_path)
    raise RuntimeError(
        "No entity store configured. Set KG_TRAVERSAL_STORE_URL or KG_TRAVERSAL_SNAPSHOT_PATH."
    )


async def _main() -> None:
    logging.basicConfig(
        level=(settings.log_level or "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    store = build_entity_store(settings)
    auth = build_auth_resolver(settings)
    app = create_app(store, auth)

    config = uvicorn.Config(
        app,
        host=settings.bind_host,
        port=settings.bind_port,
        log_level=(settings.log_level or "info").lower(),
    )
    server = uvicorn.Server(config)
    logger.info("Serving graph analysis on %s:%d", settings.bind_host, settings.bind_port)

    try:
        await server.serve()
    finally:
        if isinstance(store, HttpEntityStore):
            await store.aclose()
        if isinstance(auth, HttpAuthResolver):
            await auth.aclose()


def main() -> None:
    asyncio.run(_main())


if __name__ == "__main__":
    main()
