from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from kg_traversal import __version__
from kg_traversal.knowledge_graph.store import EntityStore
from kg_traversal.settings import settings

from .auth import AuthResolver, User, build_auth_resolver, require_user
from .dispatcher import parse_request, run_analysis, run_summary
from .errors import AnalysisError

logger = logging.getLogger(__name__)


def create_app(store: EntityStore, auth: AuthResolver | None = None) -> FastAPI:
    # Resolvers built here are closed on shutdown; injected ones belong to the caller.
    owned_auth = None
    if auth is None:
        auth = owned_auth = build_auth_resolver(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        try:
            yield
        finally:
            aclose = getattr(owned_auth, "aclose", None)
            if aclose is not None:
                await aclose()

    app = FastAPI(title="Knowledge Graph Traversal Service", version=__version__, lifespan=lifespan)
    app.state.store = store
    app.state.auth = auth

    @app.exception_handler(AnalysisError)
    async def analysis_error(_request: Request, exc: AnalysisError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def unexpected_error(_request: Request, exc: Exception):
        logger.error("Unhandled error", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": AnalysisError.default_message})

    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.post("/v1/graph/analyze")
    async def analyze(request: Request, _user: User = Depends(require_user)):
        # Body is read only after the caller is resolved.
        req = parse_request(await request.body())
        return await run_analysis(app.state.store, req)

    @app.post("/v1/graph/summary")
    async def summary(_user: User = Depends(require_user)):
        return await run_summary(app.state.store)

    return app
