from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx
from fastapi import Request

from kg_traversal.clients import build_async_client, retry_backend_reads
from kg_traversal.settings import TraversalSettings

from .errors import AnalysisError, AuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class User:
    id: str
    email: str | None = None


ANONYMOUS = User(id="anonymous")


class AuthResolver(Protocol):
    async def current_user(self, request: Request) -> User | None: ...


@dataclass(slots=True)
class ApiKeyAuthResolver:
    """Shared-secret auth via the X-API-Key header.

    With no key configured every caller resolves to the anonymous user.
    """

    api_key: str | None = None

    async def current_user(self, request: Request) -> User | None:
        if not self.api_key:
            return ANONYMOUS
        supplied = request.headers.get("x-api-key") or ""
        if not hmac.compare_digest(supplied, self.api_key):
            return None
        return User(id="api-key")


class HttpAuthResolver:
    """Delegates session resolution to the backend's `GET /me` endpoint.

    The caller's Authorization header is forwarded as-is; 401/403 from the
    backend means no user.
    """

    def __init__(self, auth_url: str, *, transport: httpx.AsyncBaseTransport | None = None):
        self._client = build_async_client(auth_url, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    @retry_backend_reads
    async def _me(self, authorization: str) -> httpx.Response:
        return await self._client.get("/me", headers={"Authorization": authorization})

    async def current_user(self, request: Request) -> User | None:
        authorization = request.headers.get("authorization")
        if not authorization:
            return None
        r = await self._me(authorization)
        if r.status_code in (401, 403):
            return None
        r.raise_for_status()
        body = r.json() or {}
        if not body.get("id"):
            return None
        return User(id=str(body["id"]), email=body.get("email"))


def build_auth_resolver(cfg: TraversalSettings) -> AuthResolver:
    if cfg.auth_url:
        return HttpAuthResolver(cfg.auth_url)
    return ApiKeyAuthResolver(api_key=cfg.api_key)


async def require_user(request: Request) -> User:
    resolver: AuthResolver = request.app.state.auth
    try:
        user = await resolver.current_user(request)
    except Exception as e:
        logger.exception("Auth resolver failed")
        raise AnalysisError() from e
    if user is None:
        raise AuthError()
    return user
