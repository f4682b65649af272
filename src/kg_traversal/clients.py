"""httpx clients for the entity store and auth backends.

Both collaborators are read with idempotent GETs, so transport-level
failures are retried; HTTP error statuses are not.
"""

from __future__ import annotations

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from kg_traversal.settings import settings

RETRYABLE_ERRORS = (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)


def build_async_client(
    base_url: str,
    *,
    headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    # Reads are bounded by the whole-fetch timeout; connecting should fail fast.
    return httpx.AsyncClient(
        base_url=base_url,
        headers=headers,
        timeout=httpx.Timeout(settings.fetch_timeout_s, connect=5.0),
        transport=transport,
    )


def retry_backend_reads(fn):
    return retry(
        reraise=True,
        stop=stop_after_attempt(max(1, settings.fetch_attempts)),
        wait=wait_exponential_jitter(initial=0.2, max=2.0),
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
    )(fn)
