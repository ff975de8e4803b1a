"""
Lease service (orchestration).

Two read paths:
- full-text search through the shared Meilisearch client
- single-lease fetch proxied to the downstream lease-service
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from core.config import LeaseServiceConfig
from core.errors import UpstreamError
from core.search import SearchClient

SEARCH_LIMIT = 20

logger = logging.getLogger(__name__)

_client: LeaseServiceClient | None = None


@dataclass(frozen=True)
class DownstreamResponse:
    status_code: int
    content: bytes
    content_type: str | None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


async def search_leases(query: str, *, search: SearchClient) -> list[dict[str, Any]]:
    hits = await search.search(query or "", limit=SEARCH_LIMIT)
    return hits[:SEARCH_LIMIT]


class LeaseServiceClient:
    def __init__(self, *, base_url: str, timeout_s: float = 30.0) -> None:
        base_url = (base_url or "").strip()
        if not base_url:
            raise ValueError("Lease service URL is empty.")
        self.base_url = base_url.rstrip("/")
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=timeout_s, follow_redirects=True)

    async def get_lease(self, lease_id: str) -> DownstreamResponse:
        """
        GET /leases/{id} on the lease-service. Non-2xx answers are returned,
        not raised; only transport failures raise UpstreamError.
        """
        try:
            resp = await self._http.get(f"/leases/{quote(lease_id, safe='')}")
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Lease service request failed: {exc}") from exc

        return DownstreamResponse(
            status_code=resp.status_code,
            content=resp.content,
            content_type=resp.headers.get("content-type"),
        )

    async def aclose(self) -> None:
        await self._http.aclose()


def init_client(settings: LeaseServiceConfig) -> LeaseServiceClient:
    global _client
    if _client is None:
        _client = LeaseServiceClient(base_url=settings.url)
        logger.info("lease_service_client_ready url=%s", _client.base_url)
    return _client


async def close_client() -> None:
    global _client
    if _client is None:
        return None
    await _client.aclose()
    _client = None


def client() -> LeaseServiceClient:
    if _client is None:
        raise RuntimeError("Lease service client is not initialized. Call init_client() on startup.")
    return _client
