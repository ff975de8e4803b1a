"""
Meilisearch HTTP client.

Used endpoint:
- POST /indexes/{index}/search  {"q": "...", "limit": n} -> {"hits": [...], ...}
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import SearchConfig
from .errors import UpstreamError

logger = logging.getLogger(__name__)

_client: SearchClient | None = None


def _normalize_base_url(base_url: str) -> str:
    base_url = (base_url or "").strip()
    if not base_url:
        raise UpstreamError("Search URL is empty.")
    return base_url.rstrip("/")


class SearchClient:
    def __init__(
        self,
        *,
        base_url: str,
        index: str = "leases",
        api_key: str | None = None,
        timeout_s: float = 10.0,
    ) -> None:
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self.base_url = _normalize_base_url(base_url)
        self.index = index
        self._http = httpx.AsyncClient(base_url=self.base_url, headers=headers, timeout=timeout_s)

    async def search(self, query: str, *, limit: int = 20) -> list[dict[str, Any]]:
        """
        Run a search against the configured index and return the raw hit documents.
        """
        try:
            resp = await self._http.post(
                f"/indexes/{self.index}/search",
                json={"q": query, "limit": limit},
            )
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Search request failed: {exc}") from exc

        if resp.status_code != 200:
            # Avoid dumping huge bodies; include a small snippet.
            body = resp.text[:500]
            raise UpstreamError(f"Search request failed: {resp.status_code} {body}")

        try:
            data: dict[str, Any] = resp.json()
        except ValueError as exc:
            raise UpstreamError("Search returned a non-JSON body.") from exc

        hits = data.get("hits") if isinstance(data, dict) else None
        if not isinstance(hits, list):
            raise UpstreamError("Search returned no hit list.")
        return hits

    async def aclose(self) -> None:
        await self._http.aclose()


def init_client(settings: SearchConfig | None) -> SearchClient:
    global _client
    if _client is not None:
        return _client

    settings = settings or SearchConfig()
    _client = SearchClient(base_url=settings.url, index=settings.index, api_key=settings.api_key)
    logger.info("search_client_ready url=%s index=%s", _client.base_url, _client.index)
    return _client


async def close_client() -> None:
    global _client
    if _client is None:
        return None
    await _client.aclose()
    _client = None


def client() -> SearchClient:
    if _client is None:
        raise RuntimeError("Search client is not initialized. Call init_client() on startup.")
    return _client
