from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Set

import httpx

from geneagraph.config import DEFAULT_USER_AGENT, DEFAULT_WIKIDATA_API_URL, CrawlSettings
from .base import numeric_id
from .errors import EntityFetchError

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class EntityFetcher:
    """Resolve numeric ids to raw ``wbgetentities`` records.

    ``fetch_batch`` is the crawler's round barrier: every request of the batch is
    dispatched at once (bounded by ``max_concurrency``) and the call only returns
    after all of them completed or definitively failed.
    """

    def __init__(
        self,
        *,
        api_url: str = DEFAULT_WIKIDATA_API_URL,
        timeout: float = 10.0,
        retries: int = 2,
        max_concurrency: int = 16,
        retry_backoff: float = 0.5,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_url = api_url
        self.timeout = float(timeout)
        self.retries = max(0, int(retries))
        self.retry_backoff = float(retry_backoff)
        self.headers = headers or {"User-Agent": DEFAULT_USER_AGENT}
        self._semaphore = asyncio.Semaphore(max(1, int(max_concurrency)))
        self._client = client
        self._owns_client = client is None
        self._resolved: Set[str] = set()

    @classmethod
    def from_settings(cls, settings: CrawlSettings, **kwargs: Any) -> "EntityFetcher":
        return cls(
            api_url=settings.api_url,
            timeout=settings.fetch_timeout,
            retries=settings.fetch_retries,
            max_concurrency=settings.fetch_concurrency,
            headers={"User-Agent": settings.user_agent},
            **kwargs,
        )

    async def __aenter__(self) -> "EntityFetcher":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, headers=self.headers, follow_redirects=True)
        return self._client

    # --- Public API ---
    async def fetch_one(self, entity_id: str) -> Dict[str, Any]:
        """Fetch a single entity, returning the ``{"Q<id>": {...}}`` mapping.

        Raises EntityFetchError once retries are exhausted or the entity is missing.
        """
        raw_id = entity_id
        entity_id = numeric_id(raw_id)
        if not entity_id:
            raise EntityFetchError(str(raw_id), "not a numeric id")
        if entity_id in self._resolved:
            raise EntityFetchError(entity_id, "already resolved")

        params = {
            "action": "wbgetentities",
            "ids": f"Q{entity_id}",
            "languages": "en",
            "format": "json",
        }
        attempt = 0
        while True:
            try:
                async with self._semaphore:
                    resp = await self._get_client().get(self.api_url, params=params)
                if resp.status_code in _RETRYABLE_STATUS:
                    raise EntityFetchError(entity_id, f"HTTP {resp.status_code}")
                resp.raise_for_status()
                payload = resp.json()
                break
            except (httpx.TransportError, EntityFetchError) as exc:
                if attempt >= self.retries:
                    reason = exc.reason if isinstance(exc, EntityFetchError) else (str(exc) or type(exc).__name__)
                    raise EntityFetchError(entity_id, reason) from exc
                attempt += 1
                logger.debug("Retrying Q%s after %s (attempt %d/%d)", entity_id, exc, attempt, self.retries)
                await asyncio.sleep(self.retry_backoff * attempt)
            except (httpx.RequestError, httpx.InvalidURL, httpx.HTTPStatusError, ValueError) as exc:
                # 4xx responses, redirect loops and undecodable bodies will not get better on retry
                raise EntityFetchError(entity_id, str(exc) or type(exc).__name__) from exc

        entities = self._entities_from_payload(entity_id, payload)
        self._resolved.add(entity_id)
        return entities

    async def fetch_batch(self, ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        """Fetch all ids concurrently; failed ids are logged and left out of the result."""
        wanted: List[str] = []
        for raw in ids:
            eid = numeric_id(raw)
            if eid and eid not in self._resolved and eid not in wanted:
                wanted.append(eid)
        if not wanted:
            return {}

        results = await asyncio.gather(*(self.fetch_one(eid) for eid in wanted), return_exceptions=True)

        out: Dict[str, Dict[str, Any]] = {}
        for eid, res in zip(wanted, results):
            if isinstance(res, EntityFetchError):
                logger.warning("%s", res)
                continue
            if isinstance(res, BaseException):
                # Anything else is a programming error, not a fetch failure
                raise res
            out[eid] = res
        return out

    # --- Internals ---
    @staticmethod
    def _entities_from_payload(entity_id: str, payload: Any) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            raise EntityFetchError(entity_id, "unexpected response shape")
        if "error" in payload:
            info = payload["error"].get("info") if isinstance(payload["error"], dict) else payload["error"]
            raise EntityFetchError(entity_id, f"API error: {info}")
        entities = payload.get("entities")
        if not isinstance(entities, dict) or not entities:
            raise EntityFetchError(entity_id, "empty response")
        key, record = next(iter(entities.items()))
        if not isinstance(record, dict) or "missing" in record:
            raise EntityFetchError(entity_id, "entity is missing")
        return {key: record}
