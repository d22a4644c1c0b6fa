"""Map free-form user input to a Wikidata numeric id.

- "1339" passes through
- "Q1339" / "q1339" strips the prefix
- anything else runs one ``wbsearchentities`` lookup and takes the first hit

Returned search hit schema:
{
    "id": str,              # numeric id, e.g. "1339"
    "label": str | None,
    "description": str | None,
}

Network failures are swallowed; a failed lookup resolves to None, which callers
surface as "no entry found".
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

import httpx

from geneagraph.config import DEFAULT_USER_AGENT, DEFAULT_WIKIDATA_API_URL, CrawlSettings
from geneagraph.services.crawl.base import numeric_id

logger = logging.getLogger(__name__)

_NUMERIC = re.compile(r"^\d+$")
_QID = re.compile(r"^[Qq]\d+$")


@dataclass
class WikidataSearch:
    timeout: float = 6.0
    user_agent: str = DEFAULT_USER_AGENT
    api_url: str = DEFAULT_WIKIDATA_API_URL
    language: str = "en"
    transport: Optional[httpx.AsyncBaseTransport] = None

    @classmethod
    def from_settings(cls, settings: CrawlSettings) -> "WikidataSearch":
        return cls(timeout=settings.fetch_timeout, user_agent=settings.user_agent, api_url=settings.api_url)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
            transport=self.transport,
        )

    async def search(self, term: str, k: int = 1) -> List[Dict[str, Optional[str]]]:
        """Search items by term and return the top k hits (best first)."""
        params = {
            "action": "wbsearchentities",
            "search": term,
            "format": "json",
            "language": self.language,
            "type": "item",
            "continue": 0,
        }
        out: List[Dict[str, Optional[str]]] = []
        async with self._client() as client:
            try:
                r = await client.get(self.api_url, params=params)
                r.raise_for_status()
                data = r.json()
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Search for %r failed: %s", term, exc)
                return out
        for item in (data or {}).get("search") or []:
            eid = numeric_id(item.get("id"))
            if not eid:
                continue
            out.append({"id": eid, "label": item.get("label"), "description": item.get("description")})
            if len(out) >= k:
                break
        return out


def parse_identifier(term: str) -> Optional[str]:
    """Return the numeric id for "123" or "Q123" input, None for free text."""
    s = (term or "").strip()
    if _NUMERIC.match(s):
        return s
    if _QID.match(s):
        return s[1:]
    return None


async def resolve_identifier(term: str, *, searcher: Optional[WikidataSearch] = None) -> Optional[str]:
    """Resolve user input to a numeric id, falling back to a "lucky" search."""
    direct = parse_identifier(term)
    if direct:
        return direct
    s = (term or "").strip()
    if not s:
        return None
    ws = searcher or WikidataSearch()
    hits = await ws.search(s, k=1)
    if not hits:
        logger.info("No entry found for %r", s)
        return None
    return hits[0]["id"]
