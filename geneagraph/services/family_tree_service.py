"""Facade used by the routers and the CLI: crawl a seed and serialize the result."""
from __future__ import annotations

import logging
import random
from typing import Optional

from geneagraph.config import CrawlSettings, get_crawl_settings
from geneagraph.services.crawl import EntityFetcher, crawl
from geneagraph.services.graph import Graph, serialize_graph

logger = logging.getLogger(__name__)


async def build_family_graph(
    person_id: str,
    *,
    settings: Optional[CrawlSettings] = None,
    fetcher: Optional[EntityFetcher] = None,
    rng: Optional[random.Random] = None,
) -> Graph:
    """Crawl the family around ``person_id`` and return the output graph.

    A fetcher is created (and closed) per call unless one is passed in.
    Raises SeedNotFound when the seed cannot be fetched.
    """
    settings = settings or get_crawl_settings()
    owns_fetcher = fetcher is None
    fetcher = fetcher or EntityFetcher.from_settings(settings)
    try:
        ctx = await crawl(
            person_id,
            fetcher,
            max_nodes=settings.max_nodes,
            mobile=settings.use_wiki_mobile,
            deadline=settings.crawl_deadline,
        )
    finally:
        if owns_fetcher:
            await fetcher.aclose()
    graph = serialize_graph(ctx, rng=rng)
    logger.info("Graph for Q%s: %d nodes, %d edges (%s)", ctx.start_id, len(graph.nodes), len(graph.edges), ctx.state.value)
    return graph
