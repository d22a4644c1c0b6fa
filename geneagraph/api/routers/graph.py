from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response

from geneagraph.config import MAX_NODES_LIMIT, get_crawl_settings
from geneagraph.models.graph import GraphOut
from geneagraph.services.crawl.errors import GeneagraphError, SeedNotFound
from geneagraph.services.family_tree_service import build_family_graph
from geneagraph.services.search_service import parse_identifier

router = APIRouter(tags=["graph"])

CACHE_CONTROL = "public, max-age=86400"


@router.get("/json/{person_id}", response_model=GraphOut)
async def api_get_family_graph(
    person_id: str,
    response: Response,
    max_nodes: Optional[int] = Query(None, ge=1, le=MAX_NODES_LIMIT, description="Override the node cap"),
    mobile: Optional[bool] = Query(None, description="Link to mobile Wikipedia pages"),
):
    """Return the family graph around a person (numeric id or Q-id)."""
    seed = parse_identifier(person_id)
    if not seed:
        raise HTTPException(status_code=404, detail=f"Not a Wikidata id: {person_id}")
    settings = get_crawl_settings().with_overrides(max_nodes=max_nodes, use_wiki_mobile=mobile)
    try:
        graph = await build_family_graph(seed, settings=settings)
    except SeedNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except GeneagraphError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to build family graph: {exc}")
    response.headers["Cache-Control"] = CACHE_CONTROL
    return graph.to_dict()
