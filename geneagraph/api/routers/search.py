from fastapi import APIRouter, HTTPException
from fastapi.responses import RedirectResponse

from geneagraph.config import get_crawl_settings
from geneagraph.models.graph import ResolvedPerson, SearchRequest
from geneagraph.services.search_service import WikidataSearch, resolve_identifier


router = APIRouter(tags=["search"])


def not_found_message(term: str) -> str:
    return f"Sorry, we couldn't find an entry for {term}"


async def _resolve(term: str):
    searcher = WikidataSearch.from_settings(get_crawl_settings())
    return await resolve_identifier(term, searcher=searcher)


@router.post("/search")
async def api_search(payload: SearchRequest):
    """Resolve a search term and redirect to its family tree."""
    person_id = await _resolve(payload.id)
    if not person_id:
        raise HTTPException(status_code=404, detail=not_found_message(payload.id))
    return RedirectResponse(url=f"/family-tree/{person_id}", status_code=303)


@router.get("/family-tree/{term}", response_model=ResolvedPerson)
async def api_family_tree(term: str):
    person_id = await _resolve(term)
    if not person_id:
        raise HTTPException(status_code=404, detail=not_found_message(term))
    return {"id": person_id, "graph_url": f"/json/{person_id}", "term": term}
