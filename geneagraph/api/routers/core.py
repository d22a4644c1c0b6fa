from fastapi import APIRouter
from fastapi.responses import RedirectResponse

from geneagraph.config import get_crawl_settings

router = APIRouter(tags=["core"])

# Johann Sebastian Bach, the landing page example
DEFAULT_PERSON_ID = "1339"


@router.get("/")
def read_index():
    return RedirectResponse(url=f"/family-tree/{DEFAULT_PERSON_ID}")


@router.get("/about")
def read_about():
    settings = get_crawl_settings()
    return {
        "name": "geneagraph",
        "description": "Family trees built on the fly from Wikidata spouse, child, father and mother statements.",
        "max_nodes": settings.max_nodes,
        "source": "https://www.wikidata.org/",
    }


@router.get("/credits")
def read_credits():
    return {
        "data": "Wikidata (CC0)",
        "links": "Wikipedia and Reasonator",
    }
