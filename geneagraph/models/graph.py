from typing import List, Optional
from pydantic import BaseModel, Field


class NodeOut(BaseModel):
    id: str = Field(description="Numeric Wikidata id")
    label: str
    size: int = Field(description="Number of edges pointing at this person (at least 1)")
    color: str
    x: int
    y: int
    wiki_url: str = Field(description="Wikipedia page, or a Reasonator link when none exists")


class EdgeOut(BaseModel):
    id: str = Field(description="Source statement id; synthetic spouse edges are prefixed with REV-")
    source: str
    target: str
    label: str
    type: str = "arrow"


class GraphOut(BaseModel):
    nodes: List[NodeOut]
    edges: List[EdgeOut]


class SearchRequest(BaseModel):
    """Free-form search input: a numeric id, a Q-id or a name."""

    id: str = Field(description="Numeric id, Q-id or a person's name")


class ResolvedPerson(BaseModel):
    id: str
    graph_url: str
    term: Optional[str] = None
