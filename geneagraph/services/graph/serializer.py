import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from geneagraph.services.crawl.base import Edge, Gender, Person
from geneagraph.services.crawl.frontier import CrawlContext


NODE_COLOURS = {
    Gender.MALE: "rgb(125,125,255)",
    Gender.FEMALE: "rgb(255,125,125)",
}
UNKNOWN_COLOUR = "rgb(125,125,125)"

# Placement grid; coordinates carry no meaning, the client lays the graph out
_GRID = 10


@dataclass
class VisualNode:
    id: str
    label: str
    color: str
    weight: int
    x: int
    y: int
    link: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "size": self.weight,
            "color": self.color,
            "x": self.x,
            "y": self.y,
            "wiki_url": self.link,
        }


@dataclass
class Graph:
    nodes: List[VisualNode] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


def node_colour_for_person(person: Person) -> str:
    return NODE_COLOURS.get(person.gender, UNKNOWN_COLOUR)


def serialize_graph(ctx: CrawlContext, *, rng: Optional[random.Random] = None) -> Graph:
    """Build the output graph from a finished crawl.

    Unresolved and failed ids are dropped together with every edge touching them,
    edges are deduplicated by id (first occurrence wins), and each node is sized by
    the number of kept edges pointing at it (at least 1).
    """
    rng = rng or random.Random()
    persons = ctx.frontier.persons()
    resolved = {p.id for p in persons}

    edges: List[Edge] = []
    seen = set()
    for e in ctx.edges:
        if e.source not in resolved or e.target not in resolved:
            continue
        if e.id in seen:
            continue
        seen.add(e.id)
        edges.append(e)

    in_degree = Counter(e.target for e in edges)

    nodes = [
        VisualNode(
            id=p.id,
            label=p.name,
            color=node_colour_for_person(p),
            weight=in_degree.get(p.id, 0) or 1,
            x=rng.randrange(_GRID),
            y=rng.randrange(_GRID),
            link=p.profile_url,
        )
        for p in persons
    ]
    return Graph(nodes=nodes, edges=edges)
