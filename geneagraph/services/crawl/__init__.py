"""Family graph crawling subsystem.

Structure:
- base.py: Person/Edge types and claim helpers
- fetcher.py: concurrent Wikidata entity lookups (httpx)
- parser.py: raw entity record -> Person
- relations.py: typed family statements -> directed edges
- frontier.py: round-based crawl state machine
- pipeline.py: write crawled graphs to disk
- runner.py: tiny CLI entrypoint for manual runs
"""
from .base import Edge, Gender, Person
from .errors import EntityFetchError, EntityParseError, GeneagraphError, SeedNotFound
from .fetcher import EntityFetcher
from .frontier import CrawlContext, CrawlState, Frontier, crawl
from .parser import parse_person
from .relations import Relations, RelationKind, extract_relations

__all__ = [
    "CrawlContext",
    "CrawlState",
    "Edge",
    "EntityFetchError",
    "EntityFetcher",
    "EntityParseError",
    "Frontier",
    "Gender",
    "GeneagraphError",
    "Person",
    "RelationKind",
    "Relations",
    "SeedNotFound",
    "crawl",
    "extract_relations",
    "parse_person",
]
