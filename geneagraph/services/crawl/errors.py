"""Exceptions raised by the crawl subsystem.

Routers translate these into HTTP errors; the crawler itself only lets
SeedNotFound escape, every other per-entity failure marks the id as failed.
"""


class GeneagraphError(Exception):
    """Base class for crawl errors."""


def _label(entity_id: str) -> str:
    return f"Q{entity_id}" if str(entity_id).isdigit() else repr(entity_id)


class EntityFetchError(GeneagraphError):
    def __init__(self, entity_id: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {_label(entity_id)}: {reason}")
        self.entity_id = entity_id
        self.reason = reason


class EntityParseError(GeneagraphError):
    pass


class SeedNotFound(GeneagraphError):
    def __init__(self, entity_id: str) -> None:
        super().__init__(f"No entity could be fetched for {_label(entity_id)}")
        self.entity_id = entity_id
