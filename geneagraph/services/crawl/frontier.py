"""Round-based frontier crawler.

A crawl starts from one seed id and alternates two phases until it stops:

- fetch: every pending id is requested as one concurrent batch; the round does
  not advance until the whole batch has completed (``fetch_batch`` is the barrier)
- merge: results are parsed, stored and expanded sequentially, in the order the
  ids were requested, so the outcome does not depend on response timing

Ids that cannot be fetched or parsed move to the frontier's failed set. They
never count as pending again, which keeps "no pending ids" reachable even
when some entities are unreachable.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Protocol, Set, Tuple

from .base import Edge, Person, numeric_id
from .errors import EntityParseError, SeedNotFound
from .parser import parse_person
from .relations import extract_relations

logger = logging.getLogger(__name__)


class BatchFetcher(Protocol):
    async def fetch_batch(self, ids: List[str]) -> Dict[str, Dict[str, Any]]: ...


class CrawlState(str, Enum):
    SEEDED = "seeded"
    EXPANDING = "expanding"
    CONVERGED = "converged"
    CAPPED = "capped"
    TIMED_OUT = "timed_out"


class Frontier:
    """Discovered ids mapped to their Person, or None while unresolved.

    Keys are only ever added, and never beyond ``cap``; the one exception is a
    redirected alias handing its slot to the canonical id when the frontier is
    full. Failed ids stay keys (without a Person) but are not pending.
    """

    def __init__(self, cap: int) -> None:
        if cap < 1:
            raise ValueError("cap must be at least 1")
        self.cap = cap
        self._nodes: Dict[str, Optional[Person]] = {}
        self.failed: Set[str] = set()
        # Ids the cap kept out of the frontier
        self.refused: Set[str] = set()

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def get(self, entity_id: str) -> Optional[Person]:
        return self._nodes.get(entity_id)

    def items(self) -> Iterator[Tuple[str, Optional[Person]]]:
        return iter(self._nodes.items())

    @property
    def is_capped(self) -> bool:
        return len(self._nodes) >= self.cap

    def seed(self, entity_id: str) -> None:
        self._nodes[entity_id] = None

    def discover(self, entity_id: str) -> bool:
        """Add an unresolved id; returns False when the cap refuses it."""
        if entity_id in self._nodes:
            return True
        if self.is_capped:
            self.refused.add(entity_id)
            return False
        self._nodes[entity_id] = None
        return True

    def resolve(self, person: Person) -> None:
        if person.id not in self._nodes:
            raise KeyError(f"Q{person.id} was never discovered")
        self._nodes[person.id] = person
        self.failed.discard(person.id)

    def fail(self, entity_id: str) -> None:
        if entity_id in self._nodes and self._nodes[entity_id] is None:
            self.failed.add(entity_id)

    def rekey(self, alias: str, canonical: str) -> bool:
        """Hand the slot of an unresolved ``alias`` over to ``canonical``, keeping its position."""
        if canonical in self._nodes or alias not in self._nodes or self._nodes[alias] is not None:
            return False
        self._nodes = {(canonical if k == alias else k): v for k, v in self._nodes.items()}
        self.failed.discard(alias)
        return True

    def pending(self) -> List[str]:
        return [k for k, v in self._nodes.items() if v is None and k not in self.failed]

    def persons(self) -> List[Person]:
        return [p for p in self._nodes.values() if p is not None]


@dataclass
class CrawlContext:
    """All state of one crawl; built fresh per invocation."""

    start_id: str
    frontier: Frontier
    mobile: bool = True
    edges: List[Edge] = field(default_factory=list)
    state: CrawlState = CrawlState.SEEDED
    rounds: int = 0

    @classmethod
    def seeded(cls, start_id: str, *, cap: int, mobile: bool = True) -> "CrawlContext":
        frontier = Frontier(cap)
        frontier.seed(start_id)
        return cls(start_id=start_id, frontier=frontier, mobile=mobile)

    @property
    def failed(self) -> Set[str]:
        return self.frontier.failed


def merge_round(ctx: CrawlContext, requested: List[str], results: Dict[str, Dict[str, Any]]) -> None:
    """Fold one batch of fetch results into the context, in request order."""
    frontier = ctx.frontier
    for eid in requested:
        if frontier.get(eid) is not None:
            continue
        entity = results.get(eid)
        if entity is None:
            frontier.fail(eid)
            continue
        try:
            person = parse_person(entity, mobile=ctx.mobile)
        except EntityParseError as exc:
            logger.warning("Could not parse Q%s: %s", eid, exc)
            frontier.fail(eid)
            continue

        if person.id != eid:
            # Redirected entity: keep the canonical id, give up on the alias
            logger.info("Q%s resolved to Q%s", eid, person.id)
            if frontier.get(person.id) is not None:
                frontier.fail(eid)
                continue
            if person.id not in frontier and frontier.is_capped:
                # No room left: the canonical id takes over the alias's slot
                frontier.rekey(eid, person.id)
            else:
                frontier.fail(eid)
                frontier.discover(person.id)

        frontier.resolve(person)
        logger.debug("Fetched %s", person.name)

        rels = extract_relations(person)
        ctx.edges.extend(rels.edges)
        for new_id in rels.new_ids:
            frontier.discover(new_id)


async def run_crawl(ctx: CrawlContext, fetcher: BatchFetcher, *, deadline: Optional[float] = None) -> CrawlContext:
    """Expand ``ctx`` round by round until it converges, hits the cap or the deadline.

    ``deadline`` is a budget in seconds for the whole crawl. A round still in
    flight when it runs out is cancelled; its ids stay unresolved.
    """
    started = time.monotonic()
    frontier = ctx.frontier
    while True:
        pending = frontier.pending()
        if not pending:
            ctx.state = CrawlState.CAPPED if frontier.refused else CrawlState.CONVERGED
            break
        # The seed round always runs, even with a cap of one
        if frontier.is_capped and ctx.rounds > 0:
            ctx.state = CrawlState.CAPPED
            break

        remaining = None
        if deadline is not None:
            remaining = deadline - (time.monotonic() - started)
            if remaining <= 0:
                ctx.state = CrawlState.TIMED_OUT
                break

        ctx.state = CrawlState.EXPANDING
        try:
            results = await asyncio.wait_for(fetcher.fetch_batch(pending), timeout=remaining)
        except asyncio.TimeoutError:
            logger.warning("Crawl from Q%s ran out of time after %d rounds", ctx.start_id, ctx.rounds)
            ctx.state = CrawlState.TIMED_OUT
            break

        merge_round(ctx, pending, results)
        ctx.rounds += 1
        logger.info("%d people found (%d failed) after round %d", len(frontier), len(frontier.failed), ctx.rounds)

    logger.info(
        "Crawl from Q%s finished: %s, %d nodes, %d edges",
        ctx.start_id, ctx.state.value, len(frontier), len(ctx.edges),
    )
    return ctx


async def crawl(
    start_id: str,
    fetcher: BatchFetcher,
    *,
    max_nodes: int = 150,
    mobile: bool = True,
    deadline: Optional[float] = None,
) -> CrawlContext:
    """Crawl the family graph around ``start_id``.

    Raises SeedNotFound when the seed itself never resolves.
    """
    seed = numeric_id(start_id)
    if not seed:
        raise SeedNotFound(str(start_id))
    ctx = CrawlContext.seeded(seed, cap=max_nodes, mobile=mobile)
    await run_crawl(ctx, fetcher, deadline=deadline)
    if not ctx.frontier.persons():
        raise SeedNotFound(seed)
    return ctx
