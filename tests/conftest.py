"""Shared fixtures: a small Wikidata-shaped family and an in-memory fetcher."""

import copy
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest


FIXTURES = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


class FakeFetcher:
    """Serves entities from a dict; ids in ``fail`` (or unknown ids) are left out."""

    def __init__(self, records: Dict[str, dict], fail: Iterable[str] = ()):
        self.records = records
        self.fail = set(fail)
        self.calls: List[List[str]] = []

    async def fetch_batch(self, ids):
        ids = list(ids)
        self.calls.append(ids)
        out = {}
        for eid in ids:
            if eid in self.fail or eid not in self.records:
                continue
            out[eid] = {f"Q{eid}": copy.deepcopy(self.records[eid])}
        return out

    @property
    def fetched(self) -> List[str]:
        return [eid for call in self.calls for eid in call]


@pytest.fixture
def family_records() -> Dict[str, dict]:
    return json.loads(read_fixture("q1339_family.json"))


@pytest.fixture
def entity(family_records):
    """Return the ``{"Q<id>": record}`` payload for an id of the fixture family."""

    def _entity(eid: str) -> dict:
        return {f"Q{eid}": copy.deepcopy(family_records[eid])}

    return _entity


@pytest.fixture
def make_fetcher(family_records):
    def _make(fail: Iterable[str] = (), records: Optional[Dict[str, dict]] = None) -> FakeFetcher:
        return FakeFetcher(records if records is not None else family_records, fail=fail)

    return _make
