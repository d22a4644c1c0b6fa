from __future__ import annotations

import json
import re
from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Any, Dict, Optional


_NON_DIGITS = re.compile(r"\D+")

ARROW = "arrow"


def canonical_json(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, separators=(",", ":"))


def numeric_id(value: Any) -> str:
    """Strip everything but digits from an entity key: 'Q1339' -> '1339'."""
    return _NON_DIGITS.sub("", str(value or ""))


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"


@dataclass(frozen=True)
class Person:
    id: str
    name: str
    profile_url: str
    description: Optional[str] = None
    gender: Optional[Gender] = None
    wikipedia_url: Optional[str] = None
    # Raw claims keyed by property id ("P26": [...]); empty for stub persons
    statements: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_stub(self) -> bool:
        return not self.statements


@dataclass(frozen=True)
class Edge:
    id: str
    source: str
    target: str
    label: str
    type: str = ARROW

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def claim_target_id(claim: Any) -> Optional[str]:
    """Return the numeric id an item-valued claim points at, or None when malformed.

    Accepts both the legacy ``numeric-id`` and the ``id`` ("Q123") forms of the value.
    """
    if not isinstance(claim, dict):
        return None
    snak = claim.get("mainsnak")
    if not isinstance(snak, dict):
        return None
    datavalue = snak.get("datavalue")
    if not isinstance(datavalue, dict):
        return None
    value = datavalue.get("value")
    if not isinstance(value, dict):
        return None
    raw = value.get("numeric-id")
    if raw is None:
        raw = value.get("id")
    target = numeric_id(raw)
    return target or None
