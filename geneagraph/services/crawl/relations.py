from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from .base import Edge, Gender, Person, claim_target_id, numeric_id


class RelationKind(str, Enum):
    SPOUSE = "P26"
    CHILD = "P40"  # subject has child target
    FATHER = "P22"  # target is subject's father
    MOTHER = "P25"  # target is subject's mother
    UNRECOGNIZED = ""

    @classmethod
    def for_property(cls, prop: str) -> "RelationKind":
        code = "P" + numeric_id(prop)
        for kind in cls:
            if kind.value == code:
                return kind
        return cls.UNRECOGNIZED


@dataclass(frozen=True)
class Statement:
    kind: RelationKind
    claim_id: str
    target_id: str


@dataclass
class Relations:
    # Insertion ordered; a dict keeps first-seen order without duplicates
    new_ids: Dict[str, None] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)

    def add(self, edge: Edge, target_id: str) -> None:
        self.edges.append(edge)
        self.new_ids.setdefault(target_id, None)


def decode_statements(claims: Dict[str, Any]) -> Iterator[Statement]:
    """Decode raw claims into typed statements, dropping malformed values.

    Unrecognized properties are yielded with kind UNRECOGNIZED only when they carry
    an item value; callers typically ignore them.
    """
    for prop, values in (claims or {}).items():
        if not isinstance(values, list):
            continue
        kind = RelationKind.for_property(prop)
        for claim in values:
            target = claim_target_id(claim)
            if target is None:
                continue
            claim_id = str(claim.get("id") or f"{prop}-{target}")
            yield Statement(kind=kind, claim_id=claim_id, target_id=target)


def _gendered(gender: Optional[Gender], male: str, female: str, unknown: str) -> str:
    if gender is Gender.MALE:
        return male
    if gender is Gender.FEMALE:
        return female
    return unknown


def extract_relations(person: Person) -> Relations:
    """Turn a person's family statements into directed edges.

    Spouse statements also emit a synthetic reverse edge (id prefixed with REV-)
    so that marriages weigh twice in degree-based node sizing.
    """
    out = Relations()
    subject = person.id
    for st in decode_statements(person.statements):
        if st.kind is RelationKind.SPOUSE:
            forward = _gendered(person.gender, "Husband of", "Wife of", "Spouse of")
            reverse = _gendered(person.gender, "Wife of", "Husband of", "Spouse of")
            out.add(Edge(id=st.claim_id, source=subject, target=st.target_id, label=forward), st.target_id)
            out.add(Edge(id=f"REV-{st.claim_id}", source=st.target_id, target=subject, label=reverse), st.target_id)
        elif st.kind is RelationKind.CHILD:
            label = _gendered(person.gender, "Father of", "Mother of", "Parent of")
            out.add(Edge(id=st.claim_id, source=subject, target=st.target_id, label=label), st.target_id)
        elif st.kind is RelationKind.FATHER:
            out.add(Edge(id=st.claim_id, source=st.target_id, target=subject, label="Father of"), st.target_id)
        elif st.kind is RelationKind.MOTHER:
            out.add(Edge(id=st.claim_id, source=st.target_id, target=subject, label="Mother of"), st.target_id)
    return out
