from __future__ import annotations

import urllib.parse
from typing import Any, Dict, Optional

from .base import Gender, Person, claim_target_id, numeric_id
from .errors import EntityParseError


SEX_OR_GENDER = "P21"

# male, male organism / female, female organism
_MALE_IDS = {"6581097", "44148"}
_FEMALE_IDS = {"6581072", "43445"}

REASONATOR_URL = "https://tools.wmflabs.org/reasonator/?q=Q{id}"


def parse_person(entity: Dict[str, Any], *, mobile: bool = True) -> Person:
    """Normalize a ``{"Q<id>": {...}}`` entity payload into a Person.

    Labels, descriptions, site links and claims are all optional; a record that
    carries none of them parses into a stub person named after its id.
    """
    if not isinstance(entity, dict) or len(entity) != 1:
        raise EntityParseError("expected a mapping with exactly one entity")
    key, raw = next(iter(entity.items()))
    item_id = numeric_id(key)
    if not item_id:
        raise EntityParseError(f"entity key {key!r} carries no numeric id")
    if not isinstance(raw, dict):
        raw = {}

    name = _first_value(raw.get("labels")) or item_id
    description = _first_value(raw.get("descriptions"))
    claims = raw.get("claims")
    if not isinstance(claims, dict):
        claims = {}

    wikipedia_url = _wikipedia_url(raw.get("sitelinks"), mobile=mobile)
    return Person(
        id=item_id,
        name=name,
        description=description,
        gender=_gender(claims),
        wikipedia_url=wikipedia_url,
        profile_url=wikipedia_url or REASONATOR_URL.format(id=item_id),
        statements=claims,
    )


def _first_value(localized: Any) -> Optional[str]:
    if not isinstance(localized, dict):
        return None
    for entry in localized.values():
        if isinstance(entry, dict) and entry.get("value"):
            return str(entry["value"])
    return None


def _wikipedia_url(sitelinks: Any, *, mobile: bool) -> Optional[str]:
    if not isinstance(sitelinks, dict) or not sitelinks:
        return None
    # Prefer English Wikipedia, else whatever site comes first
    if isinstance(sitelinks.get("enwiki"), dict) and sitelinks["enwiki"].get("title"):
        site, link = "enwiki", sitelinks["enwiki"]
    else:
        site, link = next(
            ((s, l) for s, l in sitelinks.items() if isinstance(l, dict) and l.get("title")),
            (None, None),
        )
        if site is None:
            return None
    lang = site.replace("wiki", "").replace("_", "-")
    domain = f"{lang}.m.wikipedia.org" if mobile else f"{lang}.wikipedia.org"
    title = urllib.parse.quote(str(link["title"]).replace(" ", "_"), safe="/(),'")
    return f"https://{domain}/wiki/{title}"


def _gender(claims: Dict[str, Any]) -> Optional[Gender]:
    values = claims.get(SEX_OR_GENDER)
    if not isinstance(values, list) or not values:
        return None
    # Only the first statement counts
    target = claim_target_id(values[0])
    if target in _MALE_IDS:
        return Gender.MALE
    if target in _FEMALE_IDS:
        return Gender.FEMALE
    return None
