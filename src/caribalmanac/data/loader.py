"""
Load the declarative event dataset.

The JSON layout keeps the field names of the almanac's original data:

    {
      "countries": [{"code": "BS", "name": "The Bahamas"}, ...],
      "events": [
        {"id": "bs-independence", "country_code": "BS", "category": "historical",
         "title": "...", "fixed_date": "07-10", "rrule": null,
         "relative_to": null, "offset_days": 0, ...},
        ...
      ]
    }

RRULE text and MM-DD strings are parsed here, once, so the engines only ever
see structured rules.
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Union

from caribalmanac.core.errors import MalformedEventDefinition
from caribalmanac.core.provider import StaticEventProvider
from caribalmanac.core.types import (
    CATEGORIES,
    Country,
    EventDefinition,
    FixedDate,
    RelativeAnchor,
)
from caribalmanac.engines.computus import is_well_known, normalize_anchor
from caribalmanac.engines.recurrence import parse_rrule

LOGGER = logging.getLogger(__name__)

DATASET_RESOURCE = "events.json"


def _parse_fixed(text: str) -> FixedDate:
    try:
        m, d = text.split("-")
        return FixedDate(int(m), int(d))
    except ValueError as e:
        raise ValueError(f"fixed_date must be MM-DD, got '{text}': {e}") from e


def _tuple_of_str(raw: Any, field_name: str) -> tuple:
    if raw is None:
        return ()
    if isinstance(raw, str) or not isinstance(raw, Sequence):
        raise ValueError(f"{field_name} must be a list of strings")
    return tuple(str(x) for x in raw)


def parse_event(rec: Mapping[str, Any]) -> EventDefinition:
    """Build one EventDefinition from its JSON record."""
    ev_id = rec.get("id")
    if not isinstance(ev_id, str) or not ev_id:
        raise MalformedEventDefinition(f"Event record without a usable id: {dict(rec)!r}")

    def bad(msg: str) -> MalformedEventDefinition:
        return MalformedEventDefinition(f"Event '{ev_id}': {msg}", event_id=ev_id)

    if is_well_known(ev_id):
        raise bad(f"id collides with the well-known anchor '{normalize_anchor(ev_id)}'")

    category = rec.get("category")
    if category not in CATEGORIES:
        raise bad(f"category must be one of {CATEGORIES}, got {category!r}")

    country_code = rec.get("country_code")
    if not isinstance(country_code, str) or not country_code:
        raise bad("missing country_code")

    fixed_raw = rec.get("fixed_date")
    rrule_raw = rec.get("rrule")
    rel_raw = rec.get("relative_to")

    try:
        fixed = _parse_fixed(fixed_raw) if fixed_raw else None
        recurrence = parse_rrule(rrule_raw) if rrule_raw else None
        offset = rec.get("offset_days") or 0
        if isinstance(offset, bool) or not isinstance(offset, int):
            raise ValueError(f"offset_days must be an integer, got {offset!r}")
        relative = RelativeAnchor(normalize_anchor(rel_raw), offset) if rel_raw else None
        tags = _tuple_of_str(rec.get("tags"), "tags")
        sources = _tuple_of_str(rec.get("sources"), "sources")
    except ValueError as e:
        raise bad(str(e)) from e

    ev = EventDefinition(
        id=ev_id,
        country_code=country_code,
        category=category,
        title=str(rec.get("title", "")),
        fixed_date=fixed,
        recurrence=recurrence,
        relative=relative,
        tags=tags,
        description=str(rec.get("description", "")),
        location=str(rec.get("location", "")),
        sources=sources,
    )
    ev.kind  # raises MalformedEventDefinition unless exactly one kind is declared
    return ev


def parse_dataset(raw: Mapping[str, Any]) -> StaticEventProvider:
    events_raw = raw.get("events", [])
    countries_raw = raw.get("countries", [])

    seen: Set[str] = set()
    definitions: List[EventDefinition] = []
    for rec in events_raw:
        ev = parse_event(rec)
        if ev.id in seen:
            raise MalformedEventDefinition(f"Duplicate event id '{ev.id}'", event_id=ev.id)
        seen.add(ev.id)
        definitions.append(ev)

    countries = [Country(str(c["code"]), str(c["name"])) for c in countries_raw]
    LOGGER.debug("parsed %d event definitions for %d countries", len(definitions), len(countries))
    return StaticEventProvider.from_definitions(definitions, countries)


def read_dataset_json(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    if path is None:
        text = resources.files("caribalmanac.data").joinpath(DATASET_RESOURCE).read_text(encoding="utf-8")
    else:
        text = Path(path).read_text(encoding="utf-8")
    return json.loads(text)


def load_dataset(path: Optional[Union[str, Path]] = None) -> StaticEventProvider:
    """Load and validate a dataset file (default: the packaged one)."""
    LOGGER.debug("loading dataset from %s", path or f"caribalmanac.data/{DATASET_RESOURCE}")
    return parse_dataset(read_dataset_json(path))
