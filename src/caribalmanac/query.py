"""Lookups over an already-expanded event list (what the calendar views use)."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Sequence, Union

from .core.time import parse_ymd
from .core.types import CATEGORIES, ExpandedEvent


def events_for_date(events: Iterable[ExpandedEvent], d: Union[date, str]) -> List[ExpandedEvent]:
    day = parse_ymd(d) if isinstance(d, str) else d
    return [e for e in events if e.date == day]


def filter_events(
    events: Iterable[ExpandedEvent],
    *,
    category: str = "all",
    tags: Sequence[str] = (),
    search: str = "",
) -> List[ExpandedEvent]:
    """
    category: "all" or one of CATEGORIES.
    tags: keep events carrying at least one of these tags.
    search: case-insensitive substring of title, description or any tag.
    """
    if category != "all" and category not in CATEGORIES:
        raise ValueError(f"category must be 'all' or one of {CATEGORIES}, got '{category}'")

    out = list(events)
    if category != "all":
        out = [e for e in out if e.definition.category == category]
    if tags:
        wanted = set(tags)
        out = [e for e in out if wanted.intersection(e.definition.tags)]
    needle = search.strip().lower()
    if needle:
        out = [
            e for e in out
            if needle in e.definition.title.lower()
            or needle in e.definition.description.lower()
            or any(needle in t.lower() for t in e.definition.tags)
        ]
    return out


def available_tags(events: Iterable[ExpandedEvent]) -> List[str]:
    return sorted({t for e in events for t in e.definition.tags})
