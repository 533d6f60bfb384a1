"""
caribalmanac.engines.relative
-----------------------------
Events declared as a signed day offset from another date: a well-known
moveable feast, or any other event of the same country. References form a
dependency graph that is resolved on demand, so the order in which the
dataset lists events does not matter.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Set, Tuple

from caribalmanac.core.errors import CircularReferenceError, UnknownAnchorError
from caribalmanac.core.time import add_days
from caribalmanac.core.types import EventDefinition, RelativeAnchor
from caribalmanac.engines.computus import WELL_KNOWN_ANCHORS, normalize_anchor

# None means "does not occur this year" (leap-day skip policy)
DeclaredResolver = Callable[[EventDefinition], Optional[date]]


class AnchorTable:
    """
    Anchor name -> resolved date for a single (country, year) run.

    Well-known anchors are computed on first use; event ids are resolved on
    first reference, through resolve_relative for relative events and through
    resolve_declared for fixed-date and recurrence events.
    """
    def __init__(
        self,
        year: int,
        definitions: Mapping[str, EventDefinition],
        resolve_declared: DeclaredResolver,
    ):
        self.year = year
        self.definitions = definitions
        self._resolve_declared = resolve_declared
        self._dates: Dict[str, Optional[date]] = {}
        self._visiting: List[str] = []
        self._visiting_set: Set[str] = set()

    def __contains__(self, name: str) -> bool:
        return normalize_anchor(name) in self._dates

    def __len__(self) -> int:
        return len(self._dates)

    def __iter__(self) -> Iterator[str]:
        return iter(self._dates)

    def get(self, name: str) -> Optional[date]:
        return self._dates.get(normalize_anchor(name))

    def items(self) -> List[Tuple[str, Optional[date]]]:
        return list(self._dates.items())

    def record(self, name: str, d: Optional[date]) -> None:
        self._dates[normalize_anchor(name)] = d

    def resolve(self, name: str, *, requested_by: Optional[str] = None) -> Optional[date]:
        key = normalize_anchor(name)
        if key in self._dates:
            return self._dates[key]

        if key in WELL_KNOWN_ANCHORS:
            d: Optional[date] = WELL_KNOWN_ANCHORS[key](self.year)
        else:
            ev = self.definitions.get(key)
            if ev is None:
                who = f"Event '{requested_by}'" if requested_by else "Lookup"
                raise UnknownAnchorError(
                    f"{who} references unknown anchor '{name}'",
                    event_id=requested_by,
                    anchor=name,
                )
            if ev.kind == "relative":
                return resolve_relative(ev, self.year, self)
            d = self._resolve_declared(ev)

        self._dates[key] = d
        return d

    # cycle guard
    def _enter(self, event_id: str) -> None:
        if event_id in self._visiting_set:
            chain = self._visiting[self._visiting.index(event_id):] + [event_id]
            raise CircularReferenceError(
                f"Circular relative_to chain: {' -> '.join(chain)}",
                event_id=event_id,
                chain=chain,
            )
        self._visiting.append(event_id)
        self._visiting_set.add(event_id)

    def _leave(self, event_id: str) -> None:
        if not self._visiting or self._visiting[-1] != event_id:
            raise RuntimeError(f"anchor guard out of step leaving '{event_id}'")
        self._visiting_set.discard(self._visiting.pop())


def _anchor_of(event: EventDefinition) -> RelativeAnchor:
    if event.relative is None:
        raise ValueError(f"Event '{event.id}' is a {event.kind} event, not a relative one")
    return event.relative


def resolve_relative(event: EventDefinition, year: int, anchors: AnchorTable) -> Optional[date]:
    """
    Resolve a relative event against the run's anchor table.

    The relative_to links are followed down to the first anchor that is not
    itself a pending relative event; that anchor is resolved, then each
    offset_days on the way back up is added with civil-date arithmetic. Every
    date along the chain is recorded in the table so later references reuse
    it. The walk is iterative, so chain length is bounded only by the
    dataset. Returns None when the base anchor does not occur in this year.
    """
    if year != anchors.year:
        raise ValueError(f"Anchor table is for {anchors.year}, not {year}")
    if event.kind != "relative":
        raise ValueError(f"Event '{event.id}' is a {event.kind} event, not a relative one")

    if event.id in anchors:
        return anchors.get(event.id)

    pending: List[EventDefinition] = []
    current = event
    try:
        while True:
            anchors._enter(current.id)
            pending.append(current)
            target = _anchor_of(current).relative_to
            key = normalize_anchor(target)
            nxt = anchors.definitions.get(key)
            if key in anchors or key in WELL_KNOWN_ANCHORS or nxt is None or nxt.kind != "relative":
                d = anchors.resolve(target, requested_by=current.id)
                break
            current = nxt
    finally:
        for ev in reversed(pending):
            anchors._leave(ev.id)

    for ev in reversed(pending):
        d = None if d is None else add_days(d, _anchor_of(ev).offset_days)
        anchors.record(ev.id, d)
    return d
