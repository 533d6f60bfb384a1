from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Protocol, Sequence, Tuple

from .types import Country, EventDefinition

class EventProvider(Protocol):
    def events_for(self, country_code: str) -> Sequence[EventDefinition]: ...
    def countries(self) -> Sequence[Country]: ...

@dataclass(frozen=True)
class StaticEventProvider:
    """Read-only, in-memory dataset: country code -> ordered event definitions."""
    _events: Mapping[str, Tuple[EventDefinition, ...]]
    _countries: Tuple[Country, ...] = field(default_factory=tuple)

    @classmethod
    def from_definitions(cls, definitions: Sequence[EventDefinition], countries: Sequence[Country] = ()) -> "StaticEventProvider":
        by_country: Dict[str, List[EventDefinition]] = {}
        for ev in definitions:
            by_country.setdefault(ev.country_code, []).append(ev)
        known = {c.code for c in countries}
        # countries without an explicit listing still show up, named by their code
        extra = tuple(Country(code, code) for code in sorted(by_country) if code not in known)
        return cls({k: tuple(v) for k, v in by_country.items()}, tuple(countries) + extra)

    def events_for(self, country_code: str) -> Tuple[EventDefinition, ...]:
        return self._events.get(country_code, ())

    def countries(self) -> Tuple[Country, ...]:
        return self._countries

    def codes(self) -> List[str]:
        return sorted(self._events.keys())
