# tests/conftest.py

from typing import Callable

import pytest

from caribalmanac.core.provider import StaticEventProvider
from caribalmanac.core.types import EventDefinition, FixedDate, RecurrenceRule, RelativeAnchor


def _fixed(ev_id: str, mmdd: str, *, country: str = "XX", category: str = "historical", **kw) -> EventDefinition:
    m, d = map(int, mmdd.split("-"))
    return EventDefinition(id=ev_id, country_code=country, category=category, fixed_date=FixedDate(m, d), **kw)


def _rule(ev_id: str, month: int, weekday: int, ordinal: int, *, country: str = "XX", category: str = "cultural", **kw) -> EventDefinition:
    return EventDefinition(
        id=ev_id, country_code=country, category=category,
        recurrence=RecurrenceRule(month, weekday, ordinal), **kw,
    )


def _rel(ev_id: str, relative_to: str, offset: int, *, country: str = "XX", category: str = "cultural", **kw) -> EventDefinition:
    return EventDefinition(
        id=ev_id, country_code=country, category=category,
        relative=RelativeAnchor(relative_to, offset), **kw,
    )


@pytest.fixture
def fixed() -> Callable[..., EventDefinition]:
    return _fixed


@pytest.fixture
def rule() -> Callable[..., EventDefinition]:
    return _rule


@pytest.fixture
def rel() -> Callable[..., EventDefinition]:
    return _rel


@pytest.fixture
def provider_of() -> Callable[..., StaticEventProvider]:
    def build(*definitions: EventDefinition) -> StaticEventProvider:
        return StaticEventProvider.from_definitions(list(definitions))
    return build
