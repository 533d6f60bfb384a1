from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional, Tuple

from .core.errors import AlmanacError
from .core.provider import EventProvider
from .core.types import Country, ExpandedEvent, ExpansionReport
from .engines.computus import ash_wednesday, easter_sunday
from .engines.config import DEFAULT_CONFIG, ExpansionConfig
from .engines.expansion import EventExpander
from .query import available_tags, events_for_date, filter_events  # noqa: F401

LOGGER = logging.getLogger(__name__)

_provider: Optional[EventProvider] = None

def set_provider(provider: EventProvider) -> None:
    global _provider
    _provider = provider

def get_provider() -> EventProvider:
    if _provider is None:
        raise RuntimeError("Event provider not initialized")
    return _provider

def _expander(config: Optional[ExpansionConfig], provider: Optional[EventProvider]) -> EventExpander:
    return EventExpander(provider if provider is not None else get_provider(), config or DEFAULT_CONFIG)

def expand_events_for_year(
    country_code: str,
    year: int,
    *,
    config: Optional[ExpansionConfig] = None,
    provider: Optional[EventProvider] = None,
) -> List[ExpandedEvent]:
    return _expander(config, provider).expand(country_code, year)

def expand_report(
    country_code: str,
    year: int,
    *,
    config: Optional[ExpansionConfig] = None,
    provider: Optional[EventProvider] = None,
) -> ExpansionReport:
    return _expander(config, provider).expand_report(country_code, year)

def get_available_countries(*, provider: Optional[EventProvider] = None) -> List[Country]:
    prov = provider if provider is not None else get_provider()
    return sorted(prov.countries(), key=lambda c: (c.name, c.code))

def compute_ash_wednesday(year: int) -> date:
    return ash_wednesday(year)

def compute_easter_sunday(year: int) -> date:
    return easter_sunday(year)

# ============================================================
# Data validation pass
# ============================================================

def validate_dataset(
    years: Iterable[int],
    *,
    config: Optional[ExpansionConfig] = None,
    provider: Optional[EventProvider] = None,
) -> List[Tuple[str, int, AlmanacError]]:
    """
    Expand every country over the given years and collect every
    data-integrity error as (country_code, year, error). An empty list means
    the dataset is clean for that range.
    """
    prov = provider if provider is not None else get_provider()
    expander = EventExpander(prov, (config or DEFAULT_CONFIG).tweak(on_error="skip"))
    years = list(years)
    problems: List[Tuple[str, int, AlmanacError]] = []

    for country in prov.countries():
        for Y in years:
            report = expander.expand_report(country.code, Y)
            problems.extend((country.code, Y, w.error) for w in report.warnings)
    LOGGER.debug("validated %d countries over %d years: %d problems", len(prov.countries()), len(years), len(problems))
    return problems
