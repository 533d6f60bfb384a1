"""
caribalmanac.engines.expansion
------------------------------
The Orchestrator. Pulls a country's event definitions from the provider,
dispatches each to the fixed-date, recurrence or relative resolver, and
returns the dated events for one year.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from caribalmanac.core.errors import AlmanacError, MalformedEventDefinition
from caribalmanac.core.provider import EventProvider
from caribalmanac.core.time import check_year, is_leap_year
from caribalmanac.core.types import (
    EventDefinition,
    ExpandedEvent,
    ExpansionReport,
    ExpansionWarning,
)
from caribalmanac.engines.computus import is_well_known, normalize_anchor
from caribalmanac.engines.config import DEFAULT_CONFIG, ExpansionConfig
from caribalmanac.engines.recurrence import resolve_recurrence
from caribalmanac.engines.relative import AnchorTable

LOGGER = logging.getLogger(__name__)


def resolve_fixed(ev: EventDefinition, year: int, *, leap_day_policy: str = "clamp") -> Optional[date]:
    fd = ev.fixed_date
    if fd is None:
        raise ValueError(f"Event '{ev.id}' has no fixed_date")
    if fd.month == 2 and fd.day == 29 and not is_leap_year(year):
        if leap_day_policy == "skip":
            return None
        return date(year, 2, 28)
    return date(year, fd.month, fd.day)


def check_event_id(ev: EventDefinition) -> None:
    """Well-known anchor names (and their aliases) are reserved; anchor lookups always see the computed date."""
    if is_well_known(ev.id):
        raise MalformedEventDefinition(
            f"Event '{ev.id}': id collides with the well-known anchor '{normalize_anchor(ev.id)}'",
            event_id=ev.id,
        )


def sort_key(e: ExpandedEvent) -> Tuple[date, str]:
    return (e.date, e.id)


class EventExpander:
    """
    Binds an event provider to an expansion config.

    Each call builds a fresh AnchorTable; nothing is kept between calls, so a
    single expander can serve concurrent callers.
    """
    def __init__(self, provider: EventProvider, config: ExpansionConfig = DEFAULT_CONFIG):
        self.provider = provider
        self.config = config

    # ---------------------------------------------------------
    # Per-kind dispatch
    # ---------------------------------------------------------

    def _resolve_declared(self, ev: EventDefinition, year: int) -> Optional[date]:
        if ev.kind == "fixed":
            return resolve_fixed(ev, year, leap_day_policy=self.config.leap_day_policy)
        if ev.recurrence is not None:
            return resolve_recurrence(ev.recurrence, year, event_id=ev.id)
        raise ValueError(f"Event '{ev.id}' is relative; resolve it through the anchor table")

    def _anchor_table(self, definitions: Sequence[EventDefinition], year: int) -> AnchorTable:
        by_id: Dict[str, EventDefinition] = {}
        for ev in definitions:
            if ev.id in by_id:
                LOGGER.debug("duplicate event id %s ignored", ev.id)
                continue
            by_id[ev.id] = ev
        return AnchorTable(year, by_id, lambda ev: self._resolve_declared(ev, year))

    # ---------------------------------------------------------
    # Public
    # ---------------------------------------------------------

    def expand_report(self, country_code: str, year: int) -> ExpansionReport:
        """Expand every definition of country_code for year, honouring config.on_error."""
        check_year(year)
        definitions = self.provider.events_for(country_code)
        if not definitions:
            LOGGER.debug("no events for country %r", country_code)
            return ExpansionReport(country_code, year)

        anchors = self._anchor_table(definitions, year)
        out: List[ExpandedEvent] = []
        warnings: List[ExpansionWarning] = []

        for ev_id, ev in anchors.definitions.items():
            try:
                check_event_id(ev)
                d = anchors.resolve(ev_id, requested_by=ev_id)
            except AlmanacError as e:
                err = e.while_expanding(ev_id)
                if self.config.on_error == "raise":
                    if err is e:
                        raise
                    raise err from e
                LOGGER.warning("skipping %s for %s/%d: %s", ev_id, country_code, year, err)
                warnings.append(ExpansionWarning(ev_id, str(err), err))
                continue
            if d is None:
                LOGGER.debug("%s does not occur in %d", ev_id, year)
                continue
            out.append(ExpandedEvent(ev, year, d))

        out.sort(key=sort_key)
        LOGGER.debug("expanded %d events for %s/%d", len(out), country_code, year)
        return ExpansionReport(country_code, year, tuple(out), tuple(warnings))

    def expand(self, country_code: str, year: int) -> List[ExpandedEvent]:
        return list(self.expand_report(country_code, year).events)
