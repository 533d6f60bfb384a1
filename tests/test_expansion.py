# tests/test_expansion.py

import random
from datetime import date, timedelta

import pytest

from caribalmanac.core.errors import (
    CircularReferenceError,
    InvalidRecurrenceRule,
    MalformedEventDefinition,
    UnknownAnchorError,
)
from caribalmanac.core.types import EventDefinition, FixedDate, RecurrenceRule
from caribalmanac.data.loader import load_dataset
from caribalmanac.engines.config import ExpansionConfig
from caribalmanac.engines.expansion import EventExpander


@pytest.fixture(scope="module")
def expander():
    return EventExpander(load_dataset())


def by_id(events):
    return {e.id: e for e in events}


def test_fixed_date_every_year(expander):
    for Y in range(1900, 2101):
        ev = by_id(expander.expand("BS", Y))["bs-independence"]
        assert ev.date == date(Y, 7, 10)
        assert ev.year == Y


def test_packaged_dataset_2024(expander):
    bs = by_id(expander.expand("BS", 2024))
    assert bs["bs-independence"].iso == "2024-07-10"
    assert bs["bs-emancipation"].iso == "2024-08-05"
    assert bs["bs-fox-hill-week"].iso == "2024-08-12"
    assert bs["bs-fox-hill-day"].iso == "2024-08-13"
    assert bs["bs-labour-day"].iso == "2024-06-07"
    assert bs["bs-heroes-day"].iso == "2024-10-14"
    assert bs["bs-good-friday"].iso == "2024-03-29"
    assert bs["bs-whit-monday"].iso == "2024-05-20"

    tt = by_id(expander.expand("TT", 2024))
    assert tt["tt-carnival-monday"].iso == "2024-02-12"
    assert tt["tt-carnival-tuesday"].iso == "2024-02-13"
    assert tt["tt-dimanche-gras"].iso == "2024-02-11"
    assert tt["tt-corpus-christi"].iso == "2024-05-30"

    jm = by_id(expander.expand("JM", 2024))
    assert jm["jm-ash-wednesday"].iso == "2024-02-14"
    assert jm["jm-heroes-day"].iso == "2024-10-21"

    bb = by_id(expander.expand("BB", 2024))
    assert bb["bb-kadooment"].iso == "2024-08-05"
    assert bb["bb-foreday-morning"].iso == "2024-08-03"


def test_carnival_2025(expander):
    tt = by_id(expander.expand("TT", 2025))
    assert tt["tt-carnival-monday"].iso == "2025-03-03"
    assert tt["tt-carnival-tuesday"].iso == "2025-03-04"


def test_sorted_by_date_then_id(expander):
    for code in ("BS", "BB", "JM", "TT"):
        events = expander.expand(code, 2024)
        keys = [(e.date, e.id) for e in events]
        assert keys == sorted(keys)
        assert len({e.id for e in events}) == len(events)


def test_ties_broken_by_id(fixed, rule, provider_of):
    # first Monday of August 2024 is Aug 5
    prov = provider_of(fixed("zz", "08-05"), rule("aa", 8, 0, 1), fixed("mm", "08-05"))
    events = EventExpander(prov).expand("XX", 2024)
    assert [e.id for e in events] == ["aa", "mm", "zz"]


def test_idempotent(expander):
    first = expander.expand("TT", 2024)
    second = expander.expand("TT", 2024)
    assert first == second
    expander.expand("TT", 1999)
    assert expander.expand("TT", 2024) == first


def test_order_independence(fixed, rule, rel, provider_of):
    defs = [
        rel("tuesday", "monday", 1),
        rel("monday", "ash-wednesday", -2),
        rel("week-after", "emancipation", 7),
        rule("emancipation", 8, 0, 1),
        fixed("independence", "07-10"),
        rel("eve", "independence", -1),
    ]
    reference = EventExpander(provider_of(*defs)).expand("XX", 2024)
    random.seed(99)
    for _ in range(20):
        random.shuffle(defs)
        assert EventExpander(provider_of(*defs)).expand("XX", 2024) == reference


def test_unknown_country_is_empty(expander):
    assert expander.expand("ZZ", 2024) == []
    report = expander.expand_report("ZZ", 2024)
    assert report.events == () and report.ok


def test_leap_day_clamp_and_skip(fixed, rel, provider_of):
    prov = provider_of(fixed("leap", "02-29"), rel("after-leap", "leap", 1))

    clamp = by_id(EventExpander(prov).expand("XX", 2023))
    assert clamp["leap"].date == date(2023, 2, 28)
    assert clamp["after-leap"].date == date(2023, 3, 1)

    skip = EventExpander(prov, ExpansionConfig(leap_day_policy="skip"))
    assert skip.expand("XX", 2023) == []
    assert [e.iso for e in skip.expand("XX", 2024)] == ["2024-02-29", "2024-03-01"]


def test_relative_event_may_land_in_next_year(fixed, rel, provider_of):
    prov = provider_of(fixed("eve", "12-30"), rel("after", "eve", 5))
    events = by_id(EventExpander(prov).expand("XX", 2024))
    assert events["after"].date == date(2025, 1, 4)
    assert events["after"].year == 2024


def test_malformed_definition_names_event(provider_of):
    both = EventDefinition(
        id="xx-both", country_code="XX", category="historical",
        fixed_date=FixedDate(1, 1), recurrence=RecurrenceRule(1, 0, 1),
    )
    with pytest.raises(MalformedEventDefinition) as ei:
        EventExpander(provider_of(both)).expand("XX", 2024)
    assert ei.value.event_id == "xx-both"

    none = EventDefinition(id="xx-none", country_code="XX", category="historical")
    with pytest.raises(MalformedEventDefinition, match="xx-none"):
        EventExpander(provider_of(none)).expand("XX", 2024)


def test_errors_fail_fast(fixed, rule, rel, provider_of):
    with pytest.raises(CircularReferenceError):
        EventExpander(provider_of(rel("a", "b", 1), rel("b", "a", 1))).expand("XX", 2024)
    with pytest.raises(UnknownAnchorError, match="ghost"):
        EventExpander(provider_of(rel("a", "ghost", 1))).expand("XX", 2024)
    with pytest.raises(InvalidRecurrenceRule) as ei:
        EventExpander(provider_of(rule("fifth-monday-feb", 2, 0, 5))).expand("XX", 2023)
    assert ei.value.event_id == "fifth-monday-feb"


def test_skip_policy_reports_warnings(fixed, rel, provider_of):
    prov = provider_of(
        fixed("ok", "03-01"),
        rel("broken", "ghost", 1),
        rel("depends-on-broken", "broken", 1),
        rel("fine", "ok", 2),
    )
    report = EventExpander(prov, ExpansionConfig(on_error="skip")).expand_report("XX", 2024)
    assert [e.id for e in report.events] == ["ok", "fine"]
    assert sorted(w.event_id for w in report.warnings) == ["broken", "depends-on-broken"]
    assert not report.ok
    assert all(isinstance(w.error, UnknownAnchorError) for w in report.warnings)


def test_duplicate_ids_keep_first(fixed, provider_of):
    prov = provider_of(fixed("dup", "01-05"), fixed("dup", "06-05"))
    events = EventExpander(prov).expand("XX", 2024)
    assert [(e.id, e.iso) for e in events] == [("dup", "2024-01-05")]


def test_provider_is_not_mutated(expander):
    before = tuple(expander.provider.events_for("TT"))
    expander.expand("TT", 2024)
    assert tuple(expander.provider.events_for("TT")) == before


def test_to_dict_boundary_format(expander):
    d = by_id(expander.expand("BS", 2024))["bs-emancipation"].to_dict()
    assert d["date"] == "2024-08-05"
    assert d["country_code"] == "BS"
    assert d["category"] == "historical"
    assert "emancipation" in d["tags"]


def test_config_validation():
    with pytest.raises(ValueError):
        ExpansionConfig(leap_day_policy="drop")
    with pytest.raises(ValueError):
        ExpansionConfig(on_error="ignore")
    cfg = ExpansionConfig().tweak(leap_day_policy="skip")
    assert cfg.leap_day_policy == "skip" and cfg.on_error == "raise"


def test_fail_fast_names_root_cause_and_expanded_event(rel, provider_of):
    prov = provider_of(rel("top", "mid", 1), rel("mid", "ghost", 1))
    with pytest.raises(UnknownAnchorError) as ei:
        EventExpander(prov).expand("XX", 2024)
    err = ei.value
    assert err.event_id == "mid"
    assert err.expanding == "top"
    assert err.anchor == "ghost"
    assert "'mid'" in str(err) and "'top'" in str(err)
    assert isinstance(err.__cause__, UnknownAnchorError)

    with pytest.raises(UnknownAnchorError) as ei:
        EventExpander(provider_of(rel("a", "ghost", 1))).expand("XX", 2024)
    assert ei.value.event_id == ei.value.expanding == "a"
    assert "while expanding" not in str(ei.value)


def test_skip_warnings_name_expanded_event(rel, provider_of):
    prov = provider_of(rel("broken", "ghost", 1), rel("after-broken", "broken", 1))
    report = EventExpander(prov, ExpansionConfig(on_error="skip")).expand_report("XX", 2024)
    w = {w.event_id: w for w in report.warnings}
    assert w["after-broken"].error.event_id == "broken"
    assert "while expanding 'after-broken'" in w["after-broken"].message
    assert "while expanding" not in w["broken"].message


@pytest.mark.parametrize("reserved", ["easter", "easter_sunday", "easter-sunday", "ash-wednesday", "ash_wednesday"])
def test_anchor_names_are_reserved_ids(reserved, fixed, rel, provider_of):
    prov = provider_of(fixed(reserved, "12-25"), rel("after", reserved, 1))
    with pytest.raises(MalformedEventDefinition, match="well-known anchor") as ei:
        EventExpander(prov).expand("XX", 2024)
    assert ei.value.event_id == reserved

    report = EventExpander(prov, ExpansionConfig(on_error="skip")).expand_report("XX", 2024)
    assert [w.event_id for w in report.warnings] == [reserved]
    assert [e.id for e in report.events] == ["after"]
    assert report.events[0].date != date(2024, 12, 26)


def test_very_long_chain_expands(rel, provider_of):
    n = 3000
    defs = [rel("e0", "ash-wednesday", 0)] + [rel(f"e{i}", f"e{i-1}", 1) for i in range(1, n)]
    random.seed(7)
    random.shuffle(defs)
    events = by_id(EventExpander(provider_of(*defs)).expand("XX", 2024))
    assert len(events) == n
    assert events[f"e{n-1}"].date == date(2024, 2, 14) + timedelta(days=n - 1)


def test_long_cycle_is_a_clean_error(rel, provider_of):
    n = 400
    defs = [rel(f"c{i}", f"c{(i + 1) % n}", 1) for i in range(n)]
    report = EventExpander(provider_of(*defs), ExpansionConfig(on_error="skip")).expand_report("XX", 2024)
    assert report.events == ()
    assert len(report.warnings) == n
    assert all(isinstance(w.error, CircularReferenceError) for w in report.warnings)
