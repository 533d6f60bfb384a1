"""
caribalmanac.engines.recurrence
-------------------------------
"Nth / last weekday of a month" rules. The dataset writes them as compact
RFC 5545 RRULE text; they are parsed once into RecurrenceRule at load time
and resolved to one date per year here.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Dict, Optional

from caribalmanac.core.errors import InvalidRecurrenceRule
from caribalmanac.core.time import check_year, days_in_month, weekday
from caribalmanac.core.types import LAST, RecurrenceRule

RRULE_DAYS = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")

_BYDAY_RE = re.compile(r"^([+-]?\d{1,2})?(MO|TU|WE|TH|FR|SA|SU)$")


def resolve_recurrence(rule: RecurrenceRule, year: int, *, event_id: Optional[str] = None) -> date:
    """
    Resolve rule to its single occurrence in year.

    Raises InvalidRecurrenceRule when the requested ordinal does not exist in
    that month (e.g. a fifth Monday in a month with four).
    """
    check_year(year)
    n_days = days_in_month(year, rule.month)

    if rule.is_last:
        last = date(year, rule.month, n_days)
        return date(year, rule.month, n_days - (weekday(last) - rule.weekday) % 7)

    first = date(year, rule.month, 1)
    day = 1 + (rule.weekday - weekday(first)) % 7
    day += (rule.ordinal - 1) * 7
    if day > n_days:
        raise InvalidRecurrenceRule(
            f"No {rule.describe()} in {year}"
            + (f" (event '{event_id}')" if event_id else ""),
            event_id=event_id,
        )
    return date(year, rule.month, day)


def parse_rrule(text: str) -> RecurrenceRule:
    """
    Parse a yearly weekday-of-month RRULE.

    Accepted forms:
      FREQ=YEARLY;BYMONTH=8;BYDAY=1MO          first Monday of August
      FREQ=YEARLY;BYMONTH=5;BYDAY=-1MO         last Monday of May
      FREQ=YEARLY;BYMONTH=10;BYDAY=MO;BYSETPOS=2
    An optional "RRULE:" prefix is ignored. Anything else raises ValueError.
    """
    body = text.strip()
    if body.upper().startswith("RRULE:"):
        body = body[len("RRULE:"):]

    parts: Dict[str, str] = {}
    for item in body.split(";"):
        item = item.strip()
        if not item:
            continue
        if "=" not in item:
            raise ValueError(f"Malformed RRULE part '{item}' in '{text}'")
        key, value = item.split("=", 1)
        parts[key.strip().upper()] = value.strip().upper()

    if parts.pop("FREQ", None) != "YEARLY":
        raise ValueError(f"Only FREQ=YEARLY rules are supported: '{text}'")
    if parts.pop("INTERVAL", "1") != "1":
        raise ValueError(f"INTERVAL other than 1 is not supported: '{text}'")
    parts.pop("WKST", None)

    try:
        month = int(parts.pop("BYMONTH"))
        byday = parts.pop("BYDAY")
    except KeyError as e:
        raise ValueError(f"RRULE needs BYMONTH and BYDAY: '{text}'") from e
    except ValueError as e:
        raise ValueError(f"BYMONTH must be a single month number: '{text}'") from e

    m = _BYDAY_RE.match(byday)
    if m is None:
        raise ValueError(f"BYDAY must name a single weekday: '{text}'")
    ordinal_txt, day_code = m.groups()

    setpos = parts.pop("BYSETPOS", None)
    if ordinal_txt is not None and setpos is not None:
        raise ValueError(f"Give the ordinal in BYDAY or BYSETPOS, not both: '{text}'")
    ordinal = int(ordinal_txt if ordinal_txt is not None else (setpos or "1"))
    if ordinal == -1:
        ordinal = LAST
    elif ordinal < 1:
        raise ValueError(f"Only positive ordinals or -1 (last) are supported: '{text}'")

    if parts:
        raise ValueError(f"Unsupported RRULE parts {sorted(parts)} in '{text}'")

    return RecurrenceRule(month=month, weekday=RRULE_DAYS.index(day_code), ordinal=ordinal)


def format_rrule(rule: RecurrenceRule) -> str:
    ordinal = -1 if rule.is_last else rule.ordinal
    return f"FREQ=YEARLY;BYMONTH={rule.month};BYDAY={ordinal}{RRULE_DAYS[rule.weekday]}"
