from __future__ import annotations

from datetime import date, timedelta
import calendar as pycal
import argparse
from typing import Dict, List

import caribalmanac
from caribalmanac.core.types import ExpandedEvent
from caribalmanac.engines.config import LEAP_DAY_POLICIES, ExpansionConfig


def dow_header() -> str:
    return "Mo     Tu     We     Th     Fr     Sa     Su"


def cell(top: str, bot: str, w: int = 6) -> tuple[str, str]:
    return (top[:w].ljust(w), bot[:w].ljust(w))


def marker(events: List[ExpandedEvent]) -> str:
    # H historical, C cultural, count if more than one
    if not events:
        return ""
    kinds = "".join(sorted({e.definition.category[0].upper() for e in events}))
    return kinds if len(events) == 1 else f"{kinds}{len(events)}"


def render_grid(title: str, weeks: list[list[tuple[str, str]]]) -> List[str]:
    lines = [title, dow_header(), "-" * len(dow_header())]
    for wk in weeks:
        lines.append(" ".join(c[0] for c in wk).rstrip())
        lines.append(" ".join(c[1] for c in wk).rstrip())
    return lines


def month_grid(country_code: str, gy: int, gm: int, events: List[ExpandedEvent]) -> List[str]:
    first = date(gy, gm, 1)
    last = date(gy, gm, pycal.monthrange(gy, gm)[1])

    by_day: Dict[date, List[ExpandedEvent]] = {}
    for e in events:
        by_day.setdefault(e.date, []).append(e)

    weeks: list[list[tuple[str, str]]] = []
    wk: list[tuple[str, str]] = []
    for _ in range(first.weekday()):  # Monday=0
        wk.append(cell("", ""))
    d = first
    while d <= last:
        wk.append(cell(f"{d.day:2d}", marker(by_day.get(d, []))))
        if len(wk) == 7:
            weeks.append(wk)
            wk = []
        d += timedelta(days=1)
    if wk:
        while len(wk) < 7:
            wk.append(cell("", ""))
        weeks.append(wk)

    lines = render_grid(f"{country_code}  {pycal.month_name[gm]} {gy}", weeks)
    month_events = [e for e in events if e.date.year == gy and e.date.month == gm]
    if month_events:
        lines.append("")
        for e in month_events:
            lines.append(f"{e.iso}  {e.definition.title}  [{e.definition.category}]")
    return lines


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Print a Gregorian month grid with a country's events marked.")
    p.add_argument("country", help="Country code, e.g. TT")
    p.add_argument("year", type=int)
    p.add_argument("month", type=int)
    p.add_argument("--leap-day", choices=LEAP_DAY_POLICIES, default="clamp", help="Feb 29 policy in common years")
    p.add_argument("--dataset", help="alternative dataset JSON file")
    args = p.parse_args(argv)

    if not (1 <= args.month <= 12):
        raise SystemExit("month must be in 1..12")

    provider = None
    if args.dataset:
        from caribalmanac.data.loader import load_dataset
        provider = load_dataset(args.dataset)

    events = caribalmanac.expand_events_for_year(
        args.country, args.year,
        config=ExpansionConfig(leap_day_policy=args.leap_day),
        provider=provider,
    )
    print("\n".join(month_grid(args.country, args.year, args.month, events)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
