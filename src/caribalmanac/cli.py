from __future__ import annotations

import argparse
import json
import logging
import sys
import re
import importlib
import inspect
from typing import Optional

from caribalmanac.core.errors import AlmanacError
from caribalmanac.engines.config import ERROR_POLICIES, LEAP_DAY_POLICIES, ExpansionConfig
from caribalmanac.engines.recurrence import format_rrule


_YEAR_RE = re.compile(r"^\d{4}$")


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def _provider_from(path: Optional[str]):
    if not path:
        return None
    from caribalmanac.data.loader import load_dataset
    return load_dataset(path)


def _declaration(ev) -> str:
    kind = ev.kind
    if kind == "fixed":
        return f"fixed {ev.fixed_date}"
    if kind == "recurrence":
        return f"rule {format_rrule(ev.recurrence)}"
    rel = ev.relative
    return f"{rel.relative_to} {rel.offset_days:+d}d"


def cmd_expand(argv: list[str]) -> int:
    import caribalmanac

    p = argparse.ArgumentParser(prog="caribalmanac expand", description="List a country's dated events for one year")
    p.add_argument("country", help="Country code, e.g. BS")
    p.add_argument("year", type=int)
    p.add_argument("--category", choices=("all", "historical", "cultural"), default="all")
    p.add_argument("--tag", action="append", default=[], help="tag filter (repeatable, any match)")
    p.add_argument("--search", default="", help="case-insensitive text search")
    p.add_argument("--leap-day", choices=LEAP_DAY_POLICIES, default="clamp", help="Feb 29 policy in common years")
    p.add_argument("--on-error", choices=ERROR_POLICIES, default="raise")
    p.add_argument("--dataset", help="alternative dataset JSON file")
    p.add_argument("--json", action="store_true", help="emit JSON instead of a table")
    args = p.parse_args(argv)

    config = ExpansionConfig(leap_day_policy=args.leap_day, on_error=args.on_error)
    report = caribalmanac.expand_report(args.country, args.year, config=config, provider=_provider_from(args.dataset))
    events = caribalmanac.filter_events(report.events, category=args.category, tags=args.tag, search=args.search)

    if args.json:
        out = {
            "country_code": args.country,
            "year": args.year,
            "events": [e.to_dict() for e in events],
            "warnings": [{"event_id": w.event_id, "message": w.message} for w in report.warnings],
        }
        print(json.dumps(out, indent=2, ensure_ascii=False))
        return 0

    if not events:
        print(f"No events for {args.country} in {args.year}.")
    for e in events:
        d = e.definition
        print(f"{e.iso}  {d.title:<42s}  {d.category:<10s}  {_declaration(d)}")
    for w in report.warnings:
        print(f"warning: {w.message}", file=sys.stderr)
    return 0


def cmd_ash_wednesday(argv: list[str]) -> int:
    import caribalmanac

    p = argparse.ArgumentParser(prog="caribalmanac ash-wednesday", description="Print the date of Ash Wednesday")
    p.add_argument("years", type=int, nargs="+")
    p.add_argument("--easter", action="store_true", help="also print Easter Sunday")
    args = p.parse_args(argv)

    for Y in args.years:
        line = f"{Y}  {caribalmanac.compute_ash_wednesday(Y).isoformat()}"
        if args.easter:
            line += f"  easter {caribalmanac.compute_easter_sunday(Y).isoformat()}"
        print(line)
    return 0


def cmd_countries(argv: list[str]) -> int:
    import caribalmanac

    p = argparse.ArgumentParser(prog="caribalmanac countries", description="List supported countries")
    p.add_argument("--dataset", help="alternative dataset JSON file")
    args = p.parse_args(argv)

    for c in caribalmanac.get_available_countries(provider=_provider_from(args.dataset)):
        print(f"{c.code}  {c.name}")
    return 0


def cmd_validate(argv: list[str]) -> int:
    import caribalmanac

    p = argparse.ArgumentParser(prog="caribalmanac validate", description="Expand every country over a year range and report data errors")
    p.add_argument("--from-year", type=int, default=1900)
    p.add_argument("--to-year", type=int, default=2100)
    p.add_argument("--leap-day", choices=LEAP_DAY_POLICIES, default="clamp")
    p.add_argument("--dataset", help="alternative dataset JSON file")
    args = p.parse_args(argv)

    if args.to_year < args.from_year:
        raise SystemExit("--to-year must be >= --from-year")

    problems = caribalmanac.validate_dataset(
        range(args.from_year, args.to_year + 1),
        config=ExpansionConfig(leap_day_policy=args.leap_day),
        provider=_provider_from(args.dataset),
    )
    if not problems:
        print(f"Dataset OK for {args.from_year}..{args.to_year}.")
        return 0

    # collapse identical messages across years
    seen: dict[tuple[str, str], list[int]] = {}
    for code, Y, err in problems:
        seen.setdefault((code, str(err)), []).append(Y)
    for (code, msg), years in sorted(seen.items()):
        span = f"{years[0]}" if len(years) == 1 else f"{years[0]}..{years[-1]} ({len(years)} years)"
        print(f"{code}  {span}  {msg}")
    print(f"\n{len(problems)} problem(s).")
    return 1


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    # Shorthand: `caribalmanac 2025` prints Ash Wednesday
    if argv and _YEAR_RE.match(argv[0]):
        return cmd_ash_wednesday(argv)

    p = argparse.ArgumentParser(prog="caribalmanac", description="Caribbean historical and cultural event almanac.")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("expand", add_help=False, help="List a country's dated events for one year")
    sub.add_parser("ash-wednesday", add_help=False, help="Print Ash Wednesday (and Easter) dates")
    sub.add_parser("countries", add_help=False, help="List supported countries")
    sub.add_parser("validate", add_help=False, help="Check the dataset over a year range")

    # diagnostics
    sub.add_parser("month", add_help=False, help="Print a month grid with a country's events")
    sub.add_parser("ash-table", add_help=False, help="Print a table of Easter-dependent dates (diagnostics)")
    sub.add_parser("ash-scatter", add_help=False, help="Plot Ash Wednesday dates (needs the diagnostics extra)")

    args, rest = p.parse_known_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.cmd == "expand":
            return cmd_expand(rest)

        if args.cmd == "ash-wednesday":
            return cmd_ash_wednesday(rest)

        if args.cmd == "countries":
            return cmd_countries(rest)

        if args.cmd == "validate":
            return cmd_validate(rest)

        tool_map = {
            "month": "caribalmanac.diagnostics.pretty_month",
            "ash-table": "caribalmanac.diagnostics.ash_table",
            "ash-scatter": "caribalmanac.diagnostics.ash_scatter",
        }
        if args.cmd in tool_map:
            return _run_module_main(tool_map[args.cmd], rest)
    except AlmanacError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
