from __future__ import annotations

from datetime import date
import argparse
from typing import Callable, List, Tuple

import caribalmanac
from caribalmanac.core.time import add_days


# (column name, date for year)
COLUMNS: List[Tuple[str, Callable[[int], date]]] = [
    ("Carnival Mon", lambda Y: add_days(caribalmanac.compute_ash_wednesday(Y), -2)),
    ("Ash Wed", caribalmanac.compute_ash_wednesday),
    ("Good Fri", lambda Y: add_days(caribalmanac.compute_easter_sunday(Y), -2)),
    ("Easter", caribalmanac.compute_easter_sunday),
    ("Whit Mon", lambda Y: add_days(caribalmanac.compute_easter_sunday(Y), 50)),
]


def mmdd(d: date) -> str:
    return f"{d.month:02d}-{d.day:02d}"


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(
        description="Print a table of Easter-dependent dates (Carnival, Ash Wednesday, Easter, ...)."
    )
    p.add_argument("--from-year", type=int, default=2000)
    p.add_argument("--to-year", type=int, default=2030)
    p.add_argument(
        "--dates",
        choices=("mmdd", "iso"),
        default="mmdd",
        help="Display format in table columns (default: mmdd).",
    )
    p.add_argument(
        "--list-month",
        type=int,
        default=3,
        help="After the table, list the years whose Ash Wednesday falls in this month (default: 3=March).",
    )
    args = p.parse_args(argv)

    def fmt(d: date) -> str:
        return mmdd(d) if args.dates == "mmdd" else d.isoformat()

    Y0, Y1 = args.from_year, args.to_year
    if Y1 < Y0:
        raise SystemExit("--to-year must be >= --from-year")

    headers = ["Year"] + [name for name, _ in COLUMNS]
    colw = [5] + [max(len(fmt(date(2000, 1, 1))), len(h)) for h in headers[1:]]
    line = "  ".join(h.ljust(w) for h, w in zip(headers, colw))
    print(line)
    print("-" * len(line))

    hits: list[date] = []
    for Y in range(Y0, Y1 + 1):
        row = [str(Y).ljust(colw[0])]
        for (_, fn), w in zip(COLUMNS, colw[1:]):
            row.append(fmt(fn(Y)).ljust(w))
        print("  ".join(row))
        ash = caribalmanac.compute_ash_wednesday(Y)
        if ash.month == args.list_month:
            hits.append(ash)

    print(f"\nAsh Wednesday occurrences in month={args.list_month:02d}:")
    if not hits:
        print("(none)")
        return 0
    for d in hits:
        print(d.isoformat())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
