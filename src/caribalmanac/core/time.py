from __future__ import annotations
import calendar as pycal
from datetime import date, MINYEAR, MAXYEAR


def to_jdn(d: date) -> int:
    """Convert Gregorian date to Julian Day Number (JDN)."""
    y, m, day = d.year, d.month, d.day
    a = (14 - m) // 12
    y2 = y + 4800 - a
    m2 = m + 12 * a - 3
    jdn = day + (153 * m2 + 2) // 5 + 365 * y2 + y2 // 4 - y2 // 100 + y2 // 400 - 32045
    return jdn

def from_jdn(jdn: int) -> date:
    """Fliegel-Van Flandern inverse of to_jdn (Gregorian)."""
    a = jdn + 32044
    b = (4 * a + 3) // 146097
    c = a - (146097 * b) // 4
    d = (4 * c + 3) // 1461
    e = c - (1461 * d) // 4
    m = (5 * e + 2) // 153
    day = e - (153 * m + 2) // 5 + 1
    month = m + 3 - 12 * (m // 10)
    year = 100 * b + d - 4800 + (m // 10)
    return date(year, month, day)

def add_days(d: date, n: int) -> date:
    """Shift a civil date by n days (signed), rolling over months and years."""
    return from_jdn(to_jdn(d) + n)

def weekday(d: date) -> int:
    # 0=Mon..6=Sun, same convention as date.weekday()
    return to_jdn(d) % 7

def days_in_month(year: int, month: int) -> int:
    return pycal.monthrange(year, month)[1]

def is_leap_year(year: int) -> bool:
    return pycal.isleap(year)

def check_year(year: int) -> int:
    if isinstance(year, bool) or not isinstance(year, int):
        raise TypeError(f"year must be an int, got {type(year).__name__}")
    if not (MINYEAR <= year <= MAXYEAR):
        raise ValueError(f"year {year} outside supported range {MINYEAR}..{MAXYEAR}")
    return year

def parse_ymd(s: str) -> date:
    """Parse a YYYY-MM-DD civil date."""
    y, m, d = map(int, s.split("-"))
    return date(y, m, d)

def to_ymd(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"

def day_of_year(d: date) -> int:
    return (d - date(d.year, 1, 1)).days + 1
