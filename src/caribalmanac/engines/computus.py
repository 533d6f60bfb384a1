"""
caribalmanac.engines.computus
-----------------------------
Moveable feasts of the Gregorian calendar. Easter Sunday follows the
anonymous Gregorian algorithm (Meeus, Astronomical Algorithms, ch. 8);
everything else is a fixed day offset from it.
"""

from __future__ import annotations

from datetime import date
from functools import lru_cache
from typing import Callable, Dict

from caribalmanac.core.time import add_days, check_year

ASH_WEDNESDAY = "ash-wednesday"
EASTER_SUNDAY = "easter-sunday"

# Ash Wednesday opens Lent: 46 days (40 fasting days + 6 Sundays) before Easter
ASH_WEDNESDAY_OFFSET = -46


@lru_cache(maxsize=512)
def easter_sunday(year: int) -> date:
    """Gregorian Easter Sunday for the given year."""
    check_year(year)
    a = year % 19                     # golden number - 1
    b, c = divmod(year, 100)          # century, year of century
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3              # lunar (Metonic) correction
    h = (19 * a + b - d - g + 15) % 30  # epact-derived: days from Mar 21 to paschal full moon
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7  # days from full moon to the following Sunday
    m = (a + 11 * h + 22 * l) // 451
    month, day0 = divmod(h + l - 7 * m + 114, 31)
    return date(year, month, day0 + 1)


@lru_cache(maxsize=512)
def ash_wednesday(year: int) -> date:
    """Ash Wednesday: Easter Sunday minus 46 days."""
    return add_days(easter_sunday(year), ASH_WEDNESDAY_OFFSET)


WELL_KNOWN_ANCHORS: Dict[str, Callable[[int], date]] = {
    ASH_WEDNESDAY: ash_wednesday,
    EASTER_SUNDAY: easter_sunday,
}

# spelling used by the original almanac data
ANCHOR_ALIASES = {
    "ash_wednesday": ASH_WEDNESDAY,
    "easter_sunday": EASTER_SUNDAY,
    "easter": EASTER_SUNDAY,
}


def normalize_anchor(name: str) -> str:
    return ANCHOR_ALIASES.get(name, name)


def is_well_known(name: str) -> bool:
    return normalize_anchor(name) in WELL_KNOWN_ANCHORS


def anchor_date(name: str, year: int) -> date:
    key = normalize_anchor(name)
    if key not in WELL_KNOWN_ANCHORS:
        raise KeyError(f"Unknown anchor '{name}'. Available: {sorted(WELL_KNOWN_ANCHORS)}")
    return WELL_KNOWN_ANCHORS[key](year)
