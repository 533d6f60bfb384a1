from __future__ import annotations
import calendar as pycal
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Literal, Optional, Tuple

from .errors import AlmanacError, MalformedEventDefinition
from .time import to_ymd

Category = Literal["historical", "cultural"]
DeclarationKind = Literal["fixed", "recurrence", "relative"]

CATEGORIES: Tuple[str, ...] = ("historical", "cultural")

# Ordinal sentinel: the last matching weekday of the month
LAST = -1

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
# Feb 29 is a legal declaration; the leap-day policy decides what a common year does with it
_MAX_DAY = (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_ORDINAL_NAMES = {1: "first", 2: "second", 3: "third", 4: "fourth", 5: "fifth", LAST: "last"}


@dataclass(frozen=True)
class Country:
    code: str
    name: str


@dataclass(frozen=True)
class FixedDate:
    """Calendar-invariant month/day pair. Feb 29 is allowed."""
    month: int
    day: int

    def __post_init__(self) -> None:
        if not (1 <= self.month <= 12):
            raise ValueError(f"month must be in 1..12, got {self.month}")
        if not (1 <= self.day <= _MAX_DAY[self.month - 1]):
            raise ValueError(f"day {self.day} is not valid for month {self.month}")

    def __str__(self) -> str:
        return f"{self.month:02d}-{self.day:02d}"


@dataclass(frozen=True)
class RecurrenceRule:
    """The ordinal-th occurrence of weekday (0=Mon..6=Sun) in month; ordinal may be LAST."""
    month: int
    weekday: int
    ordinal: int

    def __post_init__(self) -> None:
        if not (1 <= self.month <= 12):
            raise ValueError(f"month must be in 1..12, got {self.month}")
        if not (0 <= self.weekday <= 6):
            raise ValueError(f"weekday must be in 0..6, got {self.weekday}")
        if not (self.ordinal == LAST or 1 <= self.ordinal <= 5):
            raise ValueError(f"ordinal must be in 1..5 or LAST, got {self.ordinal}")

    @property
    def is_last(self) -> bool:
        return self.ordinal == LAST

    def describe(self) -> str:
        return f"{_ORDINAL_NAMES[self.ordinal]} {WEEKDAY_NAMES[self.weekday]} of {pycal.month_name[self.month]}"


@dataclass(frozen=True)
class RelativeAnchor:
    relative_to: str
    offset_days: int = 0


@dataclass(frozen=True)
class EventDefinition:
    id: str
    country_code: str
    category: Category
    title: str = ""
    fixed_date: Optional[FixedDate] = None
    recurrence: Optional[RecurrenceRule] = None
    relative: Optional[RelativeAnchor] = None
    tags: Tuple[str, ...] = ()
    description: str = ""
    location: str = ""
    sources: Tuple[str, ...] = ()

    @property
    def kind(self) -> DeclarationKind:
        declared = [
            name for name, value in (
                ("fixed", self.fixed_date),
                ("recurrence", self.recurrence),
                ("relative", self.relative),
            ) if value is not None
        ]
        if len(declared) != 1:
            what = "none" if not declared else " and ".join(declared)
            raise MalformedEventDefinition(
                f"Event '{self.id}' must declare exactly one of fixed_date, rrule, relative_to (got {what})",
                event_id=self.id,
            )
        return declared[0]  # type: ignore[return-value]


@dataclass(frozen=True)
class ExpandedEvent:
    definition: EventDefinition
    year: int
    date: date

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def iso(self) -> str:
        return to_ymd(self.date)

    def to_dict(self) -> Dict[str, Any]:
        d = self.definition
        return {
            "id": d.id,
            "country_code": d.country_code,
            "title": d.title,
            "category": d.category,
            "tags": list(d.tags),
            "description": d.description,
            "location": d.location,
            "sources": list(d.sources),
            "year": self.year,
            "date": self.iso,
        }


@dataclass(frozen=True)
class ExpansionWarning:
    event_id: str
    message: str
    error: Optional[AlmanacError] = field(default=None, compare=False)


@dataclass(frozen=True)
class ExpansionReport:
    """Expanded events plus the definitions skipped under on_error='skip'."""
    country_code: str
    year: int
    events: Tuple[ExpandedEvent, ...] = ()
    warnings: Tuple[ExpansionWarning, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.warnings
