"""caribalmanac public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""

# Load the packaged dataset on import
from . import api_init as _api_init  # noqa: F401

from .api import (
    expand_events_for_year,
    expand_report,
    get_available_countries,
    compute_ash_wednesday,
    compute_easter_sunday,
    events_for_date,
    filter_events,
    available_tags,
    validate_dataset,
    set_provider,
    get_provider,
)
from .core.errors import (
    AlmanacError,
    CircularReferenceError,
    InvalidRecurrenceRule,
    MalformedEventDefinition,
    UnknownAnchorError,
)
from .core.provider import EventProvider, StaticEventProvider
from .core.types import (
    LAST,
    Country,
    EventDefinition,
    ExpandedEvent,
    ExpansionReport,
    FixedDate,
    RecurrenceRule,
    RelativeAnchor,
)
from .engines.config import ExpansionConfig

__all__ = [
    "expand_events_for_year",
    "expand_report",
    "get_available_countries",
    "compute_ash_wednesday",
    "compute_easter_sunday",
    "events_for_date",
    "filter_events",
    "available_tags",
    "validate_dataset",
    "set_provider",
    "get_provider",
    "AlmanacError",
    "CircularReferenceError",
    "InvalidRecurrenceRule",
    "MalformedEventDefinition",
    "UnknownAnchorError",
    "EventProvider",
    "StaticEventProvider",
    "LAST",
    "Country",
    "EventDefinition",
    "ExpandedEvent",
    "ExpansionReport",
    "FixedDate",
    "RecurrenceRule",
    "RelativeAnchor",
    "ExpansionConfig",
]
