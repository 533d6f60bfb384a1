from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Literal

LeapDayPolicy = Literal["clamp", "skip"]
ErrorPolicy = Literal["raise", "skip"]

LEAP_DAY_POLICIES = ("clamp", "skip")
ERROR_POLICIES = ("raise", "skip")


@dataclass(frozen=True)
class ExpansionConfig:
    """
    Knobs for one expansion run.

    leap_day_policy:
        What a fixed Feb 29 becomes in a common year. "clamp" binds it to
        Feb 28 (default), "skip" omits the event (and anything anchored to it).
    on_error:
        "raise" fails fast on the first data-integrity error (default).
        "skip" drops the failing event and records a warning instead.
    """
    leap_day_policy: LeapDayPolicy = "clamp"
    on_error: ErrorPolicy = "raise"

    def __post_init__(self) -> None:
        if self.leap_day_policy not in LEAP_DAY_POLICIES:
            raise ValueError(f"leap_day_policy must be one of {LEAP_DAY_POLICIES}, got '{self.leap_day_policy}'")
        if self.on_error not in ERROR_POLICIES:
            raise ValueError(f"on_error must be one of {ERROR_POLICIES}, got '{self.on_error}'")

    def tweak(self, **kwargs) -> "ExpansionConfig":
        return replace(self, **kwargs)


DEFAULT_CONFIG = ExpansionConfig()
