from __future__ import annotations

import copy
from typing import Optional, Sequence


class AlmanacError(Exception):
    """
    Base error. event_id is the definition at fault; expanding is the event
    whose expansion ran into it, when that is a different one.
    """

    def __init__(self, message: str, *, event_id: Optional[str] = None):
        super().__init__(message)
        self.event_id = event_id
        self.expanding: Optional[str] = None

    def while_expanding(self, event_id: str) -> "AlmanacError":
        """Return this error tagged with the event being expanded (a copy if that is another event)."""
        if event_id == self.event_id:
            self.expanding = event_id
            return self
        err = copy.copy(self)
        err.args = (f"{self.args[0]} (while expanding '{event_id}')",) + self.args[1:]
        err.expanding = event_id
        return err


class MalformedEventDefinition(AlmanacError):
    """Raised when a definition populates none, or more than one, of the declaration kinds."""


class InvalidRecurrenceRule(AlmanacError):
    """Raised when a well-formed rule has no occurrence inside its target month."""


class UnknownAnchorError(AlmanacError):
    """Raised when a relative event references an id that does not exist."""

    def __init__(self, message: str, *, event_id: Optional[str] = None, anchor: Optional[str] = None):
        super().__init__(message, event_id=event_id)
        self.anchor = anchor


class CircularReferenceError(AlmanacError):
    """Raised when relative references form a cycle."""

    def __init__(self, message: str, *, event_id: Optional[str] = None, chain: Sequence[str] = ()):
        super().__init__(message, event_id=event_id)
        self.chain = tuple(chain)
