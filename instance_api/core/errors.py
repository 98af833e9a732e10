"""Resolver outcomes other than success. The status server maps each kind to an HTTP status."""

from typing import Any, Dict, Optional

NOT_FOUND = "not_found"
UNAVAILABLE = "unavailable"
INTERNAL = "internal"


class ResolveError(Exception):
    """Base for resolver failures.

    Attributes:
        kind: one of NOT_FOUND, UNAVAILABLE, INTERNAL.
        what: the entity or data that could not be resolved (e.g. "guild", "activeServer", "time data").
        context: diagnostic key/values safe to return to the caller (empty for internal errors).
    """

    kind = INTERNAL

    def __init__(self, what: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(what)
        self.what = what
        self.context: Dict[str, Any] = dict(context or {})

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.what!r}, context={self.context!r})"


class NotFound(ResolveError):
    """Guild record, active server, or live instance does not exist."""

    kind = NOT_FOUND


class Unavailable(ResolveError):
    """Entity is known but its data has not arrived yet; caller may retry."""

    kind = UNAVAILABLE


class InternalError(ResolveError):
    """Malformed stored state or I/O failure. Details are logged, never returned."""

    kind = INTERNAL
