"""Derive the in-game day/night clock from a live connection's time facet.

The facet is whatever the connection keeps in its ``time`` attribute once server data has arrived:
``time`` (current decimal hour), ``sunrise``, ``sunset``, ``day_length_minutes``, ``time_scale``,
and optionally the methods ``is_day()`` and ``time_till_change()``. Older connection types lack the
two methods; their fields are reported as null.
"""

import logging
import math
from typing import Any, Dict, Optional, Protocol

from instance_api.core.errors import NotFound, Unavailable

logger = logging.getLogger(__name__)


class ConnectionLookup(Protocol):
    """Anything with get(guild_id) -> connection or None (LiveInstanceRegistry, dict)."""

    def get(self, guild_id: str) -> Optional[Any]: ...


def format_decimal_time(value: Optional[float]) -> Optional[str]:
    """13.5 -> "13:30". Hours and minutes are floored, zero-padded to 2 digits. None/0 -> None."""
    if not value:
        return None
    hours = math.floor(value)
    minutes = math.floor((value - hours) * 60)
    return f"{hours:02d}:{minutes:02d}"


def _present(value: Any) -> Any:
    # Falsy means "not reported": a live 0 (e.g. midnight) is indistinguishable from unset upstream.
    return value if value else None


def _call_capability(facet: Any, name: str) -> Any:
    """Call facet.<name>() when the facet provides it; None when it does not."""
    method = getattr(facet, name, None)
    if not callable(method):
        return None
    return method()


class ClockResolver:
    """Look up a guild's live connection and build the clock projection."""

    def __init__(self, connections: ConnectionLookup) -> None:
        self._connections = connections

    def get_clock(self, guild_id: str) -> Dict[str, Any]:
        """Return the clock projection; every key is always present (null when not reported).

        Raises:
            NotFound("instance"): no live connection for guild_id.
            Unavailable("time data"): connected but no time data received yet.
        """
        connection = self._connections.get(guild_id)
        if connection is None:
            raise NotFound("instance", {"guildId": guild_id})
        facet = getattr(connection, "time", None)
        if not facet:
            raise Unavailable("time data", {"guildId": guild_id})

        current_time = _present(getattr(facet, "time", None))
        sunrise = _present(getattr(facet, "sunrise", None))
        sunset = _present(getattr(facet, "sunset", None))
        return {
            "currentTime": current_time,
            "currentTimeFormatted": format_decimal_time(current_time),
            "sunrise": sunrise,
            "sunriseFormatted": format_decimal_time(sunrise),
            "sunset": sunset,
            "sunsetFormatted": format_decimal_time(sunset),
            "isDay": _call_capability(facet, "is_day"),
            "timeTillChange": _call_capability(facet, "time_till_change"),
            "dayLengthMinutes": _present(getattr(facet, "day_length_minutes", None)),
            "timeScale": _present(getattr(facet, "time_scale", None)),
        }
