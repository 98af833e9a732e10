"""Read-only guild instance API (GET /health, GET /{guild_id}, GET /{guild_id}/time)."""

from instance_api.status_server.clock import ClockResolver, format_decimal_time
from instance_api.status_server.reader import InstanceReader
from instance_api.status_server.registry import LiveInstanceRegistry

__all__ = ["ClockResolver", "InstanceReader", "LiveInstanceRegistry", "format_decimal_time"]
