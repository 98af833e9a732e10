"""Read-only access to persisted guild instance files (<instances_dir>/<guild_id>.json)."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from instance_api.core.errors import InternalError, NotFound

logger = logging.getLogger(__name__)

# Derived countdowns the bot rewrites on every tick; not part of the server snapshot.
TRANSIENT_SERVER_KEYS = ("timeTillDay", "timeTillNight")


def _reject_constant(token: str) -> Any:
    # NaN and Infinity are not JSON; json.loads would otherwise accept them.
    raise ValueError(f"non-JSON constant {token}")


def _server_key(active_server: Any) -> Optional[str]:
    """serverList key for activeServer: strings as-is, integers by their decimal form, anything else None."""
    if isinstance(active_server, str):
        return active_server
    if isinstance(active_server, int) and not isinstance(active_server, bool):
        return str(active_server)
    return None


class InstanceReader:
    """Load one guild's instance record per call and project its active server. No caching."""

    def __init__(self, instances_dir: Union[str, Path]) -> None:
        self._dir = Path(instances_dir)

    @property
    def instances_dir(self) -> Path:
        return self._dir

    def _record_path(self, guild_id: str) -> Optional[Path]:
        """Path for guild_id, or None when the id cannot name a file in instances_dir."""
        if not guild_id or guild_id in (".", ".."):
            return None
        if Path(guild_id).name != guild_id or "\\" in guild_id or "\x00" in guild_id:
            return None
        return self._dir / f"{guild_id}.json"

    def load_instance(self, guild_id: str) -> Dict[str, Any]:
        """Read and parse the guild's record. NotFound("guild") if absent, InternalError if unreadable or not an object."""
        path = self._record_path(guild_id)
        if path is None:
            raise NotFound("guild", {"guildId": guild_id})
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise NotFound("guild", {"guildId": guild_id}) from None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("read instance file failed guild_id=%s path=%s: %s", guild_id, path, e)
            raise InternalError("instance file unreadable") from e
        try:
            data = json.loads(text, parse_constant=_reject_constant)
        except ValueError as e:
            logger.warning("instance file is not valid JSON guild_id=%s path=%s: %s", guild_id, path, e)
            raise InternalError("instance file malformed") from e
        if not isinstance(data, dict):
            logger.warning("instance file is not a JSON object guild_id=%s type=%s", guild_id, type(data).__name__)
            raise InternalError("instance file malformed")
        return data

    def get_active_server(self, guild_id: str) -> Dict[str, Any]:
        """Return {"activeServer": key, "server": <active entry without transient keys>}.

        Raises:
            NotFound("guild"): no record for guild_id.
            NotFound("activeServer"): activeServer unset or not in serverList; context carries
                activeServer (attempted value, may be None) and availableServers (serverList keys).
            InternalError: record, serverList or the active entry is structurally malformed.
        """
        data = self.load_instance(guild_id)
        active_server = data.get("activeServer")
        server_list = data.get("serverList")
        if server_list is not None and not isinstance(server_list, dict):
            logger.warning("serverList is not an object guild_id=%s type=%s", guild_id, type(server_list).__name__)
            raise InternalError("serverList malformed")
        server_list = server_list or {}

        key = _server_key(active_server) if active_server else None
        if key is None or server_list.get(key) is None:
            raise NotFound(
                "activeServer",
                {"activeServer": active_server, "availableServers": list(server_list.keys())},
            )

        entry = server_list[key]
        if not isinstance(entry, dict):
            logger.warning("serverList entry is not an object guild_id=%s active_server=%s", guild_id, active_server)
            raise InternalError("server entry malformed")
        server = {k: v for k, v in entry.items() if k not in TRANSIENT_SERVER_KEYS}
        return {"activeServer": active_server, "server": server}
