"""In-memory guild_id -> live connection map. Populated by the bot process, read by the clock resolver."""

import logging
import threading
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class LiveInstanceRegistry:
    """Thread-safe registry of live game-server connections keyed by guild id.

    The API only calls get(); register/unregister belong to whoever owns the connections.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._connections: Dict[str, Any] = {}

    def register(self, guild_id: str, connection: Any) -> None:
        with self._lock:
            self._connections[guild_id] = connection
        logger.debug("live instance registered guild_id=%s", guild_id)

    def unregister(self, guild_id: str) -> Optional[Any]:
        with self._lock:
            connection = self._connections.pop(guild_id, None)
        if connection is not None:
            logger.debug("live instance unregistered guild_id=%s", guild_id)
        return connection

    def get(self, guild_id: str) -> Optional[Any]:
        with self._lock:
            return self._connections.get(guild_id)

    def guild_ids(self) -> List[str]:
        with self._lock:
            return list(self._connections)

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)
