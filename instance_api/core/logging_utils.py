"""Logging setup and structured key=value lines for API request outcomes."""

import logging
from typing import Any, Dict, Optional

from instance_api.config.settings import get_logging_config

logger = logging.getLogger(__name__)


def setup_logging(config: Optional[Dict[str, Any]] = None) -> None:
    """basicConfig from the logging section (level, format, datefmt)."""
    log_cfg = get_logging_config(config)
    logging.basicConfig(
        format=log_cfg["format"] or "%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt=log_cfg["datefmt"] or "%Y-%m-%d %H:%M:%S",
        level=getattr(logging, log_cfg["level"], logging.INFO),
    )


def log_request_outcome(
    route: str,
    guild_id: Optional[str] = None,
    status: Optional[int] = None,
    extra: Optional[dict] = None,
) -> None:
    """Log one resolver outcome: route, guild_id, status plus extra key/values.

    500 goes to ERROR, 503 to WARNING, everything else to DEBUG so a busy poller does not flood the log.
    """
    extra = dict(extra or {})
    extra["route"] = route
    if guild_id is not None:
        extra["guild_id"] = guild_id
    if status is not None:
        extra["status"] = status
    msg = "api_request " + " ".join(f"{k}={v}" for k, v in sorted(extra.items()))
    if status is not None and status >= 500 and status != 503:
        logger.error(msg)
    elif status == 503:
        logger.warning(msg)
    else:
        logger.debug(msg)
