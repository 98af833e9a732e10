"""Unified config: api_server (bind address, instance store, CORS) and logging.

Defaults: loaded from config/config.yaml.example (single source of truth, no code-level defaults).
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

CONFIG_ENV_VAR = "INSTANCE_API_CONFIG"
PORT_ENV_VAR = "INSTANCE_API_PORT"
INSTANCES_DIR_ENV_VAR = "INSTANCE_API_INSTANCES_DIR"

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

EXAMPLE_CONFIG_PATH = _PROJECT_ROOT / "config" / "config.yaml.example"

# api_server / logging defaults, read once from EXAMPLE_CONFIG_PATH
_DEFAULTS: Optional[Dict[str, Any]] = None


def _defaults() -> Dict[str, Any]:
    global _DEFAULTS
    if _DEFAULTS is None:
        with open(EXAMPLE_CONFIG_PATH, encoding="utf-8") as f:
            _DEFAULTS = yaml.safe_load(f) or {}
    return _DEFAULTS


def _overlay(defaults: Dict[str, Any], user: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of defaults with user values laid over it; nested sections (api_server.cors) merge key by key."""
    out = dict(defaults)
    for key, value in user.items():
        below = out.get(key)
        out[key] = _overlay(below, value) if isinstance(below, dict) and isinstance(value, dict) else value
    return out


def _section(config: Optional[Dict[str, Any]], name: str) -> Dict[str, Any]:
    """One top-level section with defaults filled in; {} when neither side has it."""
    return _overlay(_defaults(), config or {}).get(name) or {}


def read_config(config_path: Optional[str] = None) -> Tuple[dict, str]:
    """Load YAML config. Returns (config, resolved_path).

    Order: explicit path, then $INSTANCE_API_CONFIG, then config/config.yaml; falls back to the example file.
    """
    config_path = config_path or os.environ.get(CONFIG_ENV_VAR) or str(_PROJECT_ROOT / "config" / "config.yaml")
    if not Path(config_path).exists():
        config_path = str(EXAMPLE_CONFIG_PATH)
    config_path = str(Path(config_path).resolve())
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    return config, config_path


def get_api_server_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Return flat api_server config: host, port, instances_dir (Path), allow_origins, allow_headers.

    Environment overrides: INSTANCE_API_PORT, INSTANCE_API_INSTANCES_DIR.
    A relative instances_dir is resolved against the current working directory.
    """
    server = _section(config, "api_server")
    cors = server.get("cors") or {}

    port = os.environ.get(PORT_ENV_VAR) or server.get("port")
    if port is None:
        port = 8074
    instances_dir = os.environ.get(INSTANCES_DIR_ENV_VAR) or server.get("instances_dir") or "instances"
    instances_path = Path(instances_dir)
    if not instances_path.is_absolute():
        instances_path = Path.cwd() / instances_path

    return {
        "host": server.get("host"),
        "port": int(port),
        "instances_dir": instances_path,
        "allow_origins": list(cors.get("allow_origins") or []),
        "allow_headers": list(cors.get("allow_headers") or []),
    }


def get_logging_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return logging config (level, format, datefmt); level upper-cased."""
    log_cfg = _section(config, "logging")
    return {
        "level": str(log_cfg.get("level") or "INFO").upper(),
        "format": log_cfg.get("format"),
        "datefmt": log_cfg.get("datefmt"),
    }
