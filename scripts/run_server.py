#!/usr/bin/env python3
"""Standalone guild instance API. GET /health, GET /{guild_id}, GET /{guild_id}/time.

Reads api_server.* from config (positional path, $INSTANCE_API_CONFIG, or config/config.yaml). Standalone
there is no live connection registry, so /{guild_id}/time answers 404; bots embed the API with
instance_api.status_server.app.serve_in_background(config, registry) instead."""

import logging
import os
import sys

# Project root: instances_dir is resolved relative to it
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _PROJECT_ROOT)
os.chdir(_PROJECT_ROOT)


def main() -> None:
    from instance_api.config.settings import read_config
    from instance_api.core.logging_utils import setup_logging
    from instance_api.status_server.app import run_server

    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    config_path = args[0] if args else None
    if config_path and not os.path.isabs(config_path):
        config_path = os.path.join(_PROJECT_ROOT, config_path)
    config, resolved = read_config(config_path)
    setup_logging(config)
    logging.getLogger(__name__).info("Config: %s", resolved)
    run_server(config)


if __name__ == "__main__":
    main()
