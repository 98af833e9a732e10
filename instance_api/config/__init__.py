"""YAML configuration: api_server and logging sections, defaults from config/config.yaml.example."""

from instance_api.config.settings import get_api_server_config, get_logging_config, read_config

__all__ = ["get_api_server_config", "get_logging_config", "read_config"]
