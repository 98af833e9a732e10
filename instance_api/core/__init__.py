"""Core: resolver error kinds and logging utilities."""

from instance_api.core.errors import InternalError, NotFound, ResolveError, Unavailable

__all__ = ["ResolveError", "NotFound", "Unavailable", "InternalError"]
