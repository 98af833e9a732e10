"""FastAPI app: GET /health, GET /{guild_id} (active server snapshot), GET /{guild_id}/time (live clock).

Resolvers raise ResolveError kinds; the handlers below are the only place they become HTTP statuses.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from instance_api.config.settings import get_api_server_config
from instance_api.core.errors import INTERNAL, NOT_FOUND, UNAVAILABLE, InternalError, ResolveError
from instance_api.core.logging_utils import log_request_outcome
from instance_api.status_server.clock import ClockResolver, ConnectionLookup
from instance_api.status_server.reader import InstanceReader
from instance_api.status_server.registry import LiveInstanceRegistry

logger = logging.getLogger(__name__)

_STATUS_BY_KIND = {
    NOT_FOUND: 404,
    UNAVAILABLE: 503,
    INTERNAL: 500,
}

_NOT_FOUND_MESSAGES = {
    "guild": "Guild not found",
    "activeServer": "Active server not found",
    "instance": "Instance not found",
}

_INTERNAL_ERROR_BODY = {"error": "Internal server error"}


def _error_body(exc: ResolveError) -> Tuple[int, Dict[str, Any]]:
    """(status, body) for a resolver failure. Internal errors never expose what/context."""
    status = _STATUS_BY_KIND.get(exc.kind, 500)
    if status == 500:
        return status, dict(_INTERNAL_ERROR_BODY)
    if status == 503:
        return status, {"error": f"{exc.what[:1].upper()}{exc.what[1:]} not available"}
    body: Dict[str, Any] = {"error": _NOT_FOUND_MESSAGES.get(exc.what, "Not found")}
    if exc.what == "activeServer":
        body["activeServer"] = exc.context.get("activeServer")
        body["availableServers"] = exc.context.get("availableServers", [])
    return status, body


def _resolve(resolver: Callable[[str], Dict[str, Any]], guild_id: str) -> Dict[str, Any]:
    """Call resolver; anything that is not already a ResolveError becomes an InternalError."""
    try:
        return resolver(guild_id)
    except ResolveError:
        raise
    except Exception as e:
        raise InternalError("unexpected failure") from e


def create_app(
    reader: InstanceReader,
    clock: ClockResolver,
    allow_origins: Optional[list] = None,
    allow_headers: Optional[list] = None,
) -> FastAPI:
    """Build FastAPI app around the two resolvers. Owns no state beyond them."""
    app = FastAPI(title="Guild Instance API", description="Read-only status of guild game-server instances")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins if allow_origins is not None else ["*"],
        allow_methods=["GET"],
        allow_headers=allow_headers if allow_headers is not None else ["*"],
    )

    @app.exception_handler(ResolveError)
    async def handle_resolve_error(request: Request, exc: ResolveError) -> JSONResponse:
        status, body = _error_body(exc)
        guild_id = request.path_params.get("guild_id")
        extra = {"kind": exc.kind, "what": exc.what.replace(" ", "_")}
        if status == 500 and exc.__cause__ is not None:
            logger.error("resolver failed guild_id=%s path=%s", guild_id, request.url.path, exc_info=exc)
        log_request_outcome(request.url.path, guild_id, status, extra)
        return JSONResponse(status_code=status, content=body)

    @app.get("/health")
    def get_health() -> Dict[str, Any]:
        """Liveness probe; touches neither resolver."""
        return {"status": "ok"}

    @app.get("/{guild_id}")
    def get_active_server(guild_id: str) -> Dict[str, Any]:
        """Active server of the guild's stored instance, minus timeTillDay/timeTillNight."""
        payload = _resolve(reader.get_active_server, guild_id)
        log_request_outcome(f"/{guild_id}", guild_id, 200, {"active_server": payload["activeServer"]})
        return payload

    @app.get("/{guild_id}/time")
    def get_time(guild_id: str) -> Dict[str, Any]:
        """In-game clock of the guild's live connection. 503 until the connection has time data."""
        payload = _resolve(clock.get_clock, guild_id)
        log_request_outcome(f"/{guild_id}/time", guild_id, 200)
        return payload

    return app


def build_app(config: dict, registry: Optional[ConnectionLookup] = None) -> Tuple[FastAPI, Dict[str, Any]]:
    """App plus flat api_server config. Without a registry, /{guild_id}/time always answers 404."""
    server_cfg = get_api_server_config(config)
    reader = InstanceReader(server_cfg["instances_dir"])
    clock = ClockResolver(registry if registry is not None else LiveInstanceRegistry())
    app = create_app(
        reader,
        clock,
        allow_origins=server_cfg["allow_origins"] or None,
        allow_headers=server_cfg["allow_headers"] or None,
    )
    return app, server_cfg


def run_server(config: dict, registry: Optional[ConnectionLookup] = None) -> None:
    """Start the API server (blocking). Host/port/instances_dir from the api_server section."""
    import uvicorn

    app, server_cfg = build_app(config, registry)
    host, port = server_cfg["host"] or "0.0.0.0", server_cfg["port"]
    logger.info("API server running on http://%s:%s (instances_dir=%s)", host, port, server_cfg["instances_dir"])
    uvicorn.run(app, host=host, port=port, log_level="info")


def serve_in_background(config: dict, registry: ConnectionLookup) -> Tuple[threading.Thread, Any]:
    """Run the API in a daemon thread next to the process that owns registry.

    Returns (thread, uvicorn.Server); set server.should_exit = True to stop.
    """
    import uvicorn

    app, server_cfg = build_app(config, registry)
    host, port = server_cfg["host"] or "0.0.0.0", server_cfg["port"]
    server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_level="info"))
    thread = threading.Thread(target=server.run, name="instance-api", daemon=True)
    thread.start()
    logger.info("API server running on http://%s:%s (background thread)", host, port)
    return thread, server
