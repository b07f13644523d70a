"""aiohttp middlewares."""
from __future__ import annotations

from typing import Awaitable, Callable

import structlog
from aiohttp import web

from iot_server.api.negotiation import render, wants_html
from iot_server.core.exceptions import ServiceError

logger = structlog.get_logger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _error_response(request: web.Request, status: int, message: str) -> web.Response:
    if wants_html(request):
        return render(
            request,
            "error",
            {"title": "Error", "status": status, "message": message},
            status=status,
        )
    return web.json_response({"error": message}, status=status)


@web.middleware
async def error_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Turn service errors into JSON or HTML error responses."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except ServiceError as exc:
        log = logger.warning if exc.status_code >= 500 else logger.info
        log(
            "request_failed",
            method=request.method,
            path=request.path,
            status=exc.status_code,
            error=exc.message,
        )
        return _error_response(request, exc.status_code, exc.message)
    except Exception:
        logger.exception("unhandled_error", method=request.method, path=request.path)
        return _error_response(request, 500, "Internal server error")
