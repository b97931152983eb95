from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

log = logging.getLogger("stiquery.errors")

INTERNAL_ERROR = "InternalServerError"


def error_payload(message: str, request_id: Optional[str] = None) -> dict:
    """500 body in the same `{"detail": {"error", "message"}}` shape the generator endpoints use."""
    payload: dict = {"detail": {"error": INTERNAL_ERROR, "message": message}}
    if request_id:
        payload["request_id"] = request_id
    return payload


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    Turns anything a route lets escape into a 500 without a traceback.

    The traceback is logged server-side with the request id; the client
    only sees the exception type name.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            rid = getattr(request.state, "request_id", None) or request.headers.get("x-request-id")
            log.exception("Unhandled %s on %s %s rid=%s", type(e).__name__, request.method, request.url.path, rid)
            body = error_payload(f"Unexpected {type(e).__name__} while handling the request", rid)
            return JSONResponse(status_code=500, content=body)
