"""
Request ID middleware. Every response carries X-Request-ID and every API call
is logged once with status and duration.
"""
import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Probed by the load balancer every few seconds
UNLOGGED_PATHS = {"/healthz", "/readyz"}


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id
        context = {"request_id": request_id, "method": request.method, "path": request.url.path}

        start = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception:
            context["duration_ms"] = int((time.perf_counter() - start) * 1000)
            logger.exception("Unhandled error", extra=context)
            raise

        response.headers["X-Request-ID"] = request_id
        if request.url.path not in UNLOGGED_PATHS:
            context["status"] = response.status_code
            context["duration_ms"] = int((time.perf_counter() - start) * 1000)
            # user_id is set by the auth dependency on authenticated calls
            context["user_id"] = getattr(request.state, "user_id", None)
            level = logging.WARNING if response.status_code >= 500 else logging.INFO
            logger.log(level, "%s %s -> %s", request.method, request.url.path, response.status_code, extra=context)
        return response
