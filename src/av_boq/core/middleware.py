"""
FastAPI middleware for basic observability (request_id + latency).
Why: minimal tracing of slow model-backed endpoints without extra deps.
"""

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .logging import get_logger
from .metrics import metrics

_LOG = get_logger(__name__)


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        start = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = int((time.perf_counter() - start) * 1000)
            metrics.increment_requests()
            metrics.record_latency(duration_ms)
            if response is None or response.status_code >= 500:
                metrics.increment_errors()
            status = response.status_code if response is not None else "ERROR"
            _LOG.info(
                f"{request.method} {request.url.path} -> {status}",
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "status": status,
                    "duration_ms": duration_ms,
                    "request_id": request_id,
                },
            )
            if response is not None:
                response.headers["X-Request-ID"] = request_id
