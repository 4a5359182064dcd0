"""
Request logging for the inspection API.

Every request gets a correlation id (taken from ``X-Correlation-ID`` when the
caller sends one) and one access log line on ``fleetinspect.requests``. The
line carries the route template and the vehicle, report or alert id the
request addressed, so the history of one bus can be grepped out of the logs.
"""

import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("fleetinspect.requests")

CORRELATION_HEADER = "X-Correlation-ID"
TRACKED_PATH_PARAMS = ("vehicle_id", "report_id", "alert_id")


def request_context(request: Request) -> dict:
    """Route template and tracked ids of a request that has been routed."""
    context = {}
    route = request.scope.get("route")
    if route is not None:
        context["route"] = getattr(route, "path", None)
    path_params = request.scope.get("path_params") or {}
    for name in TRACKED_PATH_PARAMS:
        if name in path_params:
            context[name] = path_params[name]
    return context


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
        request.state.correlation_id = correlation_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[CORRELATION_HEADER] = correlation_id
        response.headers["X-Process-Time"] = f"{elapsed_ms:.2f}"

        log_data = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(elapsed_ms, 2),
            "ip": request.client.host if request.client else "unknown",
            **request_context(request),
        }
        summary = f"{request.method} {log_data.get('route', request.url.path)} -> {response.status_code}"

        if response.status_code >= 500:
            logger.error("Request failed: %s", summary, extra=log_data)
        elif response.status_code >= 400:
            logger.warning("Request rejected: %s", summary, extra=log_data)
        else:
            logger.info("Request served: %s", summary, extra=log_data)

        return response
