"""
Request logging middleware.
"""

import time
import uuid

import structlog

logger = structlog.get_logger("request")

# Health checks and scrapes would drown everything else.
QUIET_PATHS = {"/health/", "/metrics", "/metrics/"}


class RequestLoggingMiddleware:
    """
    Log one structured event per HTTP request.

    The request id is bound into structlog's context vars so every event
    logged while serving the request carries it, and is echoed back in the
    X-Request-ID response header.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())[:8]
        request.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        start_time = time.monotonic()
        response = self.get_response(request)
        duration_ms = round((time.monotonic() - start_time) * 1000, 2)

        if request.path not in QUIET_PATHS:
            status_code = response.status_code
            if status_code >= 500:
                log_func = logger.error
            elif status_code >= 400:
                log_func = logger.warning
            else:
                log_func = logger.info

            log_func(
                "http_request",
                method=request.method,
                path=request.path,
                status_code=status_code,
                duration_ms=duration_ms,
                query_params=request.META.get("QUERY_STRING", "")[:200] or None,
            )

        response["X-Request-ID"] = request_id
        structlog.contextvars.clear_contextvars()
        return response
