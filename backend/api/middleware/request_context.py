"""
Request context middleware - correlation ID and compute timing.

Every request gets:
- g.request_id (from the X-Request-ID header, or a fresh UUID)
- X-Request-ID and X-Compute-Time-Ms response headers

Slow requests are logged as:
    SLOW_REQUEST request_id=<uuid> path=<path> elapsed_ms=<float>
"""

import logging
import time
import uuid

from flask import Flask, g, request

logger = logging.getLogger('api.middleware.request')

# Full recomputation per request; anything slower than this is worth a look
SLOW_REQUEST_THRESHOLD_MS = 500


def setup_request_context_middleware(app: Flask) -> None:
    """Register before/after hooks on the Flask app."""

    @app.before_request
    def start_request_context():
        g.request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())
        g.request_start = time.perf_counter()

    @app.after_request
    def finish_request_context(response):
        request_id = getattr(g, 'request_id', None)
        if request_id:
            response.headers['X-Request-ID'] = request_id

        start = getattr(g, 'request_start', None)
        if start is not None:
            elapsed_ms = (time.perf_counter() - start) * 1000
            response.headers['X-Compute-Time-Ms'] = f"{elapsed_ms:.1f}"
            if elapsed_ms > SLOW_REQUEST_THRESHOLD_MS:
                logger.warning(
                    f"SLOW_REQUEST request_id={request_id} "
                    f"path={request.path} elapsed_ms={elapsed_ms:.2f}"
                )
        return response


def get_request_id() -> str:
    """Current request ID, or None outside a request."""
    return getattr(g, 'request_id', None)
