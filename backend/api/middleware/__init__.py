"""
Global middleware for API requests.

Provides:
- Request ID injection (X-Request-ID) and compute timing (X-Compute-Time-Ms)
- Error envelope standardization
"""

from .request_context import setup_request_context_middleware
from .error_envelope import setup_error_handlers

__all__ = [
    'setup_request_context_middleware',
    'setup_error_handlers',
]
