"""
Error envelope middleware - every failed request answers with one JSON shape.

    {"error": {"code": "VALIDATION_ERROR", "message": "...", "requestId": "...",
               "field": "minYear", "receivedValue": "abc"}}

`field` and `receivedValue` only appear for parameter errors. Data-shaped
problems never reach this layer: the aggregation core degrades to empty
results instead of raising.
"""

import logging
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from utils.normalize import ValidationError, validation_error_response
from .request_context import get_request_id

logger = logging.getLogger('api.middleware.error')


def _envelope(code: str, message: str, status: int):
    body = {
        "error": {
            "code": code,
            "message": message,
            "requestId": get_request_id(),
        }
    }
    return jsonify(body), status


def setup_error_handlers(app: Flask) -> None:
    """
    Register the envelope handlers.

    - ValidationError -> 400 VALIDATION_ERROR (bad query params)
    - HTTPException -> its own status ("Not Found" -> NOT_FOUND)
    - anything else -> 500 INTERNAL_ERROR, logged with traceback
    """

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        request_id = get_request_id()
        logger.info(f"Rejected params request_id={request_id} field={error.field}: {error}")
        body, status = validation_error_response(error, request_id=request_id)
        return jsonify(body), status

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        code = error.name.upper().replace(' ', '_')
        return _envelope(code, error.description, error.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.exception(
            f"Unhandled error on {get_request_id()}: {error}",
            extra={"event": "unhandled_error", "error_type": type(error).__name__},
        )
        return _envelope("INTERNAL_ERROR", "An unexpected error occurred", 500)
