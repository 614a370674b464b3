"""
Query-string normalization for the dashboard endpoints.

Empty strings mean "not set". Anything else that cannot be read as the
expected type raises ValidationError, which the error envelope turns into a
400 response. The pydantic types in api/params.py wrap these helpers.

Usage:
    from utils.normalize import to_int, ValidationError

    window = to_int(request.args.get("window"), default=5, field="window")
"""

from typing import Iterable, Optional


class ValidationError(ValueError):
    """Raised when input cannot be normalized to expected type."""

    def __init__(self, message: str, field: str = None, received_value=None):
        super().__init__(message)
        self.field = field
        self.received_value = received_value


def _is_unset(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def to_int(value, *, default: Optional[int] = None, field: str = None) -> Optional[int]:
    """'2021' -> 2021; bools and non-integers are rejected."""
    if _is_unset(value):
        return default
    if isinstance(value, bool):
        raise ValidationError(f"Expected int, got bool: {value!r}", field, value)
    try:
        return int(str(value).strip()) if isinstance(value, str) else int(value)
    except (ValueError, TypeError):
        raise ValidationError(f"Expected int, got: {value!r}", field, value)


def to_str(value, *, default: Optional[str] = None) -> Optional[str]:
    """Trimmed string; whitespace-only counts as unset."""
    if _is_unset(value):
        return default
    return str(value).strip()


def to_choice(
    value,
    choices: Iterable[str],
    *,
    default: Optional[str] = None,
    field: str = None,
) -> Optional[str]:
    """Exact match against the allowed column names."""
    value = to_str(value)
    if value is None:
        return default
    choices = list(choices)
    if value not in choices:
        raise ValidationError(f"Expected one of {choices}, got: {value!r}", field, value)
    return value


def to_direction(value, *, default: Optional[bool] = None, field: str = None) -> Optional[bool]:
    """'asc' -> True, 'desc' -> False (case-insensitive)."""
    value = to_str(value)
    if value is None:
        return default
    directions = {'asc': True, 'desc': False}
    try:
        return directions[value.lower()]
    except KeyError:
        raise ValidationError(f"Expected 'asc' or 'desc', got: {value!r}", field, value)


def validation_error_response(error: ValidationError, request_id: str = None) -> tuple:
    """(body, 400) for a ValidationError, in the standard error envelope."""
    body = {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": str(error),
            "field": error.field,
            "requestId": request_id,
        }
    }
    if error.received_value is not None:
        body["error"]["receivedValue"] = str(error.received_value)
    return body, 400
