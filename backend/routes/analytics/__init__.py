"""
Analytics API Routes - Split into domain-specific modules

- dashboard.py: Unified dashboard endpoint plus the department and
  increment views on their own
- filters.py: Filter options endpoint
- admin.py: Health and boundaries endpoints

All modules share the same blueprint (analytics_bp) registered at /api.
The loaded AppState lives in current_app.extensions['land_state'].
"""

from flask import Blueprint, current_app

from models.app_state import AppState

STATE_KEY = 'land_state'

analytics_bp = Blueprint('analytics', __name__)


def get_state() -> AppState:
    """The AppState loaded at startup (read-only)."""
    return current_app.extensions[STATE_KEY]


# Import all route modules to register their routes with the blueprint
from routes.analytics import dashboard  # noqa: E402,F401
from routes.analytics import filters  # noqa: E402,F401
from routes.analytics import admin  # noqa: E402,F401
