"""
API package - request boundary for the dashboard.

This package provides:
- Pydantic param models (params.py)
- Global middleware (request context, error envelope)
"""

from .params import DashboardParams, parse_dashboard_params

__all__ = ['DashboardParams', 'parse_dashboard_params']
