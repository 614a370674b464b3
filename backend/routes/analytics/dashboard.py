"""
Dashboard Endpoints

Endpoints:
- /dashboard - Every derived view in one response
- /regions   - Department economics table only
- /increment - Price increment analysis only

All three accept the same query params (see api/params.py) and recompute
from the in-memory dataset on every call.
"""

from flask import jsonify, request
from routes.analytics import analytics_bp, get_state
from api.params import parse_dashboard_params


@analytics_bp.route("/dashboard", methods=["GET"])
def dashboard():
    """
    Unified dashboard endpoint - returns all panels in one response.

    Query params:
      Filters:
        - region, transactionType, businessType, occupancyStatus
        - minYear, maxYear (only constrain dated records)
      Options:
        - window: increment window in years (default from config)
        - sort, dir: department table column and asc/desc
        - incSort, incDir: increment table column and asc/desc
        - panels: comma-separated subset of panels

    Returns:
      {
        "data": {"summary": {...}, "maps": {...}, "histograms": {...}, ...},
        "meta": {"elapsed_ms": float, "filters_applied": {...}, ...}
      }

    Example:
      GET /api/dashboard?region=Florida&window=3&panels=summary,increment
    """
    from services.dashboard_service import on_selection_changed

    params = parse_dashboard_params(request.args)
    state = params.apply_to(get_state())
    return jsonify(on_selection_changed(state, panels=params.panels))


@analytics_bp.route("/regions", methods=["GET"])
def regions():
    """Sorted department table for the current filters."""
    from services.dashboard_service import on_selection_changed

    params = parse_dashboard_params(request.args)
    state = params.apply_to(get_state())
    result = on_selection_changed(state, panels=['region_table'])
    return jsonify({'data': result['data']['region_table'], 'meta': result['meta']})


@analytics_bp.route("/increment", methods=["GET"])
def increment():
    """Increment stats, years, trend mapping and KPIs for the current filters."""
    from services.dashboard_service import on_selection_changed

    params = parse_dashboard_params(request.args)
    state = params.apply_to(get_state())
    result = on_selection_changed(state, panels=['increment'])
    return jsonify({'data': result['data']['increment'], 'meta': result['meta']})
