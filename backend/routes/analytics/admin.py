"""
Health and Boundaries Endpoints

Endpoints:
- /health - Dataset status
- /boundaries - Department boundary GeoJSON (404 when not loaded)
"""

from flask import abort, jsonify
from routes.analytics import analytics_bp, get_state


@analytics_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    state = get_state()
    dated = sum(1 for r in state.records if r.transaction_date is not None)
    return jsonify({
        "status": "healthy",
        "records": len(state.records),
        "datedRecords": dated,
        "boundariesAvailable": state.has_boundaries,
    })


@analytics_bp.route("/boundaries", methods=["GET"])
def boundaries():
    """Boundary polygons for the map views, exactly as loaded."""
    state = get_state()
    if not state.has_boundaries:
        abort(404, description="Boundary dataset not available")
    return jsonify(state.boundaries)
