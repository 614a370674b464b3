"""
Filter Options Endpoint

Returns available filter values based on the loaded dataset.

Endpoints:
- /filters - Available values for every selector
"""

from flask import jsonify
from routes.analytics import analytics_bp, get_state


@analytics_bp.route("/filters", methods=["GET"])
def filter_options():
    """
    Distinct values for each selector, from the full (unfiltered) dataset.

    Returns:
      {
        "regions": [...], "transactionTypes": [...], "businessTypes": [...],
        "occupancyStatuses": [...], "years": [...]
      }
    """
    from services.filter_engine import filter_options as compute_filter_options

    return jsonify(compute_filter_options(get_state().records))
