"""
Flask Application Factory - In-Memory Land Transaction Dashboard

The records file and the department boundaries are loaded ONCE at startup
into an immutable AppState. Every request recomputes its views from that
state; nothing is cached and nothing is written back.

Startup policy:
- Records file missing/unreadable -> DataLoadError, the app does not start
- Boundaries missing -> maps served as placeholders, everything else works
"""

import logging

from flask import Flask, jsonify
from flask_cors import CORS

from config import Config
from routes.analytics import STATE_KEY


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )


def create_app(config_overrides: dict = None, state=None):
    """
    Build the Flask app.

    Args:
        config_overrides: Values applied on top of Config (tests point the
            paths at fixture files)
        state: Pre-built AppState; skips file loading when given
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    _configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize CORS - allow all origins (read-only public dashboard)
    CORS(app,
         resources={r"/api/*": {"origins": "*"}},
         methods=["GET", "OPTIONS"],
         allow_headers=["Content-Type", "X-Request-ID"],
         expose_headers=["X-Request-ID", "X-Compute-Time-Ms"],
         supports_credentials=False,
         send_wildcard=True)

    # === API MIDDLEWARE ===
    from api.middleware import setup_request_context_middleware, setup_error_handlers
    setup_request_context_middleware(app)
    setup_error_handlers(app)

    # === DATA LOAD (both datasets before any aggregation) ===
    if state is None:
        from services.data_loader import load_state_from_config
        # DataLoadError propagates: no dashboard without records
        state = load_state_from_config(app.config)

    app.extensions[STATE_KEY] = state
    print(f"   ✓ Records loaded: {len(state.records):,}")
    if state.has_boundaries:
        print(f"   ✓ Boundaries loaded: {len(state.boundaries.get('features', []))} features")
    else:
        print("   ⚠️  Boundaries not available - map views will show a placeholder")

    # Register routes
    from routes.analytics import analytics_bp
    app.register_blueprint(analytics_bp, url_prefix='/api')

    @app.route("/", methods=["GET"])
    def index():
        current = app.extensions[STATE_KEY]
        return jsonify({
            "name": "Land Transaction Dashboard API",
            "status": "running",
            "data_loaded": len(current.records) > 0,
            "row_count": len(current.records),
            "boundaries_loaded": current.has_boundaries,
        })

    return app


def run_app():
    """Main entry point for local development - starts server with Flask's dev server."""
    print("=" * 60)
    print("Starting Flask API - In-Memory Land Transaction Dashboard")
    print("=" * 60)

    app = create_app()

    print("=" * 60)
    app.run(debug=app.config.get('DEBUG', False), host="0.0.0.0", port=5000)


if __name__ == "__main__":
    run_app()
