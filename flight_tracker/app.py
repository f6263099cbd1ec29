"""
Flight tracker Flask application.

Main entry point for the web application. Initializes:
- The tracker store (one per app)
- The OpenSky client
- Page and API routes

Usage:
    python -m flight_tracker.app

Or with gunicorn (single worker, the store lives in process memory):
    gunicorn -w 1 'flight_tracker.app:create_app()'
"""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from flight_tracker.config import config
from flight_tracker.api import tracker_bp
from flight_tracker.ingestion import OpenSkyClient
from flight_tracker.store import TrackerStore

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def create_app(client: Optional[OpenSkyClient] = None) -> Flask:
    """
    Application factory for Flask.

    Args:
        client: OpenSky client to use. Created from config if None;
                tests pass one backed by a fake session.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    app.config['TRACKER_STORE'] = TrackerStore(client=client)

    app.register_blueprint(tracker_bp)

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    logger.info(f'Starting flight tracker on http://{config.host}:{config.port}')

    app.run(
        host=config.host,
        port=config.port,
        debug=config.debug,
        use_reloader=False,  # Reloader would build a second store
    )


if __name__ == '__main__':
    run_development_server()
