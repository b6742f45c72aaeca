"""
OpenSky Utah Flask Application.

Main entry point for the web application. Initializes:
- Connectivity monitor
- OpenSky service (initial load, auto-refresh)
- API routes

Usage:
    python -m opensky_utah.app

Or with gunicorn:
    gunicorn 'opensky_utah.app:create_app()'
"""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from opensky_utah.api import aircraft_bp, status_bp
from opensky_utah.config import config
from opensky_utah.service import OpenSkyService

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def create_app(
    service: Optional[OpenSkyService] = None,
    start_background: bool = True,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        service: Pre-built service. Created from config if None.
        start_background: Whether to start the connectivity monitor,
                          run the initial load and begin auto-refresh.
                          Set to False for testing.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    app.register_blueprint(aircraft_bp)
    app.register_blueprint(status_bp)

    service = service or OpenSkyService()
    app.config['OPENSKY_SERVICE'] = service

    if start_background:
        service.monitor.start()
        logger.info('Loading initial aircraft data...')
        service.load_initial_data()
        service.start_auto_refresh()
        logger.info(
            f'Tracking region {service.region.to_params()} '
            f'every {service.refresh_interval}s'
        )

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

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

    logger.info(f'Starting OpenSky Utah on http://localhost:{config.port}')

    try:
        app.run(
            host='0.0.0.0',
            port=config.port,
            debug=config.debug,
            use_reloader=False,  # Reloader would start a second refresh thread
        )
    finally:
        service = app.config['OPENSKY_SERVICE']
        service.close()
        service.monitor.stop()


if __name__ == '__main__':
    run_development_server()
