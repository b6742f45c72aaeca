"""
Status API endpoints.

Provides endpoints for:
- GET /api/status - Loading/offline flags, data source, last error
- POST /api/status/refresh - Manual refresh (blocks until done)
- DELETE /api/status/error - Dismiss the current error message
"""

import logging
import time

from flask import Blueprint, current_app, jsonify

from opensky_utah.region import states_url

logger = logging.getLogger(__name__)

status_bp = Blueprint('status', __name__, url_prefix='/api/status')


def _status_payload(service) -> dict:
    last_fetch = service.last_fetch_time
    lat, lon = service.region.center
    lat_span, lon_span = service.region.span()
    return {
        'is_loading': service.is_loading,
        'is_offline': service.is_offline,
        'is_auto_refreshing': service.is_auto_refreshing,
        'last_fetch_time': last_fetch.isoformat() if last_fetch else None,
        'error_message': service.error_message,
        'data_source': service.data_source.value,
        'stats': service.stats,
        'config': {
            'endpoint': states_url(service.client.base_url),
            'region': service.region.to_params(),
            'center': {'lat': lat, 'lon': lon},
            'span': {'lat': lat_span, 'lon': lon_span},
        },
    }


@status_bp.route('', methods=['GET'])
def get_status():
    """Get current service status."""
    return jsonify(_status_payload(current_app.config['OPENSKY_SERVICE']))


@status_bp.route('/refresh', methods=['POST'])
def refresh():
    """
    Trigger a manual refresh.

    Returns the status after the fetch completes. An offline device
    gets a 200 with error_message set, same as any other failed refresh.
    """
    start_time = time.perf_counter()
    service = current_app.config['OPENSKY_SERVICE']
    logger.info('Manual refresh requested')

    service.refresh()

    payload = _status_payload(service)
    payload['query_time_ms'] = round((time.perf_counter() - start_time) * 1000, 2)
    return jsonify(payload)


@status_bp.route('/error', methods=['DELETE'])
def clear_error():
    """Dismiss the current error message."""
    service = current_app.config['OPENSKY_SERVICE']
    logger.debug('Error message dismissed')
    service.clear_error()
    return jsonify(_status_payload(service))
