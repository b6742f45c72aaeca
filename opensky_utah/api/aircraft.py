"""
Aircraft API endpoints.

Provides endpoints for:
- GET /api/aircraft - List aircraft with a known position
- POST /api/aircraft/<icao24>/toggle - Toggle detail visibility
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

logger = logging.getLogger(__name__)

aircraft_bp = Blueprint('aircraft', __name__, url_prefix='/api/aircraft')


def get_service():
    return current_app.config['OPENSKY_SERVICE']


@aircraft_bp.route('', methods=['GET'])
def list_aircraft():
    """
    List all located aircraft.

    Response includes query timing for latency awareness.
    """
    start_time = time.perf_counter()
    service = get_service()

    aircraft = [state.to_dict() for state in service.located_aircraft_states]

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'aircraft': aircraft,
        'count': len(aircraft),
        'data_source': service.data_source.value,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })


@aircraft_bp.route('/<icao24>/toggle', methods=['POST'])
def toggle_details(icao24: str):
    """Flip the details panel for one aircraft."""
    service = get_service()

    if not service.toggle_detail_visibility(icao24):
        logger.warning(f'Toggle requested for unknown aircraft {icao24}')
        return jsonify({'error': f'Aircraft {icao24} not found'}), 404

    state = next(
        (s for s in service.aircraft_states if s.icao24 == icao24),
        None,
    )
    if state is None:
        # Replaced by a refresh between the toggle and the lookup
        logger.info(f'Aircraft {icao24} dropped by a refresh during toggle')
        return jsonify({'error': f'Aircraft {icao24} not found'}), 404

    return jsonify(state.to_dict())
