"""
API module for OpenSky Utah.

Provides REST endpoints for:
- Aircraft data (located aircraft, detail toggling)
- Service status and manual refresh
"""

from opensky_utah.api.aircraft import aircraft_bp
from opensky_utah.api.status import status_bp

__all__ = ['aircraft_bp', 'status_bp']
