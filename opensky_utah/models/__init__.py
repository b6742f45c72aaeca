"""
Data models for OpenSky Utah.

Plain dataclasses: the only persistence is the raw snapshot cache, so
records live in memory and are rebuilt from each decoded payload.
"""

from opensky_utah.models.aircraft_state import (
    AircraftState,
    AircraftStatus,
    PositionSource,
)
from opensky_utah.models.snapshot import DataSource, Snapshot

__all__ = [
    'AircraftState',
    'AircraftStatus',
    'PositionSource',
    'DataSource',
    'Snapshot',
]
