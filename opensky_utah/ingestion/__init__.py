"""
Data ingestion module for OpenSky Utah.

Handles fetching raw state vectors from the OpenSky API and decoding
them into typed snapshots.
"""

from opensky_utah.ingestion.decoder import decode_snapshot, decode_state
from opensky_utah.ingestion.opensky_client import OpenSkyClient

__all__ = ['OpenSkyClient', 'decode_snapshot', 'decode_state']
