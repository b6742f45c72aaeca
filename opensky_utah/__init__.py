"""
OpenSky Utah Package.

Live aircraft positions over Utah from the OpenSky Network, with a disk
cache and bundled sample data for offline use.

Modules:
    models/          Dataclasses for aircraft state vectors and snapshots
    ingestion/       OpenSky REST client and state vector decoder
    api/             Flask endpoints for presentation clients
    service.py       Live collection, refresh lifecycle and reconciliation
    cache.py         Single-entry on-disk snapshot cache
    connectivity.py  Background network reachability monitor
    region.py        Bounding box and query parameters
    config.py        Centralized configuration from environment variables
"""

__version__ = '1.0.0'
