"""
Configuration management for OpenSky Utah.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_SAMPLE_PATH = PACKAGE_DIR / 'data' / 'sample_states.json'


@dataclass(frozen=True)
class OpenSkyConfig:
    """OpenSky API configuration."""
    base_url: str = os.getenv('OPENSKY_BASE_URL', 'https://opensky-network.org/api')
    timeout_seconds: float = float(os.getenv('OPENSKY_TIMEOUT_SECONDS', '30'))


@dataclass(frozen=True)
class RefreshConfig:
    """Polling settings."""
    interval_seconds: float = float(os.getenv('REFRESH_INTERVAL_SECONDS', '30'))


@dataclass(frozen=True)
class CacheConfig:
    """On-disk snapshot cache."""
    path: str = os.getenv('OPENSKY_CACHE_PATH', 'opensky-cache.json')


@dataclass(frozen=True)
class SampleConfig:
    """Bundled sample data used on an offline first run."""
    path: str = os.getenv('SAMPLE_DATA_PATH', str(DEFAULT_SAMPLE_PATH))


@dataclass(frozen=True)
class ConnectivityConfig:
    """Reachability probe settings."""
    probe_host: str = os.getenv('CONNECTIVITY_PROBE_HOST', 'opensky-network.org')
    probe_port: int = int(os.getenv('CONNECTIVITY_PROBE_PORT', '443'))
    interval_seconds: float = float(os.getenv('CONNECTIVITY_INTERVAL_SECONDS', '5'))
    timeout_seconds: float = float(os.getenv('CONNECTIVITY_TIMEOUT_SECONDS', '3'))


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    opensky: OpenSkyConfig
    refresh: RefreshConfig
    cache: CacheConfig
    sample: SampleConfig
    connectivity: ConnectivityConfig

    # Flask settings
    debug: bool
    port: int


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        opensky=OpenSkyConfig(),
        refresh=RefreshConfig(),
        cache=CacheConfig(),
        sample=SampleConfig(),
        connectivity=ConnectivityConfig(),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
        port=int(os.getenv('PORT', '5000')),
    )


# Singleton instance
config = load_config()
