"""
OpenSky Network API client.

Handles communication with the OpenSky REST API:
- Bounding box queries for the tracked region
- Translating HTTP and network failures into TransportError

Requests are anonymous. The client returns the raw response body
untouched so the caller can both decode it and cache it byte-for-byte.
"""

import logging
from typing import Optional

import requests

from opensky_utah.config import config
from opensky_utah.errors import TransportError
from opensky_utah.region import UTAH, Region, states_url

logger = logging.getLogger(__name__)


class OpenSkyClient:
    """
    Client for OpenSky Network API.

    Handles:
    - GET requests to /states/all endpoint
    - Bounding box filtering
    """

    def __init__(
        self,
        base_url: str = 'https://opensky-network.org/api',
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls) -> 'OpenSkyClient':
        """Create client from application configuration."""
        return cls(
            base_url=config.opensky.base_url,
            timeout=config.opensky.timeout_seconds,
        )

    def fetch_states(self, region: Region = UTAH) -> bytes:
        """
        Fetch the current state vectors inside a region.

        Returns:
            Raw response body (JSON bytes)

        Raises:
            TransportError on network failure or non-2xx status
        """
        url = states_url(self.base_url)
        params = region.to_params()

        logger.debug(f'Fetching states: {url} params={params}')

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error('OpenSky API timeout')
            raise TransportError(f'request timed out: {e}') from e
        except requests.exceptions.RequestException as e:
            logger.error(f'OpenSky request failed: {e}')
            raise TransportError(str(e)) from e

        if not 200 <= response.status_code < 300:
            if response.status_code == 429:
                logger.warning('OpenSky rate limit exceeded')
            else:
                logger.error(f'OpenSky API error: {response.status_code}')
            raise TransportError(
                f'OpenSky returned HTTP {response.status_code}',
                status_code=response.status_code,
            )

        logger.info(f'Received {len(response.content)} bytes from OpenSky')
        return response.content

    def close(self) -> None:
        self.session.close()
