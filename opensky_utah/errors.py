"""
Error types raised by the OpenSky Utah core.

None of these are fatal: the service catches them at its boundary and
keeps showing the last good collection.
"""

from typing import Optional


class OpenSkyError(Exception):
    """Base class for OpenSky Utah errors."""


class DecodeError(OpenSkyError):
    """Payload is malformed or violates the state vector schema."""


class TransportError(OpenSkyError):
    """Network failure or non-2xx response from the OpenSky API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CacheReadError(OpenSkyError):
    """Cache file exists but cannot be read or parsed."""


class CacheWriteError(OpenSkyError):
    """Cache file could not be written."""
