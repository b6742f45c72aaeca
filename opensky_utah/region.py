"""
Geographic region the client tracks.

OpenSky's /states/all endpoint takes a bounding box as four query
parameters: lamin, lamax, lomin, lomax (decimal degrees).
"""

from dataclasses import dataclass
from typing import Dict, Tuple

STATES_PATH = '/states/all'


@dataclass(frozen=True)
class Region:
    """
    Fixed latitude/longitude bounding box.

    Values are decimal degrees, WGS84.
    """
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    def to_params(self) -> Dict[str, float]:
        """Convert to OpenSky API query parameters."""
        return {
            'lamin': self.lat_min,
            'lamax': self.lat_max,
            'lomin': self.lon_min,
            'lomax': self.lon_max,
        }

    @property
    def center(self) -> Tuple[float, float]:
        """Midpoint as (lat, lon)."""
        return (
            self.lat_min + (self.lat_max - self.lat_min) / 2,
            self.lon_min + (self.lon_max - self.lon_min) / 2,
        )

    def span(self, margin: float = 1.05) -> Tuple[float, float]:
        """
        Latitude/longitude deltas for framing the region on a map.

        The margin pads the box slightly so edge aircraft stay visible.
        """
        return (
            abs(self.lat_max - self.lat_min) * margin,
            abs(self.lon_max - self.lon_min) * margin,
        )


def states_url(base_url: str) -> str:
    """Full URL of the state vectors endpoint."""
    return f'{base_url.rstrip("/")}{STATES_PATH}'


UTAH = Region(lat_min=37.0, lat_max=42.0, lon_min=-114.0, lon_max=-109.0)
