"""
AircraftState model - one tracked aircraft from an OpenSky snapshot.

Field names mirror the OpenSky state vector documentation
(https://openskynetwork.github.io/opensky-api/). Units are the API's own:
meters, meters/second, degrees.

Design notes:
- icao24 is the only identity key; records are replaced wholesale on
  every snapshot, never patched field by field
- details_visible is UI state, not wire data; the service carries it
  forward across snapshots by icao24
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional

FEET_PER_METER = 3.280839895
MPH_PER_METERS_PER_SECOND = FEET_PER_METER * 3600 / 5280


class PositionSource(IntEnum):
    """Origin of the position report."""
    ADSB = 0
    ASTERIX = 1
    MLAT = 2
    FLARM = 3

    @classmethod
    def from_code(cls, code: int) -> 'PositionSource':
        """Map a raw code, defaulting to ADS-B for values the API shouldn't send but does."""
        try:
            return cls(code)
        except ValueError:
            return cls.ADSB


class AircraftStatus(str, Enum):
    """
    Coarse motion status used to pick a map icon.

    Precedence: ASCENDING, DESCENDING, ON_GROUND, then STANDARD.
    """
    STANDARD = 'standard'
    ASCENDING = 'ascending'
    DESCENDING = 'descending'
    ON_GROUND = 'on_ground'


@dataclass
class AircraftState:
    """
    Current state of a tracked aircraft.

    Optional fields are None when the provider had no data this cycle.
    """
    icao24: str
    origin_country: str
    last_contact: int
    on_ground: bool
    spi: bool
    position_source: PositionSource = PositionSource.ADSB

    callsign: Optional[str] = None
    time_position: Optional[int] = None
    longitude: Optional[float] = None
    latitude: Optional[float] = None
    baro_altitude: Optional[float] = None
    geo_altitude: Optional[float] = None
    velocity: Optional[float] = None
    true_track: Optional[float] = None
    vertical_rate: Optional[float] = None
    squawk: Optional[str] = None
    sensors: Optional[List[int]] = None

    # UI state, never decoded or compared
    details_visible: bool = field(default=False, compare=False)

    @property
    def has_position(self) -> bool:
        """Check if this state has valid position data."""
        return self.latitude is not None and self.longitude is not None

    @property
    def flight(self) -> str:
        """Display label: trimmed callsign, or the ICAO address when there is none."""
        sign = (self.callsign or '').strip()
        return sign or f'ICAO {self.icao24}'

    @property
    def altitude_ft(self) -> float:
        altitude = self.baro_altitude
        if altitude is None:
            altitude = self.geo_altitude
        return (altitude or 0.0) * FEET_PER_METER

    @property
    def speed_mph(self) -> float:
        return (self.velocity or 0.0) * MPH_PER_METERS_PER_SECOND

    @property
    def ascent_rate_fps(self) -> float:
        return (self.vertical_rate or 0.0) * FEET_PER_METER

    @property
    def heading(self) -> float:
        """Track rotated for icons that point east at 0 degrees."""
        return (self.true_track or 0.0) - 90

    @property
    def is_ascending(self) -> bool:
        return (self.vertical_rate or 0.0) > 0

    @property
    def is_descending(self) -> bool:
        return (self.vertical_rate or 0.0) < 0

    @property
    def status(self) -> AircraftStatus:
        if self.is_ascending:
            return AircraftStatus.ASCENDING
        if self.is_descending:
            return AircraftStatus.DESCENDING
        if self.on_ground:
            return AircraftStatus.ON_GROUND
        return AircraftStatus.STANDARD

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'icao24': self.icao24,
            'callsign': self.callsign,
            'flight': self.flight,
            'origin_country': self.origin_country,
            'position': {
                'latitude': self.latitude,
                'longitude': self.longitude,
                'source': self.position_source.name,
            },
            'telemetry': {
                'baro_altitude': self.baro_altitude,
                'geo_altitude': self.geo_altitude,
                'altitude_ft': round(self.altitude_ft),
                'velocity': self.velocity,
                'speed_mph': round(self.speed_mph, 1),
                'true_track': self.true_track,
                'heading': self.heading,
                'vertical_rate': self.vertical_rate,
                'ascent_rate_fps': round(self.ascent_rate_fps, 1),
                'squawk': self.squawk,
            },
            'status': {
                'on_ground': self.on_ground,
                'spi': self.spi,
                'status': self.status.value,
            },
            'timestamps': {
                'time_position': self.time_position,
                'last_contact': self.last_contact,
            },
            'details_visible': self.details_visible,
        }
