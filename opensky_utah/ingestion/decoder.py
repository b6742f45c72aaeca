"""
Decoder for OpenSky /states/all payloads.

OpenSky state vector format (array indices):
0: icao24          - ICAO24 hex address
1: callsign        - Callsign (8 chars max)
2: origin_country  - Country of registration
3: time_position   - Unix timestamp of last position update
4: last_contact    - Unix timestamp of last message
5: longitude       - WGS84 longitude
6: latitude        - WGS84 latitude
7: baro_altitude   - Barometric altitude (meters)
8: on_ground       - Boolean
9: velocity        - Ground speed (m/s)
10: true_track     - Track angle (degrees, 0=north)
11: vertical_rate  - Vertical rate (m/s)
12: sensors        - Sensor IDs (array)
13: geo_altitude   - Geometric altitude (meters)
14: squawk         - Transponder code
15: spi            - Special position indicator
16: position_source - 0=ADS-B, 1=ASTERIX, 2=MLAT, 3=FLARM

Anything past index 16 is ignored. A bad required field rejects the
whole snapshot.

Decoding is a pure function of the input bytes and touches no shared
state, so it is safe to call from any thread.
"""

import json
import logging
from typing import Any, List, Optional

from opensky_utah.errors import DecodeError
from opensky_utah.models import AircraftState, PositionSource, Snapshot

logger = logging.getLogger(__name__)

ICAO24 = 0
CALLSIGN = 1
ORIGIN_COUNTRY = 2
TIME_POSITION = 3
LAST_CONTACT = 4
LONGITUDE = 5
LATITUDE = 6
BARO_ALTITUDE = 7
ON_GROUND = 8
VELOCITY = 9
TRUE_TRACK = 10
VERTICAL_RATE = 11
SENSORS = 12
GEO_ALTITUDE = 13
SQUAWK = 14
SPI = 15
POSITION_SOURCE = 16


def _is_int(value: Any) -> bool:
    # bool is an int subclass; JSON true/false must not pass as numbers
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return _is_int(value) or isinstance(value, float)


def _element(arr: List[Any], index: int) -> Any:
    return arr[index] if index < len(arr) else None


def _required(arr: List[Any], index: int, name: str) -> Any:
    value = _element(arr, index)
    if value is None:
        raise DecodeError(f'state vector missing required field {name!r}')
    return value


def _optional_float(arr: List[Any], index: int) -> Optional[float]:
    value = _element(arr, index)
    return float(value) if _is_number(value) else None


def _optional_int(arr: List[Any], index: int) -> Optional[int]:
    value = _element(arr, index)
    if _is_int(value):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _optional_str(arr: List[Any], index: int) -> Optional[str]:
    value = _element(arr, index)
    return value if isinstance(value, str) else None


def _optional_sensors(arr: List[Any]) -> Optional[List[int]]:
    value = _element(arr, SENSORS)
    if not isinstance(value, list):
        return None
    return [s for s in value if _is_int(s)]


def decode_state(arr: Any) -> AircraftState:
    """
    Parse one OpenSky state vector array into an AircraftState.

    Raises DecodeError if the array is malformed or a required field
    is missing or mistyped.
    """
    if not isinstance(arr, list):
        raise DecodeError(f'state vector must be an array, got {type(arr).__name__}')

    icao24 = _required(arr, ICAO24, 'icao24')
    if not isinstance(icao24, str) or not icao24:
        raise DecodeError('icao24 must be a non-empty string')

    origin_country = _required(arr, ORIGIN_COUNTRY, 'origin_country')
    if not isinstance(origin_country, str):
        raise DecodeError(f'{icao24}: origin_country must be a string')

    last_contact = _required(arr, LAST_CONTACT, 'last_contact')
    if isinstance(last_contact, float) and last_contact.is_integer():
        last_contact = int(last_contact)
    if not _is_int(last_contact):
        raise DecodeError(f'{icao24}: last_contact must be an integer')

    on_ground = _required(arr, ON_GROUND, 'on_ground')
    if not isinstance(on_ground, bool):
        raise DecodeError(f'{icao24}: on_ground must be a boolean')

    spi = _required(arr, SPI, 'spi')
    if not isinstance(spi, bool):
        raise DecodeError(f'{icao24}: spi must be a boolean')

    position_source = _required(arr, POSITION_SOURCE, 'position_source')
    if not _is_int(position_source):
        raise DecodeError(f'{icao24}: position_source must be an integer')

    return AircraftState(
        icao24=icao24,
        callsign=_optional_str(arr, CALLSIGN),
        origin_country=origin_country,
        time_position=_optional_int(arr, TIME_POSITION),
        last_contact=last_contact,
        longitude=_optional_float(arr, LONGITUDE),
        latitude=_optional_float(arr, LATITUDE),
        baro_altitude=_optional_float(arr, BARO_ALTITUDE),
        on_ground=on_ground,
        velocity=_optional_float(arr, VELOCITY),
        true_track=_optional_float(arr, TRUE_TRACK),
        vertical_rate=_optional_float(arr, VERTICAL_RATE),
        sensors=_optional_sensors(arr),
        geo_altitude=_optional_float(arr, GEO_ALTITUDE),
        squawk=_optional_str(arr, SQUAWK),
        spi=spi,
        position_source=PositionSource.from_code(position_source),
    )


def decode_snapshot(data: bytes) -> Snapshot:
    """
    Decode a raw /states/all response body.

    A missing or null "states" key yields an empty snapshot; OpenSky
    sends null when nothing is inside the bounding box.

    Raises DecodeError on invalid JSON or schema violations.
    """
    try:
        payload = json.loads(data)
    except (ValueError, TypeError) as e:
        raise DecodeError(f'invalid JSON: {e}') from e

    if not isinstance(payload, dict):
        raise DecodeError(f'expected a JSON object, got {type(payload).__name__}')

    api_time = payload.get('time')
    if api_time is not None and not _is_int(api_time):
        raise DecodeError('"time" must be an integer')

    states_raw = payload.get('states')
    if states_raw is None:
        states_raw = []
    if not isinstance(states_raw, list):
        raise DecodeError('"states" must be an array')

    states = [decode_state(arr) for arr in states_raw]

    logger.debug(f'Decoded {len(states)} state vectors')
    return Snapshot(time=api_time, states=states)
