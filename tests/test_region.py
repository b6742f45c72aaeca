"""Tests for region bounds and query parameters."""

import pytest

from opensky_utah.region import UTAH, Region, states_url


def test_utah_query_params():
    assert UTAH.to_params() == {
        'lamin': 37.0,
        'lamax': 42.0,
        'lomin': -114.0,
        'lomax': -109.0,
    }


@pytest.mark.parametrize('base_url', [
    'https://opensky-network.org/api',
    'https://opensky-network.org/api/',
])
def test_states_url(base_url):
    assert states_url(base_url) == 'https://opensky-network.org/api/states/all'


def test_center_and_span():
    assert UTAH.center == (39.5, -111.5)
    lat_span, lon_span = UTAH.span()
    assert lat_span == pytest.approx(5.25)
    assert lon_span == pytest.approx(5.25)


def test_region_is_immutable():
    region = Region(lat_min=0, lat_max=1, lon_min=0, lon_max=1)
    with pytest.raises(AttributeError):
        region.lat_min = 5
