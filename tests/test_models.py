"""Tests for AircraftState derived values."""

import pytest

from opensky_utah.models import AircraftState, AircraftStatus, PositionSource


def make_aircraft(**overrides) -> AircraftState:
    fields = dict(
        icao24='a4b1c2',
        origin_country='United States',
        last_contact=1763510399,
        on_ground=False,
        spi=False,
    )
    fields.update(overrides)
    return AircraftState(**fields)


class TestFlightLabel:

    def test_callsign_is_trimmed(self):
        assert make_aircraft(callsign='SKW3841 ').flight == 'SKW3841'

    @pytest.mark.parametrize('callsign', [None, '', '   '])
    def test_falls_back_to_icao(self, callsign):
        assert make_aircraft(callsign=callsign).flight == 'ICAO a4b1c2'


class TestStatus:

    def test_ascending_wins_over_on_ground(self):
        assert make_aircraft(vertical_rate=1.2, on_ground=True).status is AircraftStatus.ASCENDING

    def test_descending(self):
        assert make_aircraft(vertical_rate=-0.5).status is AircraftStatus.DESCENDING

    def test_on_ground(self):
        assert make_aircraft(vertical_rate=0.0, on_ground=True).status is AircraftStatus.ON_GROUND

    def test_standard_without_vertical_rate(self):
        assert make_aircraft().status is AircraftStatus.STANDARD


class TestUnits:

    def test_altitude_prefers_barometric(self):
        aircraft = make_aircraft(baro_altitude=1000.0, geo_altitude=2000.0)
        assert aircraft.altitude_ft == pytest.approx(3280.839895)

    def test_altitude_falls_back_to_geometric(self):
        aircraft = make_aircraft(geo_altitude=100.0)
        assert aircraft.altitude_ft == pytest.approx(328.0839895)

    def test_zero_barometric_altitude_is_kept(self):
        aircraft = make_aircraft(baro_altitude=0.0, geo_altitude=100.0)
        assert aircraft.altitude_ft == 0.0

    def test_speed_mph(self):
        assert make_aircraft(velocity=100.0).speed_mph == pytest.approx(223.6936, rel=1e-5)

    def test_heading_offset(self):
        assert make_aircraft(true_track=90.0).heading == 0.0
        assert make_aircraft().heading == -90.0


class TestSerialization:

    def test_to_dict_shape(self):
        aircraft = make_aircraft(
            callsign='DAL1492 ',
            latitude=41.2131,
            longitude=-112.1544,
            position_source=PositionSource.MLAT,
        )
        aircraft.details_visible = True

        result = aircraft.to_dict()

        assert result['icao24'] == 'a4b1c2'
        assert result['flight'] == 'DAL1492'
        assert result['position'] == {'latitude': 41.2131, 'longitude': -112.1544, 'source': 'MLAT'}
        assert result['status']['status'] == 'standard'
        assert result['details_visible'] is True

    def test_details_flag_ignored_in_equality(self):
        shown = make_aircraft()
        shown.details_visible = True
        assert shown == make_aircraft()
