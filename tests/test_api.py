"""Tests for the Flask API."""

import logging

import pytest

from opensky_utah.app import create_app
from opensky_utah.errors import TransportError
from opensky_utah.service import NO_CONNECTION_MESSAGE
from tests.fakes import make_payload, make_state


@pytest.fixture
def app(service):
    service.load_initial_data()
    return create_app(service=service, start_background=False)


@pytest.fixture
def http(app):
    return app.test_client()


class TestAircraftEndpoints:

    def test_list_located_aircraft(self, http):
        resp = http.get('/api/aircraft')

        assert resp.status_code == 200
        body = resp.get_json()
        assert body['count'] == 2
        assert body['data_source'] == 'sample'
        assert {a['icao24'] for a in body['aircraft']} == {'a4b1c2', 'a0f3e1'}

    def test_toggle_details(self, http, service):
        resp = http.post('/api/aircraft/a4b1c2/toggle')

        assert resp.status_code == 200
        assert resp.get_json()['details_visible'] is True
        shown = [s.icao24 for s in service.aircraft_states if s.details_visible]
        assert shown == ['a4b1c2']

    def test_toggle_unknown_returns_404(self, http):
        resp = http.post('/api/aircraft/ffffff/toggle')

        assert resp.status_code == 404
        assert 'ffffff' in resp.get_json()['error']

    def test_toggle_unknown_is_logged(self, http, caplog):
        with caplog.at_level(logging.WARNING, logger='opensky_utah.api.aircraft'):
            http.post('/api/aircraft/ffffff/toggle')

        assert 'unknown aircraft ffffff' in caplog.text

    def test_cors_enabled(self, http):
        resp = http.get('/api/aircraft', headers={'Origin': 'http://example.com'})
        assert resp.headers['Access-Control-Allow-Origin'] == '*'


class TestStatusEndpoints:

    def test_status(self, http):
        body = http.get('/api/status').get_json()

        assert body['is_loading'] is False
        assert body['is_offline'] is True
        assert body['last_fetch_time'] is None
        assert body['error_message'] is None
        assert body['data_source'] == 'sample'
        assert body['config']['region'] == {'lamin': 37.0, 'lamax': 42.0, 'lomin': -114.0, 'lomax': -109.0}
        assert body['config']['center'] == {'lat': 39.5, 'lon': -111.5}
        assert body['config']['span']['lat'] == pytest.approx(5.25)
        assert body['config']['span']['lon'] == pytest.approx(5.25)

    def test_refresh_request_is_logged(self, http, caplog):
        with caplog.at_level(logging.INFO, logger='opensky_utah.api.status'):
            http.post('/api/status/refresh')

        assert 'Manual refresh requested' in caplog.text

    def test_refresh_offline(self, http):
        body = http.post('/api/status/refresh').get_json()

        assert body['error_message'] == NO_CONNECTION_MESSAGE
        assert body['data_source'] == 'sample'

    def test_refresh_online(self, http, client, monitor):
        monitor.connected = True
        client.responses.append(make_payload(make_state('k1')))

        body = http.post('/api/status/refresh').get_json()

        assert body['data_source'] == 'network'
        assert body['last_fetch_time'] is not None
        assert http.get('/api/aircraft').get_json()['count'] == 1

    def test_refresh_failure_reports_error(self, http, client, monitor):
        monitor.connected = True
        client.responses.append(TransportError('OpenSky returned HTTP 503', status_code=503))

        body = http.post('/api/status/refresh').get_json()

        assert body['error_message'] == 'OpenSky returned HTTP 503'
        assert body['is_loading'] is False

    def test_clear_error(self, http):
        http.post('/api/status/refresh')

        body = http.delete('/api/status/error').get_json()

        assert body['error_message'] is None


def test_health(http):
    assert http.get('/health').get_json() == {'status': 'ok'}


def test_unknown_route(http):
    resp = http.get('/api/nope')
    assert resp.status_code == 404
    assert resp.get_json() == {'error': 'Not found'}


def test_create_app_starts_background_work(service, monitor):
    app = create_app(service=service, start_background=True)

    assert app.config['OPENSKY_SERVICE'] is service
    assert monitor.started is True
    assert service.data_source.value == 'sample'
    assert service.is_auto_refreshing
