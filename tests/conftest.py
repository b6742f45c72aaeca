import pytest

from opensky_utah.cache import DiskCache
from opensky_utah.service import OpenSkyService
from tests.fakes import FakeClient, FakeMonitor, make_payload, make_state


@pytest.fixture
def sample_path(tmp_path):
    """Bundled-sample stand-in holding two located aircraft."""
    path = tmp_path / 'sample.json'
    path.write_bytes(make_payload(
        make_state('a4b1c2', callsign='SKW3841 '),
        make_state('a0f3e1', latitude=41.2131, longitude=-112.1544, callsign='DAL1492 '),
    ))
    return path


@pytest.fixture
def cache(tmp_path):
    return DiskCache(tmp_path / 'cache' / 'opensky-cache.json')


@pytest.fixture
def monitor():
    return FakeMonitor(connected=False)


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def service(client, cache, monitor, sample_path):
    svc = OpenSkyService(
        client=client,
        cache=cache,
        monitor=monitor,
        sample_path=sample_path,
        refresh_interval=30,
    )
    yield svc
    svc.close()
