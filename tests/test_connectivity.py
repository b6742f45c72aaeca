"""Tests for the network reachability monitor."""

from unittest.mock import MagicMock, patch

from opensky_utah.connectivity import NetworkMonitor


def make_monitor() -> NetworkMonitor:
    return NetworkMonitor(probe_host='opensky.test', probe_port=443, interval=60, timeout=0.5)


def test_starts_disconnected():
    assert make_monitor().check_connection() is False


def test_update_connection_status():
    monitor = make_monitor()

    monitor.update_connection_status(True)
    assert monitor.check_connection() is True

    monitor.update_connection_status(False)
    assert monitor.check_connection() is False


@patch('opensky_utah.connectivity.socket.create_connection')
def test_probe_success(mock_connect: MagicMock):
    monitor = make_monitor()

    assert monitor.probe() is True
    mock_connect.assert_called_once_with(('opensky.test', 443), timeout=0.5)


@patch('opensky_utah.connectivity.socket.create_connection', side_effect=OSError('unreachable'))
def test_probe_failure(mock_connect: MagicMock):
    assert make_monitor().probe() is False


def test_check_connection_does_not_probe():
    monitor = make_monitor()
    with patch.object(monitor, 'probe') as mock_probe:
        monitor.check_connection()
    mock_probe.assert_not_called()


def test_start_probes_immediately_and_stop_is_idempotent():
    monitor = make_monitor()

    with patch.object(monitor, 'probe', return_value=True) as mock_probe:
        monitor.start()
        assert monitor.check_connection() is True
        assert mock_probe.call_count == 1

        monitor.stop()
        monitor.stop()

    assert monitor._thread is None
