"""
Network reachability monitor.

Keeps a single "currently reachable" flag that a background thread
refreshes by opening a TCP connection to a probe host. Readers get the
last observed value and never wait on a probe; a few seconds of
staleness is acceptable.
"""

import logging
import socket
import threading
from typing import Optional

from opensky_utah.config import config

logger = logging.getLogger(__name__)


class NetworkMonitor:
    """
    Background connectivity monitor.

    Call start() once; check_connection() is then safe from any thread.
    """

    def __init__(
        self,
        probe_host: str = 'opensky-network.org',
        probe_port: int = 443,
        interval: float = 5.0,
        timeout: float = 3.0,
    ):
        self.probe_host = probe_host
        self.probe_port = probe_port
        self.interval = interval
        self.timeout = timeout

        self._connected = False
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_config(cls) -> 'NetworkMonitor':
        """Create monitor from application configuration."""
        return cls(
            probe_host=config.connectivity.probe_host,
            probe_port=config.connectivity.probe_port,
            interval=config.connectivity.interval_seconds,
            timeout=config.connectivity.timeout_seconds,
        )

    @property
    def is_connected(self) -> bool:
        with self._lock:
            return self._connected

    def check_connection(self) -> bool:
        """Most recently observed reachability. Does not probe."""
        return self.is_connected

    def update_connection_status(self, connected: bool) -> None:
        """Record a new reachability observation."""
        with self._lock:
            was_connected = self._connected
            self._connected = connected

        if was_connected != connected:
            if connected:
                logger.info('Network connected')
            else:
                logger.warning('Network disconnected')

    def probe(self) -> bool:
        """Attempt one TCP connection to the probe host."""
        try:
            with socket.create_connection(
                (self.probe_host, self.probe_port),
                timeout=self.timeout,
            ):
                return True
        except OSError as e:
            logger.debug(f'Connectivity probe to {self.probe_host}:{self.probe_port} failed: {e}')
            return False

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.update_connection_status(self.probe())

    def start(self) -> None:
        """
        Probe once, then keep probing in a background thread.

        The first probe runs synchronously so the flag reflects reality
        before the caller's initial load.
        """
        if self._thread and self._thread.is_alive():
            logger.warning('Network monitor already running')
            return

        self._stop.clear()
        self.update_connection_status(self.probe())

        self._thread = threading.Thread(
            target=self._run,
            name='network-monitor',
            daemon=True,
        )
        self._thread.start()
        logger.info(f'Network monitor started (probe {self.probe_host}:{self.probe_port} every {self.interval}s)')

    def stop(self) -> None:
        """Stop background probing. Idempotent."""
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=self.timeout + 1)
            self._thread = None
