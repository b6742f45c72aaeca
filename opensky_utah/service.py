"""
OpenSky service - owns the live aircraft collection.

Coordinates the three ways data reaches the display:
1. Cold start: disk cache if present, otherwise bundled sample data
2. Manual refresh: one network fetch, returns when it completes
3. Auto-refresh: background thread fetching every refresh_interval seconds

Every successful decode replaces the collection wholesale. The only
state carried over is each aircraft's details_visible flag, matched by
icao24. Empty snapshots are ignored so a transient empty response never
blanks the map.

Threading model:
All reads and writes of the collection and status flags go through one
RLock. Network I/O and decoding happen outside it. Each network fetch
gets a token; starting a new fetch cancels the previous token, and only
the newest token may install results or report errors.
"""

import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from opensky_utah.cache import DiskCache
from opensky_utah.config import config
from opensky_utah.connectivity import NetworkMonitor
from opensky_utah.errors import CacheWriteError, DecodeError, TransportError
from opensky_utah.ingestion import OpenSkyClient, decode_snapshot
from opensky_utah.models import AircraftState, DataSource, Snapshot
from opensky_utah.region import UTAH, Region

logger = logging.getLogger(__name__)

NO_CONNECTION_MESSAGE = 'No network connection available'


class _FetchToken:
    """Cancellation handle for one network fetch."""

    def __init__(self, generation: int):
        self.generation = generation
        self.cancelled = threading.Event()

    def cancel(self) -> None:
        self.cancelled.set()

    @property
    def is_cancelled(self) -> bool:
        return self.cancelled.is_set()


class OpenSkyService:
    """
    Manages the aircraft collection and its refresh lifecycle.

    Presentation code reads the public properties and issues three
    commands: load_initial_data(), refresh() and
    toggle_detail_visibility().
    """

    def __init__(
        self,
        client: Optional[OpenSkyClient] = None,
        cache: Optional[DiskCache] = None,
        monitor: Optional[NetworkMonitor] = None,
        region: Region = UTAH,
        sample_path: Union[str, Path, None] = None,
        refresh_interval: Optional[float] = None,
    ):
        """
        Initialize the service.

        Args:
            client: OpenSky API client (created from config if None)
            cache: Snapshot cache (created from config if None)
            monitor: Connectivity monitor (created from config if None)
            region: Bounding box to query
            sample_path: Bundled sample JSON used when there is no cache
            refresh_interval: Seconds between auto-refresh fetches
        """
        self.client = client or OpenSkyClient.from_config()
        self.cache = cache or DiskCache.from_config()
        self.monitor = monitor or NetworkMonitor.from_config()
        self.region = region
        self.sample_path = Path(config.sample.path if sample_path is None else sample_path)
        self.refresh_interval = (
            config.refresh.interval_seconds if refresh_interval is None else refresh_interval
        )

        self._lock = threading.RLock()

        # Display state
        self._aircraft_states: List[AircraftState] = []
        self._is_loading = False
        self._is_offline = False
        self._last_fetch_time: Optional[datetime] = None
        self._error_message: Optional[str] = None
        self._data_source = DataSource.NONE

        # Fetch supersession
        self._generation = 0
        self._current_fetch: Optional[_FetchToken] = None

        # Cache writes happen outside _lock
        self._save_lock = threading.Lock()
        self._saved_generation = 0

        # Auto-refresh cycle
        self._auto_stop: Optional[threading.Event] = None
        self._auto_thread: Optional[threading.Thread] = None

        # Statistics
        self._fetch_count = 0
        self._error_count = 0

        self._on_update_callbacks: List[Callable[[int], None]] = []

    # -------------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------------

    @property
    def aircraft_states(self) -> List[AircraftState]:
        with self._lock:
            return list(self._aircraft_states)

    @property
    def located_aircraft_states(self) -> List[AircraftState]:
        """Aircraft with both latitude and longitude; the only list meant for rendering."""
        with self._lock:
            return [s for s in self._aircraft_states if s.has_position]

    @property
    def is_loading(self) -> bool:
        with self._lock:
            return self._is_loading

    @property
    def is_offline(self) -> bool:
        with self._lock:
            return self._is_offline

    @property
    def last_fetch_time(self) -> Optional[datetime]:
        with self._lock:
            return self._last_fetch_time

    @property
    def error_message(self) -> Optional[str]:
        with self._lock:
            return self._error_message

    @property
    def data_source(self) -> DataSource:
        with self._lock:
            return self._data_source

    @property
    def is_auto_refreshing(self) -> bool:
        with self._lock:
            return self._auto_stop is not None

    @property
    def stats(self) -> dict:
        """Get service statistics."""
        with self._lock:
            return {
                'aircraft_count': len(self._aircraft_states),
                'located_count': sum(1 for s in self._aircraft_states if s.has_position),
                'fetch_count': self._fetch_count,
                'error_count': self._error_count,
                'auto_refresh': self._auto_stop is not None,
                'refresh_interval': self.refresh_interval,
            }

    def add_update_callback(self, callback: Callable[[int], None]) -> None:
        """
        Register callback to be invoked after each collection replacement.

        Callback receives the count of aircraft installed.
        """
        self._on_update_callbacks.append(callback)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def load_initial_data(self) -> None:
        """
        Populate the display on launch.

        Cache first, bundled sample as fallback, then one network fetch
        if the device is online.
        """
        if not self._load_from_cache():
            self._load_sample_data()

        connected = self.monitor.check_connection()
        with self._lock:
            self._is_offline = not connected

        if connected:
            self._refresh_from_network()
        else:
            logger.info(f'Offline at startup, showing {self.data_source.value} data')

    def refresh(self) -> None:
        """
        Manual (pull-to-refresh) update.

        Blocks until the fetch finishes so callers can show a spinner.
        """
        connected = self.monitor.check_connection()
        with self._lock:
            self._is_offline = not connected
            if not connected:
                self._error_message = NO_CONNECTION_MESSAGE

        if not connected:
            logger.warning('Manual refresh requested while offline')
            return

        self._refresh_from_network()

    def toggle_detail_visibility(self, icao24: str) -> bool:
        """
        Flip details_visible for one aircraft.

        Returns False if no aircraft with that icao24 is displayed.
        """
        with self._lock:
            for state in self._aircraft_states:
                if state.icao24 == icao24:
                    state.details_visible = not state.details_visible
                    return True
        return False

    def clear_error(self) -> None:
        with self._lock:
            self._error_message = None

    def start_auto_refresh(self) -> None:
        """Start periodic refresh, replacing any cycle already running."""
        stop = threading.Event()
        thread = threading.Thread(
            target=self._auto_refresh_loop,
            args=(stop,),
            name='opensky-auto-refresh',
            daemon=True,
        )

        with self._lock:
            if self._auto_stop is not None:
                self._auto_stop.set()
            self._auto_stop = stop
            self._auto_thread = thread

        thread.start()
        logger.info(f'Auto-refresh started (interval={self.refresh_interval}s)')

    def stop_auto_refresh(self) -> None:
        """Stop periodic refresh. Idempotent."""
        with self._lock:
            stop = self._auto_stop
            self._auto_stop = None
            self._auto_thread = None

        if stop is not None:
            stop.set()
            logger.info('Auto-refresh stopped')

    def close(self) -> None:
        """Stop auto-refresh and cancel any in-flight fetch."""
        self.stop_auto_refresh()
        with self._lock:
            if self._current_fetch is not None:
                self._current_fetch.cancel()

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def _load_from_cache(self) -> bool:
        entry = self.cache.load()
        if entry is None:
            return False

        data, timestamp = entry
        try:
            snapshot = decode_snapshot(data)
        except DecodeError as e:
            logger.warning(f'Cached payload is not decodable, ignoring it: {e}')
            return False

        with self._lock:
            count = self._install(snapshot)
            if not count:
                logger.info('Cached snapshot is empty')
                return False
            self._data_source = DataSource.CACHE
            self._last_fetch_time = timestamp

        logger.info(f'Loaded {count} aircraft from cache ({timestamp.isoformat()})')
        self._notify(count)
        return True

    def _load_sample_data(self) -> bool:
        try:
            data = self.sample_path.read_bytes()
        except OSError as e:
            logger.warning(f'Sample data unavailable at {self.sample_path}: {e}')
            return False

        try:
            snapshot = decode_snapshot(data)
        except DecodeError as e:
            logger.error(f'Sample data is not decodable: {e}')
            return False

        with self._lock:
            count = self._install(snapshot)
            if not count:
                return False
            self._data_source = DataSource.SAMPLE
            self._last_fetch_time = None

        logger.info(f'Loaded {count} aircraft from sample data')
        self._notify(count)
        return True

    def _refresh_from_network(self) -> None:
        """
        Run one network fetch, superseding any fetch already in flight.

        Only the newest fetch may install data, write the error message,
        or clear is_loading.
        """
        with self._lock:
            if self._current_fetch is not None:
                logger.debug(f'Superseding fetch #{self._current_fetch.generation}')
                self._current_fetch.cancel()
            self._generation += 1
            token = _FetchToken(self._generation)
            self._current_fetch = token
            self._is_loading = True

        try:
            self._fetch(token)
        finally:
            with self._lock:
                if self._current_fetch is token:
                    self._current_fetch = None
                    self._is_loading = False

    def _is_current(self, token: _FetchToken) -> bool:
        with self._lock:
            return token is self._current_fetch and not token.is_cancelled

    def _fetch(self, token: _FetchToken) -> None:
        if token.is_cancelled:
            return

        try:
            data = self.client.fetch_states(self.region)
        except TransportError as e:
            if e.status_code is not None:
                self._fail(token, f'OpenSky returned HTTP {e.status_code}')
            else:
                self._fail(token, f'Network request failed: {e}')
            return

        if token.is_cancelled:
            logger.debug(f'Fetch #{token.generation} cancelled after response')
            return

        try:
            snapshot = decode_snapshot(data)
        except DecodeError as e:
            self._fail(token, f'Could not read aircraft data: {e}')
            return

        now = datetime.now(timezone.utc)
        with self._lock:
            if not self._is_current(token):
                logger.debug(f'Fetch #{token.generation} superseded, discarding result')
                return

            count = self._install(snapshot)
            if not count:
                logger.info('OpenSky returned no aircraft, keeping current data')
                return

            self._data_source = DataSource.NETWORK
            self._last_fetch_time = now
            self._error_message = None
            self._fetch_count += 1

        self._save_to_cache(token, data)

        logger.info(f'Refreshed {count} aircraft from network')
        self._notify(count)

    def _save_to_cache(self, token: _FetchToken, data: bytes) -> None:
        """
        Persist an installed payload without holding the state lock.

        Saves are serialized by their own lock; a save from an older
        generation than the last one written is skipped.
        """
        with self._save_lock:
            if token.generation < self._saved_generation:
                logger.debug(f'Fetch #{token.generation} older than cached #{self._saved_generation}, not saving')
                return
            try:
                self.cache.save(data)
            except CacheWriteError as e:
                logger.warning(f'Could not cache response: {e}')
                return
            self._saved_generation = token.generation

    def _fail(self, token: _FetchToken, message: str) -> None:
        with self._lock:
            if not self._is_current(token):
                return
            self._error_message = message
            self._error_count += 1
        logger.error(f'Refresh failed: {message}')

    def _auto_refresh_loop(self, stop: threading.Event) -> None:
        while not stop.wait(self.refresh_interval):
            connected = self.monitor.check_connection()
            if stop.is_set():
                break

            with self._lock:
                self._is_offline = not connected

            if connected:
                self._refresh_from_network()
            else:
                logger.debug('Auto-refresh skipped, offline')

        logger.debug('Auto-refresh cycle exited')

    # -------------------------------------------------------------------------
    # Reconciliation
    # -------------------------------------------------------------------------

    def _install(self, snapshot: Snapshot) -> int:
        """
        Replace the collection with a snapshot's records.

        Returns the number of records installed; an empty snapshot
        installs nothing and returns 0. Caller must hold the lock.
        """
        if snapshot.is_empty:
            return 0

        # Last record wins if the provider repeats an icao24
        incoming: Dict[str, AircraftState] = {}
        for state in snapshot.states:
            incoming[state.icao24] = state

        previous = {state.icao24: state for state in self._aircraft_states}
        for icao24, state in incoming.items():
            prior = previous.get(icao24)
            if prior is not None:
                state.details_visible = prior.details_visible

        self._aircraft_states = list(incoming.values())
        return len(self._aircraft_states)

    def _notify(self, count: int) -> None:
        for callback in self._on_update_callbacks:
            try:
                callback(count)
            except Exception as e:
                logger.error(f'Update callback error: {e}')
