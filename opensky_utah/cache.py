"""
On-disk cache of the last successful OpenSky response.

Holds exactly one entry: the raw response bytes plus the time they were
saved. The service reads it once on cold start so the map has something
to show before (or without) the first network fetch.

File format:
    {"timestamp": "<ISO-8601 UTC>", "payload": "<base64 response body>"}

Writes go to a temp file in the same directory and are moved into place
with os.replace, so an interrupted save leaves the previous entry intact.
"""

import base64
import binascii
import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple, Union

from opensky_utah.config import config
from opensky_utah.errors import CacheReadError, CacheWriteError

logger = logging.getLogger(__name__)


def _parse_timestamp(value: str) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f'timestamp must be a string, got {type(value).__name__}')
    # fromisoformat() only accepts a trailing Z from Python 3.11 on
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class DiskCache:
    """
    Single-entry snapshot cache backed by a JSON file.

    Thread-safe: saves and clears are serialized by an internal lock.
    """

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path or config.cache.path)
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls) -> 'DiskCache':
        return cls(config.cache.path)

    def save(self, data: bytes) -> datetime:
        """
        Persist raw payload bytes, replacing any previous entry.

        Returns the timestamp recorded with the entry.

        Raises CacheWriteError if the file cannot be written.
        """
        timestamp = datetime.now(timezone.utc)
        record = {
            'timestamp': timestamp.isoformat(),
            'payload': base64.b64encode(data).decode('ascii'),
        }

        with self._lock:
            tmp_name = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f'.{self.path.name}.',
                    suffix='.tmp',
                    dir=str(self.path.parent),
                )
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(record, f)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self.path)
                tmp_name = None
            except OSError as e:
                raise CacheWriteError(f'failed to write cache {self.path}: {e}') from e
            finally:
                if tmp_name is not None:
                    try:
                        os.unlink(tmp_name)
                    except OSError:
                        logger.debug(f'Could not remove temp file {tmp_name}')

        logger.info(f'Cache saved: {self.path} ({len(data)} bytes)')
        return timestamp

    def read(self) -> Tuple[bytes, datetime]:
        """
        Read the cached entry.

        Raises FileNotFoundError if there is no entry, CacheReadError if
        the entry is unreadable or corrupt.
        """
        try:
            raw = self.path.read_text(encoding='utf-8')
        except FileNotFoundError:
            raise
        except (OSError, UnicodeDecodeError) as e:
            raise CacheReadError(f'cannot read {self.path}: {e}') from e

        try:
            record = json.loads(raw)
            payload = base64.b64decode(record['payload'], validate=True)
            timestamp = _parse_timestamp(record['timestamp'])
        except (ValueError, KeyError, TypeError, binascii.Error) as e:
            raise CacheReadError(f'corrupt cache file {self.path}: {e}') from e

        return payload, timestamp

    def load(self) -> Optional[Tuple[bytes, datetime]]:
        """
        Load the cached payload and its timestamp.

        Returns None when no entry exists or the entry is corrupt; a bad
        cache file is never fatal, the caller falls back to sample data.
        """
        try:
            payload, timestamp = self.read()
        except FileNotFoundError:
            logger.info('No cache file found')
            return None
        except CacheReadError as e:
            logger.warning(f'Failed to load cache: {e}')
            return None

        logger.info(f'Cache loaded: {timestamp.isoformat()}')
        return payload, timestamp

    def clear(self) -> None:
        """Remove the cached entry. No-op if absent."""
        with self._lock:
            try:
                self.path.unlink()
            except FileNotFoundError:
                return
        logger.info(f'Cache cleared: {self.path}')
