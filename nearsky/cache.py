"""
Single-slot response cache.

Keeps the last aircraft snapshot in a JSON file in the temp directory so
repeated runs within a few minutes do not spend anonymous API quota.

Design notes:
- One global slot, overwritten on every fresh fetch
- Stale entries are ignored but left on disk until the next store
- Corrupt or foreign content is treated as a miss, never as an error
- No locking; concurrent runs race and the last writer wins
"""

import json
import logging
import math
import time
from pathlib import Path
from typing import Callable, Optional, Union

from nearsky.config import config
from nearsky.models import AircraftSnapshot

logger = logging.getLogger(__name__)


class ResponseCache:
    """
    File-backed cache for the most recent AircraftSnapshot.

    When disabled, load() always misses and store() does nothing.
    """

    def __init__(
        self,
        path: Union[str, Path],
        ttl_minutes: float = 2,
        enabled: bool = True,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path)
        self.ttl_seconds = ttl_minutes * 60
        self.enabled = enabled
        self._clock = clock

    @classmethod
    def from_config(cls) -> 'ResponseCache':
        """Create cache from application configuration."""
        return cls(
            path=config.cache.path,
            ttl_minutes=config.cache.ttl_minutes,
            enabled=config.cache.enabled,
        )

    def load(self) -> Optional[AircraftSnapshot]:
        """
        Return the cached snapshot if present and not expired.

        Returns None on a miss, a stale entry, or unreadable content.
        """
        if not self.enabled:
            return None

        if not self.path.exists():
            logger.debug(f'No cache file at {self.path}')
            return None

        try:
            entry = json.loads(self.path.read_text(encoding='utf-8'))
            expiry = float(entry['expiry'])
            if not math.isfinite(expiry):
                raise ValueError(f'non-finite expiry: {expiry}')
            snapshot = AircraftSnapshot.from_dict(entry['data'])
        except (OSError, ValueError, KeyError, TypeError, OverflowError) as e:
            logger.warning(f'Ignoring unreadable cache file {self.path}: {e}')
            return None

        now = self._clock()
        if now >= expiry:
            logger.debug(f'Cache entry expired {now - expiry:.0f}s ago')
            return None

        logger.info(f'Using cached data ({snapshot.count} aircraft, expires in {expiry - now:.0f}s)')
        return snapshot

    def store(self, snapshot: AircraftSnapshot) -> None:
        """
        Persist snapshot with a fresh expiry, overwriting the slot.

        Write failures are logged and otherwise ignored.
        """
        if not self.enabled:
            return

        entry = {
            'data': snapshot.to_dict(),
            'expiry': self._clock() + self.ttl_seconds,
        }

        try:
            self.path.write_text(json.dumps(entry), encoding='utf-8')
        except OSError as e:
            logger.warning(f'Could not write cache file {self.path}: {e}')
            return

        logger.debug(f'Cached {snapshot.count} aircraft for {self.ttl_seconds / 60:g} minutes')
