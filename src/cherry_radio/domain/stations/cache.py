"""
Local station snapshot.

The snapshot is a pretty-printed JSON array of directory entries. It only
changes through an explicit refresh, which replaces the whole file
atomically, so readers see either the old list or the new one.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger

from cherry_radio.core.exceptions import NetworkError

from .exceptions import (
    CacheMissingError,
    CorruptCacheError,
    RefreshError,
    StationNotFoundError,
)
from .models import Station, normalize

CatalogFetcher = Callable[[], list[dict[str, Any]]]

SNAPSHOT_MODE = 0o644


class StationCache:
    """Resolves tags against the on-disk snapshot and refreshes it on request.

    Refreshes are single-flight: a caller arriving while another refresh is
    running waits for it and reuses its outcome instead of writing again.
    """

    def __init__(self, path: Path, fetch_catalog: CatalogFetcher):
        """
        Initialize the cache.

        Args:
            path: Snapshot file location
            fetch_catalog: Zero-argument callable returning raw directory entries
        """
        self.path = Path(path)
        self._fetch_catalog = fetch_catalog
        self._refresh_lock = threading.Lock()
        self._generation = 0
        self._last_count: Optional[int] = None
        self._last_error: Optional[RefreshError] = None

    def exists(self) -> bool:
        """Whether a snapshot has been written."""
        return self.path.exists()

    def load(self) -> list[Station]:
        """Read all stations in file order.

        Raises:
            CacheMissingError: No snapshot yet
            CorruptCacheError: Snapshot unreadable or not a station list
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise CacheMissingError(
                f"Station list not downloaded yet ({self.path})"
            ) from None
        except (OSError, UnicodeDecodeError) as e:
            raise CorruptCacheError(f"Cannot read station list {self.path}: {e}") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CorruptCacheError(f"Station list {self.path} is not JSON: {e}") from e

        if not isinstance(data, list):
            raise CorruptCacheError(f"Station list {self.path} is not a JSON array")

        stations = []
        for index, entry in enumerate(data):
            station = Station.from_dict(entry) if isinstance(entry, dict) else None
            if station is None:
                raise CorruptCacheError(
                    f"Station list {self.path} has an invalid entry at index {index}"
                )
            stations.append(station)
        return stations

    def resolve(self, tag: str) -> Station:
        """Return the first station (in file order) whose tags contain ``tag``.

        Matching is case-insensitive substring containment, so "pun" finds
        a station tagged "punk".

        Raises:
            CacheMissingError: No usable snapshot (refresh and retry)
            StationNotFoundError: No station matches
        """
        needle = normalize(tag)
        for station in self.load():
            if station.matches(needle):
                logger.debug(f"Tag {needle!r} resolved to {station.name} ({station.url})")
                return station
        raise StationNotFoundError(tag)

    def refresh(self) -> int:
        """Download the full catalog and atomically replace the snapshot.

        Returns:
            Number of stations written

        Raises:
            RefreshError: Download or write failed; the old snapshot is untouched
        """
        seen_generation = self._generation
        with self._refresh_lock:
            if self._generation != seen_generation:
                # Another refresh finished while we waited for the lock
                logger.debug("Joined an in-flight station refresh")
                if self._last_error is not None:
                    raise RefreshError(str(self._last_error)) from self._last_error
                return self._last_count or 0

            try:
                count = self._refresh_locked()
            except RefreshError as e:
                self._last_error = e
                self._last_count = None
                raise
            else:
                self._last_error = None
                self._last_count = count
                return count
            finally:
                self._generation += 1

    def _refresh_locked(self) -> int:
        try:
            payload = self._fetch_catalog()
        except NetworkError as e:
            raise RefreshError(str(e)) from e

        entries = [
            entry
            for entry in payload
            if isinstance(entry, dict) and Station.from_dict(entry) is not None
        ]
        dropped = len(payload) - len(entries)
        if dropped:
            logger.warning(f"Dropped {dropped} directory entries without url/name/tags")

        self._write_snapshot(entries)
        logger.info(f"Station list written: {len(entries)} stations -> {self.path}")
        return len(entries)

    def _write_snapshot(self, entries: list[dict[str, Any]]) -> None:
        """Write to a temp file next to the snapshot, then rename over it."""
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=".stations-", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entries, f, indent=2, ensure_ascii=False)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            # mkstemp creates 0600; the snapshot is meant to be readable
            os.chmod(tmp_name, SNAPSHOT_MODE)
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name and os.path.exists(tmp_name):
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            raise RefreshError(f"Failed to write station list {self.path}: {e}") from e
