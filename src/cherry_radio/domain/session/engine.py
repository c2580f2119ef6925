"""
Stream session engine.

Owns the single live connection of the process and serializes every
transition (play, pause, switch) behind one re-entrant lock. Title polling
runs in a MetadataPoller thread against its own HTTP connection; results are
applied only while the epoch they were requested for is still current.

All RadioError failures stop here: they are logged and surfaced as
``last_error`` in the snapshot, never raised to the caller.
"""

import threading
from typing import Any, Callable, Optional

from loguru import logger

from cherry_radio.core.exceptions import RadioError
from cherry_radio.domain.metadata.exceptions import MissingMetaIntError
from cherry_radio.domain.playback.player import PlaybackPort
from cherry_radio.domain.stations.cache import StationCache
from cherry_radio.domain.stations.exceptions import (
    CacheMissingError,
    RefreshError,
    StationNotFoundError,
)
from cherry_radio.domain.stations.models import Station, normalize

from .commands import (
    Command,
    Quit,
    RefreshStations,
    Search,
    SwitchToDefault,
    TogglePlay,
)
from .poller import MetadataPoller
from .state import SessionMode, SessionSnapshot, SessionState

# Shown when a poll returns no title or fails
NO_TITLE = "no title available"

DEFAULT_POLL_INTERVAL = 7.0

TitleFetcher = Callable[[str], str]
PollerFactory = Callable[[int, Callable[[int], Any], float], MetadataPoller]


class StreamSession:
    """State machine for search, connect, disconnect and title polling."""

    def __init__(
        self,
        cache: StationCache,
        player: PlaybackPort,
        fetch_title: TitleFetcher,
        default_station: Optional[Station] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        metadata_enabled: bool = True,
        poller_factory: PollerFactory = MetadataPoller,
    ):
        """
        Initialize the session in IDLE with the default station selected.

        Args:
            cache: Station snapshot used by search()
            player: Playback backend
            fetch_title: Callable returning the current title for a stream URL
            default_station: Station selected on startup and by switch_to_default()
            poll_interval: Seconds between title polls
            metadata_enabled: Start a poller on every connection
            poller_factory: Builds the poller for a connection epoch
        """
        self.cache = cache
        self.player = player
        self.default_station = default_station
        self.poll_interval = poll_interval
        self.metadata_enabled = metadata_enabled
        self._fetch_title = fetch_title
        self._poller_factory = poller_factory
        self._lock = threading.RLock()
        self._state = SessionState(current_station=default_station)
        self._poller: Optional[MetadataPoller] = None
        self._closed = False

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot(self) -> SessionSnapshot:
        """Copy of the state for the presentation layer."""
        with self._lock:
            return SessionSnapshot(
                mode=self._state.mode,
                current_station=self._state.current_station,
                song_title=self._state.song_title,
                last_error=self._state.last_error,
            )

    @property
    def epoch(self) -> int:
        with self._lock:
            return self._state.epoch

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def play(self) -> bool:
        """Open the current station. Valid only from IDLE."""
        with self._lock:
            if self._state.mode is not SessionMode.IDLE:
                logger.debug(f"play() ignored in mode {self._state.mode.value}")
                return False
            return self._connect()

    def pause(self) -> bool:
        """Close the live stream and return to IDLE. No-op when not playing."""
        with self._lock:
            if self._state.mode is not SessionMode.PLAYING:
                logger.debug(f"pause() ignored in mode {self._state.mode.value}")
                return False
            self._disconnect()
            return True

    stop = pause

    def toggle_play(self) -> bool:
        """Pause when playing, play when idle."""
        with self._lock:
            if self._state.mode is SessionMode.PLAYING:
                return self.pause()
            return self.play()

    def switch_station(self, station: Station) -> bool:
        """Tear down any live stream, select ``station`` and start playing it."""
        with self._lock:
            if self._state.mode is SessionMode.PLAYING:
                self._disconnect()

            self._state.mode = SessionMode.SWITCHING
            self._state.current_station = station
            self._state.song_title = ""
            self._state.epoch += 1
            logger.info(f"Switching to {station.name} ({station.url})")
            return self._connect()

    def switch_to_default(self) -> bool:
        """Switch to the configured default station."""
        if self.default_station is None:
            self._set_error("No default station configured")
            return False
        return self.switch_station(self.default_station)

    def search(self, tag: str) -> bool:
        """Resolve ``tag`` against the station list and switch to the match.

        A missing or corrupt station list triggers a refresh; the search
        itself still reports failure so the user can search again.
        """
        if not normalize(tag):
            self._set_error("Enter a search tag (rock / metal / pop / space / jungle)")
            return False

        try:
            station = self.cache.resolve(tag)
        except CacheMissingError as e:
            logger.warning(f"Station list unusable ({e}), refreshing")
            try:
                count = self.cache.refresh()
            except RefreshError as refresh_error:
                self._set_error(f"Station list unavailable: {refresh_error}")
                return False
            self._set_error(f"Station list downloaded ({count} stations), search again")
            return False
        except StationNotFoundError:
            self._set_error(f"No station with a tag {tag.strip()!r}")
            return False

        return self.switch_station(station)

    def refresh_stations(self) -> int:
        """Download a fresh station list. Returns the station count (0 on failure)."""
        try:
            count = self.cache.refresh()
        except RefreshError as e:
            self._set_error(f"Station list refresh failed: {e}")
            return 0

        with self._lock:
            self._state.last_error = None
        logger.info(f"Station list refreshed: {count} stations")
        return count

    def shutdown(self) -> None:
        """Release the stream and mark the session closed."""
        with self._lock:
            if self._state.mode is SessionMode.PLAYING:
                self._disconnect()
            self._closed = True
            logger.info("Session closed")

    def dispatch(self, command: Command) -> None:
        """Run a presentation-layer command."""
        match command:
            case Search(tag=tag):
                self.search(tag)
            case TogglePlay():
                self.toggle_play()
            case SwitchToDefault():
                self.switch_to_default()
            case RefreshStations():
                self.refresh_stations()
            case Quit():
                self.shutdown()
            case _:
                raise TypeError(f"Unknown session command: {command!r}")

    # ------------------------------------------------------------------
    # Metadata polling
    # ------------------------------------------------------------------

    def on_metadata_tick(self, epoch: int) -> bool:
        """Fetch the current title for ``epoch`` and apply it if still current.

        The network request runs without holding the session lock, so a slow
        server never blocks pause() or switch_station().

        Returns:
            True if the title was applied, False if the tick was stale
        """
        with self._lock:
            if not self._is_current(epoch):
                return False
            url = self._state.current_station.url

        stop_polling = False
        try:
            title = self._fetch_title(url)
        except MissingMetaIntError as e:
            logger.info(f"No inline metadata for {url}: {e}")
            title = ""
            stop_polling = True
        except RadioError as e:
            logger.warning(f"Title poll failed for {url}: {e}")
            title = ""

        with self._lock:
            if not self._is_current(epoch):
                logger.debug(f"Dropping stale title from epoch {epoch}")
                return False
            self._state.song_title = title or NO_TITLE
            if stop_polling:
                self._cancel_polling()
            return True

    def _is_current(self, epoch: int) -> bool:
        return self._state.mode is SessionMode.PLAYING and epoch == self._state.epoch

    def _start_polling(self, epoch: int) -> None:
        if not self.metadata_enabled:
            return
        self._poller = self._poller_factory(epoch, self.on_metadata_tick, self.poll_interval)
        self._poller.start()

    def _cancel_polling(self) -> None:
        if self._poller is not None:
            self._poller.cancel()
            self._poller = None

    # ------------------------------------------------------------------
    # Internals (caller holds the lock)
    # ------------------------------------------------------------------

    def _connect(self) -> bool:
        station = self._state.current_station
        if station is None:
            self._state.mode = SessionMode.IDLE
            self._state.last_error = "No station selected"
            return False

        try:
            handle = self.player.open(station.url)
        except RadioError as e:
            self._state.mode = SessionMode.IDLE
            self._state.last_error = f"Cannot play {station.name}: {e}"
            logger.error(self._state.last_error)
            return False
        except Exception as e:
            # A broken backend must not leave the session in SWITCHING
            self._state.mode = SessionMode.IDLE
            self._state.last_error = f"Cannot play {station.name}: {e}"
            logger.exception(f"Playback backend failed opening {station.url}")
            return False

        self._state.epoch += 1
        self._state.connection_handle = handle
        self._state.mode = SessionMode.PLAYING
        self._state.last_error = None
        self._start_polling(self._state.epoch)
        logger.info(f"Now playing: {station.name}")
        return True

    def _disconnect(self) -> None:
        # Stop polls before the stream goes away
        self._cancel_polling()
        self._state.epoch += 1

        handle = self._state.connection_handle
        self._state.connection_handle = None
        if handle is not None:
            self.player.close(handle)

        self._state.song_title = ""
        self._state.mode = SessionMode.IDLE

    def _set_error(self, message: str) -> None:
        with self._lock:
            self._state.last_error = message
        logger.warning(message)
