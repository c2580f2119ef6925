"""
Session state for the stream engine.

SessionState is mutable and private to StreamSession; everything outside the
engine reads SessionSnapshot copies instead.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from cherry_radio.domain.stations.models import Station


class SessionMode(Enum):
    """Connection lifecycle of the session."""

    IDLE = "idle"
    PLAYING = "playing"
    SWITCHING = "switching"  # Tearing down one station and opening the next


@dataclass
class SessionState:
    """The one live session of the process.

    Invariants:
    - connection_handle is not None exactly when mode is PLAYING
    - song_title is cleared whenever current_station changes
    """

    current_station: Optional[Station] = None
    connection_handle: Optional[Any] = None  # Opaque PlaybackPort handle
    song_title: str = ""
    mode: SessionMode = SessionMode.IDLE
    last_error: Optional[str] = None
    epoch: int = 0  # Bumped on every connect/disconnect to invalidate polls


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session for rendering."""

    mode: SessionMode
    current_station: Optional[Station]
    song_title: str
    last_error: Optional[str]

    @property
    def is_playing(self) -> bool:
        return self.mode is SessionMode.PLAYING
