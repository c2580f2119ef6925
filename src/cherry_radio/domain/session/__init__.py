"""Session domain - the stream session state machine.

This domain handles:
- Play / pause / switch transitions with at most one open stream
- Tag search with station-list recovery
- Epoch-tagged background title polling
"""

from .commands import (
    Command,
    Quit,
    RefreshStations,
    Search,
    SwitchToDefault,
    TogglePlay,
)
from .engine import NO_TITLE, StreamSession
from .poller import MetadataPoller
from .state import SessionMode, SessionSnapshot, SessionState

__all__ = [
    # Engine
    "StreamSession",
    "NO_TITLE",
    "MetadataPoller",
    # State
    "SessionMode",
    "SessionState",
    "SessionSnapshot",
    # Commands
    "Command",
    "Search",
    "TogglePlay",
    "SwitchToDefault",
    "RefreshStations",
    "Quit",
]
