"""Commands the presentation layer sends to the stream session."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Search:
    """Resolve a tag and switch to the matching station."""

    tag: str


@dataclass(frozen=True)
class TogglePlay:
    """Play when idle, pause when playing."""


@dataclass(frozen=True)
class SwitchToDefault:
    """Switch back to the configured default station."""


@dataclass(frozen=True)
class RefreshStations:
    """Download a fresh station list."""


@dataclass(frozen=True)
class Quit:
    """Stop playback and end the session."""


Command = Union[Search, TogglePlay, SwitchToDefault, RefreshStations, Quit]
