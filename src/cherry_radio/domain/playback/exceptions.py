"""Playback exceptions for error handling."""

from cherry_radio.core.exceptions import NetworkError


class PlaybackError(NetworkError):
    """Raised when a stream cannot be opened, decoded or started."""

    pass
