"""Playback domain - MPV integration.

This domain handles:
- The PlaybackPort interface the stream session drives
- MPV processes controlled over JSON IPC, one per open stream
"""

from .exceptions import PlaybackError
from .player import (
    MpvPlayer,
    PlaybackHandle,
    PlaybackPort,
    check_mpv_available,
    get_mpv_property,
    is_handle_alive,
    send_mpv_command,
)

__all__ = [
    "PlaybackPort",
    "PlaybackHandle",
    "MpvPlayer",
    "PlaybackError",
    "check_mpv_available",
    "send_mpv_command",
    "get_mpv_property",
    "is_handle_alive",
]
