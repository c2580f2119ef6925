"""
MPV player integration with JSON IPC for Cherry Radio.

Every opened stream gets its own mpv process, so an open handle is exactly
one live audio connection and closing it releases everything that stream
holds (process, socket, HTTP connection).
"""

import itertools
import json
import os
import socket
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Any, NamedTuple, Optional, Protocol

from loguru import logger

from cherry_radio.core.config import PlayerConfig

from .exceptions import PlaybackError

# Interval between readiness checks while a stream is opening
STARTUP_POLL_INTERVAL = 0.1

_socket_counter = itertools.count(1)


class PlaybackHandle(NamedTuple):
    """Immutable handle for one playing stream."""

    url: str
    process: subprocess.Popen
    socket_path: str


class PlaybackPort(Protocol):
    """Interface the session needs from an audio backend."""

    def open(self, url: str) -> Any:
        """Start audible playback of ``url`` and return an opaque handle.

        Raises:
            PlaybackError: Stream could not be opened or decoded
        """
        ...

    def close(self, handle: Any) -> None:
        """Stop playback and release all resources. Safe to call twice."""
        ...


def check_mpv_available() -> bool:
    """Check if MPV is available on the system."""
    try:
        result = subprocess.run(
            ["mpv", "--version"], capture_output=True, text=True, timeout=5
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


def send_mpv_command(socket_path: Optional[str], command: dict[str, Any]) -> bool:
    """Send JSON IPC command to MPV."""
    return _mpv_request(socket_path, command) is not None


def get_mpv_property(socket_path: Optional[str], property_name: str) -> Any:
    """Get a property value from MPV."""
    response = _mpv_request(
        socket_path, {"command": ["get_property", property_name]}
    )
    if response is None:
        return None
    return response.get("data")


def _mpv_request(
    socket_path: Optional[str], command: dict[str, Any]
) -> Optional[dict[str, Any]]:
    """Send one command and return the decoded reply if mpv reported success."""
    if not socket_path or not os.path.exists(socket_path):
        return None

    try:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(2.0)
        try:
            sock.connect(socket_path)
            sock.sendall((json.dumps(command) + "\n").encode("utf-8"))
            response = sock.recv(4096).decode("utf-8").strip()
        finally:
            sock.close()
    except OSError:
        return None

    # mpv may interleave event lines; the reply is the line carrying "error"
    for line in response.splitlines():
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            continue
        if "error" in data:
            return data if data.get("error") == "success" else None

    return None


def is_handle_alive(handle: PlaybackHandle) -> bool:
    """Check if the handle's mpv process is still running."""
    return handle.process.poll() is None


class MpvPlayer:
    """PlaybackPort backed by one mpv process per stream."""

    def __init__(self, config: PlayerConfig):
        self.config = config

    def _socket_path(self) -> str:
        if self.config.mpv_socket_dir:
            socket_dir = Path(self.config.mpv_socket_dir).expanduser()
        else:
            socket_dir = Path(tempfile.gettempdir())
        return str(socket_dir / f"cherry-radio-mpv-{os.getpid()}-{next(_socket_counter)}")

    def open(self, url: str) -> PlaybackHandle:
        """Start mpv on ``url`` and wait until it is decoding audio.

        Raises:
            PlaybackError: mpv missing, exited early, or did not start in time
        """
        socket_path = self._socket_path()
        cmd = [
            "mpv",
            "--no-video",
            "--no-terminal",
            "--idle=no",
            "--load-scripts=no",
            f"--input-ipc-server={socket_path}",
            f"--volume={self.config.volume}",
            url,
        ]

        logger.info(f"Opening stream with mpv: {url}")
        try:
            if os.path.exists(socket_path):
                logger.debug(f"Removing existing socket: {socket_path}")
                os.unlink(socket_path)
            process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,
            )
        except (subprocess.SubprocessError, OSError) as e:
            raise PlaybackError(f"Failed to start mpv: {e}") from e

        handle = PlaybackHandle(url=url, process=process, socket_path=socket_path)
        try:
            self._wait_until_decoding(handle)
        except PlaybackError:
            self.close(handle)
            raise

        logger.info(f"Stream playing: {url}")
        return handle

    def _wait_until_decoding(self, handle: PlaybackHandle) -> None:
        """Block until mpv reports an audio codec, exits, or times out."""
        deadline = time.monotonic() + self.config.startup_timeout
        while time.monotonic() < deadline:
            if not is_handle_alive(handle):
                raise PlaybackError(
                    f"Could not open or decode stream {handle.url} "
                    f"(mpv exited with {handle.process.returncode})"
                )
            if get_mpv_property(handle.socket_path, "audio-codec-name"):
                return
            time.sleep(STARTUP_POLL_INTERVAL)

        raise PlaybackError(
            f"Timed out after {self.config.startup_timeout}s opening {handle.url}"
        )

    def close(self, handle: Optional[PlaybackHandle]) -> None:
        """Stop the mpv process and remove its socket."""
        if handle is None:
            return

        if is_handle_alive(handle):
            logger.info(f"Closing stream: {handle.url}")
            send_mpv_command(handle.socket_path, {"command": ["quit"]})
            try:
                handle.process.wait(timeout=1.0)
            except subprocess.TimeoutExpired:
                try:
                    handle.process.kill()
                    handle.process.wait(timeout=2.0)
                except (OSError, subprocess.TimeoutExpired):
                    pass  # Process already terminated or couldn't be killed

        if os.path.exists(handle.socket_path):
            try:
                os.unlink(handle.socket_path)
            except OSError:
                pass
