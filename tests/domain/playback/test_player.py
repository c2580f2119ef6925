"""Tests for the mpv playback backend."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from cherry_radio.core.config import PlayerConfig
from cherry_radio.core.exceptions import NetworkError
from cherry_radio.domain.playback.exceptions import PlaybackError
from cherry_radio.domain.playback.player import (
    MpvPlayer,
    PlaybackHandle,
    check_mpv_available,
    get_mpv_property,
    send_mpv_command,
)

URL = "http://radio.example/stream"


@pytest.fixture
def player(tmp_path: Path) -> MpvPlayer:
    return MpvPlayer(PlayerConfig(mpv_socket_dir=str(tmp_path), volume=70, startup_timeout=0.5))


def make_process(alive: bool = True, returncode: int = None) -> MagicMock:
    process = MagicMock()
    process.poll.return_value = None if alive else returncode
    process.returncode = returncode
    return process


class TestCheckMpvAvailable:
    """Tests for mpv detection."""

    def test_available(self) -> None:
        with patch("subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            assert check_mpv_available() is True

    def test_not_installed(self) -> None:
        with patch("subprocess.run", side_effect=FileNotFoundError("mpv")):
            assert check_mpv_available() is False


class TestMpvIpc:
    """Tests for IPC helpers without a running mpv."""

    def test_missing_socket_returns_none(self, tmp_path: Path) -> None:
        socket_path = str(tmp_path / "absent.sock")
        assert get_mpv_property(socket_path, "audio-codec-name") is None
        assert send_mpv_command(socket_path, {"command": ["quit"]}) is False

    def test_no_socket_path(self) -> None:
        assert get_mpv_property(None, "pause") is None


class TestMpvPlayerOpen:
    """Tests for opening a stream."""

    def test_spawns_mpv_with_ipc_socket(self, player: MpvPlayer, tmp_path: Path) -> None:
        process = make_process()
        with patch("subprocess.Popen", return_value=process) as mock_popen, patch(
            "cherry_radio.domain.playback.player.get_mpv_property", return_value="mp3"
        ):
            handle = player.open(URL)

        cmd = mock_popen.call_args[0][0]
        assert cmd[0] == "mpv"
        assert "--no-video" in cmd
        assert "--volume=70" in cmd
        assert cmd[-1] == URL
        assert f"--input-ipc-server={handle.socket_path}" in cmd
        assert Path(handle.socket_path).parent == tmp_path
        assert handle.url == URL
        assert handle.process is process

    def test_each_open_gets_its_own_socket(self, player: MpvPlayer) -> None:
        with patch("subprocess.Popen", side_effect=lambda *a, **k: make_process()), patch(
            "cherry_radio.domain.playback.player.get_mpv_property", return_value="mp3"
        ):
            first = player.open(URL)
            second = player.open(URL)

        assert first.socket_path != second.socket_path

    def test_mpv_exiting_early_raises(self, player: MpvPlayer) -> None:
        """Test an undecodable stream (mpv exits) is reported as PlaybackError."""
        process = make_process(alive=False, returncode=2)
        with patch("subprocess.Popen", return_value=process), patch(
            "cherry_radio.domain.playback.player.get_mpv_property", return_value=None
        ):
            with pytest.raises(PlaybackError, match="exited with 2"):
                player.open(URL)

    def test_startup_timeout_kills_process(self, player: MpvPlayer) -> None:
        process = make_process()
        process.wait.side_effect = [subprocess.TimeoutExpired("mpv", 1.0), 0]
        with patch("subprocess.Popen", return_value=process), patch(
            "cherry_radio.domain.playback.player.get_mpv_property", return_value=None
        ), patch("cherry_radio.domain.playback.player.STARTUP_POLL_INTERVAL", 0.01):
            with pytest.raises(PlaybackError, match="Timed out"):
                player.open(URL)

        process.kill.assert_called_once()

    def test_popen_failure_raises(self, player: MpvPlayer) -> None:
        with patch("subprocess.Popen", side_effect=FileNotFoundError("mpv")):
            with pytest.raises(PlaybackError):
                player.open(URL)

    def test_stale_socket_removal_failure_raises(self, player: MpvPlayer) -> None:
        with patch("cherry_radio.domain.playback.player.os.path.exists", return_value=True), patch(
            "cherry_radio.domain.playback.player.os.unlink",
            side_effect=PermissionError("socket owned by another user"),
        ), patch("subprocess.Popen") as mock_popen:
            with pytest.raises(PlaybackError, match="socket owned by another user"):
                player.open(URL)

        mock_popen.assert_not_called()

    def test_playback_error_is_network_error(self) -> None:
        assert issubclass(PlaybackError, NetworkError)


class TestMpvPlayerClose:
    """Tests for closing a stream."""

    def test_close_asks_mpv_to_quit_and_removes_socket(self, player: MpvPlayer, tmp_path: Path) -> None:
        socket_path = tmp_path / "mpv.sock"
        socket_path.touch()
        process = make_process()
        handle = PlaybackHandle(url=URL, process=process, socket_path=str(socket_path))

        with patch("cherry_radio.domain.playback.player.send_mpv_command") as mock_send:
            player.close(handle)

        mock_send.assert_called_once_with(str(socket_path), {"command": ["quit"]})
        process.wait.assert_called_once_with(timeout=1.0)
        process.kill.assert_not_called()
        assert not socket_path.exists()

    def test_close_is_idempotent(self, player: MpvPlayer, tmp_path: Path) -> None:
        process = make_process(alive=False, returncode=0)
        handle = PlaybackHandle(url=URL, process=process, socket_path=str(tmp_path / "gone.sock"))

        player.close(handle)
        player.close(handle)
        player.close(None)

        process.kill.assert_not_called()
