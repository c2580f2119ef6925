"""Tests for configuration loading."""

import os
import tomllib
from pathlib import Path

import pytest

from cherry_radio.core.config import (
    DEFAULT_API_ENDPOINT,
    Config,
    create_default_config,
    get_config_path,
    get_data_dir,
    load_config,
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG dirs at tmp and clear overrides so the user's config is never read."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.chdir(tmp_path)
    for name in (
        "CHERRY_RADIO_API_ENDPOINT",
        "CHERRY_RADIO_CACHE_FILE",
        "CHERRY_RADIO_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def write_config(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    """Tests for built-in defaults."""

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "nope.toml"))

        assert config.stations.api_endpoint == DEFAULT_API_ENDPOINT
        assert config.stations.default_name == "12 punks (default)"
        assert config.metadata.poll_interval == 7.0
        assert config.player.volume == 50

    def test_missing_file_is_not_created(self, tmp_path: Path) -> None:
        load_config(str(tmp_path / "nope.toml"))
        assert not (tmp_path / "nope.toml").exists()

    def test_default_paths_live_in_data_dir(self, tmp_path: Path) -> None:
        config = Config()

        assert get_data_dir() == tmp_path / "data" / "cherry-radio"
        assert config.cache_path() == tmp_path / "data" / "cherry-radio" / "stations.json"
        assert config.log_path() == tmp_path / "data" / "cherry-radio" / "cherry-radio.log"

    def test_default_config_text_is_valid_toml(self) -> None:
        data = tomllib.loads(create_default_config())

        assert data["stations"]["api_endpoint"] == DEFAULT_API_ENDPOINT
        assert data["metadata"]["poll_interval"] == 7.0
        assert data["player"]["startup_timeout"] == Config().player.startup_timeout


class TestLoadConfig:
    """Tests for reading a TOML file."""

    def test_reads_sections(self, tmp_path: Path) -> None:
        path = write_config(
            tmp_path / "radio.toml",
            """
[player]
volume = 80

[stations]
cache_file = "/tmp/my-stations.json"
default_tags = "jazz"

[metadata]
enabled = false
poll_interval = 15

[logging]
level = "debug"

[ui]
use_colors = false
""",
        )

        config = load_config(str(path))

        assert config.player.volume == 80
        assert config.stations.default_tags == "jazz"
        assert config.stations.api_endpoint == DEFAULT_API_ENDPOINT
        assert config.cache_path() == Path("/tmp/my-stations.json")
        assert config.metadata.enabled is False
        assert config.metadata.poll_interval == 15.0
        assert config.logging.level == "DEBUG"
        assert config.ui.use_colors is False

    def test_invalid_toml_falls_back_to_defaults(self, tmp_path: Path) -> None:
        path = write_config(tmp_path / "broken.toml", "[player\nvolume = ")

        config = load_config(str(path))

        assert config.player.volume == 50

    def test_local_config_is_preferred(self, tmp_path: Path) -> None:
        write_config(tmp_path / "config.toml", "[player]\nvolume = 10\n")

        assert get_config_path() == tmp_path / "config.toml"
        assert load_config().player.volume == 10

    def test_explicit_path_wins(self, tmp_path: Path) -> None:
        write_config(tmp_path / "config.toml", "")
        assert get_config_path("~/other.toml") == Path.home() / "other.toml"


class TestEnvOverrides:
    """Tests for CHERRY_RADIO_* environment variables."""

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write_config(
            tmp_path / "radio.toml",
            '[stations]\napi_endpoint = "http://file.example/search"\n',
        )
        monkeypatch.setenv("CHERRY_RADIO_API_ENDPOINT", "http://env.example/search")
        monkeypatch.setenv("CHERRY_RADIO_CACHE_FILE", str(tmp_path / "env.json"))
        monkeypatch.setenv("CHERRY_RADIO_LOG_LEVEL", "warning")

        config = load_config(str(path))

        assert config.stations.api_endpoint == "http://env.example/search"
        assert config.cache_path() == tmp_path / "env.json"
        assert config.logging.level == "WARNING"

    def test_dotenv_in_config_dir(self, tmp_path: Path) -> None:
        config_dir = tmp_path / "config" / "cherry-radio"
        config_dir.mkdir(parents=True)
        (config_dir / ".env").write_text(
            "CHERRY_RADIO_API_ENDPOINT=http://dotenv.example/search\n", encoding="utf-8"
        )

        try:
            config = load_config(str(tmp_path / "nope.toml"))
        finally:
            # load_dotenv writes straight into os.environ
            os.environ.pop("CHERRY_RADIO_API_ENDPOINT", None)

        assert config.stations.api_endpoint == "http://dotenv.example/search"
