"""
Configuration management for Cherry Radio
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger

DEFAULT_API_ENDPOINT = "http://all.api.radio-browser.info/json/stations/search"


@dataclass
class PlayerConfig:
    """Configuration for the mpv playback backend."""

    mpv_socket_dir: Optional[str] = None  # Directory for IPC sockets (default: tempdir)
    volume: int = 50
    startup_timeout: float = 10.0  # Seconds to wait for mpv to start decoding


@dataclass
class StationsConfig:
    """Configuration for the station directory and its local snapshot."""

    api_endpoint: str = DEFAULT_API_ENDPOINT
    cache_file: Optional[str] = None  # Default: <data_dir>/stations.json
    request_timeout: float = 30.0
    user_agent: str = "cherry-radio/0.1"
    default_url: str = (
        "https://rautemusik-de-hz-fal-stream15.radiohost.de/12punks?ref=radiobrowser"
    )
    default_name: str = "12 punks (default)"
    default_tags: str = "punk"


@dataclass
class MetadataConfig:
    """Configuration for in-stream title polling."""

    enabled: bool = True
    poll_interval: float = 7.0  # Seconds between title polls
    timeout: float = 10.0  # Per-request timeout for the metadata connection


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # Default: <data_dir>/cherry-radio.log


@dataclass
class UIConfig:
    """Configuration for the terminal interface."""

    use_colors: bool = True
    refresh_rate: int = 10  # Frames per second for the render loop


@dataclass
class Config:
    """Main configuration object."""

    player: PlayerConfig = field(default_factory=PlayerConfig)
    stations: StationsConfig = field(default_factory=StationsConfig)
    metadata: MetadataConfig = field(default_factory=MetadataConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    def cache_path(self) -> Path:
        """Resolve the station snapshot location."""
        if self.stations.cache_file:
            return Path(self.stations.cache_file).expanduser()
        return get_data_dir() / "stations.json"

    def log_path(self) -> Path:
        """Resolve the log file location."""
        if self.logging.log_file:
            return Path(self.logging.log_file).expanduser()
        return get_data_dir() / "cherry-radio.log"


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "cherry-radio"
    return Path.home() / ".config" / "cherry-radio"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "cherry-radio"
    return Path.home() / ".local" / "share" / "cherry-radio"


def get_config_path(explicit: Optional[str] = None) -> Path:
    """Get the main configuration file path.

    Checks in the following order:
    1. Path passed on the command line (--config)
    2. Current working directory
    3. XDG_CONFIG_HOME/cherry-radio (or ~/.config/cherry-radio)
    """
    if explicit:
        return Path(explicit).expanduser()

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return f"""
# Cherry Radio Configuration

[player]
# Directory for mpv IPC sockets (system temp dir if not specified)
# mpv_socket_dir = "/tmp"

# Playback volume (0-100)
volume = 50

# Seconds to wait for mpv to open a stream
startup_timeout = 10.0

[stations]
# Station directory search endpoint
api_endpoint = "{DEFAULT_API_ENDPOINT}"

# Local station snapshot (default: ~/.local/share/cherry-radio/stations.json)
# cache_file = "/path/to/stations.json"

# Timeout for the directory download in seconds
request_timeout = 30.0

# Station used on startup and by "Default station"
default_url = "https://rautemusik-de-hz-fal-stream15.radiohost.de/12punks?ref=radiobrowser"
default_name = "12 punks (default)"
default_tags = "punk"

[metadata]
# Show the current song title from the stream
enabled = true

# Seconds between title polls
poll_interval = 7.0

# Timeout for each title request in seconds
timeout = 10.0

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/cherry-radio/cherry-radio.log)
# log_file = "/path/to/cherry-radio.log"

[ui]
use_colors = true

# Render loop frequency in Hz
refresh_rate = 10
""".strip()


def _apply_env_overrides(config: Config) -> Config:
    """Apply CHERRY_RADIO_* environment variables on top of file values."""
    api_endpoint = os.environ.get("CHERRY_RADIO_API_ENDPOINT")
    cache_file = os.environ.get("CHERRY_RADIO_CACHE_FILE")
    log_level = os.environ.get("CHERRY_RADIO_LOG_LEVEL")

    if api_endpoint:
        config.stations.api_endpoint = api_endpoint
    if cache_file:
        config.stations.cache_file = cache_file
    if log_level:
        config.logging.level = log_level.upper()
    return config


def load_config(path: Optional[str] = None) -> Config:
    """Load configuration from file, falling back to defaults.

    The file is never created or rewritten. Environment variables override
    TOML values:
    - CHERRY_RADIO_API_ENDPOINT
    - CHERRY_RADIO_CACHE_FILE
    - CHERRY_RADIO_LOG_LEVEL
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path(path)

    if not config_path.exists():
        logger.debug(f"No configuration at {config_path}, using defaults")
        return _apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Error loading configuration from {config_path}: {e}")
        return _apply_env_overrides(Config())

    config = Config()

    if "player" in toml_data:
        player_data = toml_data["player"]
        config.player = PlayerConfig(
            mpv_socket_dir=player_data.get("mpv_socket_dir"),
            volume=player_data.get("volume", config.player.volume),
            startup_timeout=float(
                player_data.get("startup_timeout", config.player.startup_timeout)
            ),
        )

    if "stations" in toml_data:
        stations_data = toml_data["stations"]
        config.stations = StationsConfig(
            api_endpoint=stations_data.get(
                "api_endpoint", config.stations.api_endpoint
            ),
            cache_file=stations_data.get("cache_file"),
            request_timeout=float(
                stations_data.get("request_timeout", config.stations.request_timeout)
            ),
            user_agent=stations_data.get("user_agent", config.stations.user_agent),
            default_url=stations_data.get("default_url", config.stations.default_url),
            default_name=stations_data.get(
                "default_name", config.stations.default_name
            ),
            default_tags=stations_data.get(
                "default_tags", config.stations.default_tags
            ),
        )

    if "metadata" in toml_data:
        metadata_data = toml_data["metadata"]
        config.metadata = MetadataConfig(
            enabled=metadata_data.get("enabled", config.metadata.enabled),
            poll_interval=float(
                metadata_data.get("poll_interval", config.metadata.poll_interval)
            ),
            timeout=float(metadata_data.get("timeout", config.metadata.timeout)),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
        )

    if "ui" in toml_data:
        ui_data = toml_data["ui"]
        config.ui = UIConfig(
            use_colors=ui_data.get("use_colors", config.ui.use_colors),
            refresh_rate=ui_data.get("refresh_rate", config.ui.refresh_rate),
        )

    return _apply_env_overrides(config)


def ensure_directories() -> None:
    """Ensure the data directory exists."""
    get_data_dir().mkdir(parents=True, exist_ok=True)
