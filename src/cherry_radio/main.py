"""
Cherry Radio - Component wiring and interactive mode
"""

from functools import partial
from typing import Optional

from loguru import logger

from cherry_radio.core import config
from cherry_radio.core.output import log, setup_loguru
from cherry_radio.domain.metadata.icy import fetch_stream_title
from cherry_radio.domain.playback.player import MpvPlayer, check_mpv_available
from cherry_radio.domain.session.engine import StreamSession
from cherry_radio.domain.stations.cache import StationCache
from cherry_radio.domain.stations.directory import fetch_catalog
from cherry_radio.domain.stations.models import Station


def bootstrap(config_path: Optional[str] = None) -> config.Config:
    """Load configuration and start file logging."""
    cfg = config.load_config(config_path)
    config.ensure_directories()
    setup_loguru(cfg.log_path(), cfg.logging.level)
    return cfg


def build_cache(cfg: config.Config) -> StationCache:
    """Station snapshot backed by the configured directory endpoint."""
    fetcher = partial(
        fetch_catalog,
        cfg.stations.api_endpoint,
        timeout=cfg.stations.request_timeout,
        user_agent=cfg.stations.user_agent,
    )
    return StationCache(cfg.cache_path(), fetcher)


def default_station(cfg: config.Config) -> Station:
    """The configured startup station."""
    return Station(
        url=cfg.stations.default_url,
        name=cfg.stations.default_name,
        tags=cfg.stations.default_tags,
    )


def build_session(cfg: config.Config) -> StreamSession:
    """Wire cache, mpv playback and title polling into a session."""
    return StreamSession(
        cache=build_cache(cfg),
        player=MpvPlayer(cfg.player),
        fetch_title=partial(fetch_stream_title, timeout=cfg.metadata.timeout),
        default_station=default_station(cfg),
        poll_interval=cfg.metadata.poll_interval,
        metadata_enabled=cfg.metadata.enabled,
    )


def interactive_mode(config_path: Optional[str] = None) -> int:
    """Run the blessed UI. Returns a process exit code."""
    cfg = bootstrap(config_path)

    if not check_mpv_available():
        log("mpv was not found on PATH; install mpv to play stations", "error")
        return 1

    session = build_session(cfg)

    from cherry_radio.ui.blessed.app import run_interactive_ui

    logger.info("Starting interactive mode")
    run_interactive_ui(session, cfg.ui)
    logger.info("Interactive mode ended")
    return 0
