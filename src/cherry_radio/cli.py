"""
Cherry Radio CLI - Entry point

Starts the interactive player when run without arguments. Subcommands cover
the non-interactive station list and stream title operations.
"""

import argparse
import sys
from typing import Optional

from cherry_radio.core import config
from cherry_radio.core.console import print_error, print_result, print_table
from cherry_radio.core.exceptions import RadioError
from cherry_radio.domain.metadata.icy import fetch_stream_title
from cherry_radio.domain.session.engine import NO_TITLE
from cherry_radio.domain.stations.exceptions import (
    CacheMissingError,
    RefreshError,
    StationNotFoundError,
)
from cherry_radio.main import bootstrap, build_cache, interactive_mode


def run_refresh(config_path: Optional[str] = None) -> int:
    """Download a fresh station list.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    cfg = bootstrap(config_path)
    cache = build_cache(cfg)

    try:
        count = cache.refresh()
    except RefreshError as e:
        print_error(f"Refresh failed: {e}")
        return 1

    print_result(f"Downloaded {count} stations to {cache.path}", style="green")
    return 0


def run_search(tag: str, config_path: Optional[str] = None) -> int:
    """Resolve a tag against the station list and print the match.

    Downloads the station list first when there is none yet.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    if not tag.strip():
        print_error("Search tag must not be empty")
        return 1

    cfg = bootstrap(config_path)
    cache = build_cache(cfg)

    try:
        try:
            station = cache.resolve(tag)
        except CacheMissingError as e:
            print_result(f"{e}; downloading station list...", style="yellow")
            cache.refresh()
            station = cache.resolve(tag)
    except StationNotFoundError:
        print_error(f"No station with a tag {tag.strip()!r}")
        return 1
    except RadioError as e:
        print_error(f"Search failed: {e}")
        return 1

    print_table(
        f"First match for {tag.strip()!r}",
        ("Name", "Tags", "URL"),
        [(station.name, station.tags, station.url)],
    )
    return 0


def run_title(url: str, config_path: Optional[str] = None) -> int:
    """Print the current stream title of ``url``.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    cfg = bootstrap(config_path)

    try:
        title = fetch_stream_title(url, timeout=cfg.metadata.timeout)
    except RadioError as e:
        print_error(f"Cannot read stream title: {e}")
        return 1

    print_result(title or NO_TITLE)
    return 0


def run_config(config_path: Optional[str] = None) -> int:
    """Print the config file location and a default configuration."""
    path = config.get_config_path(config_path)
    status = "exists" if path.exists() else "not found, using defaults"
    print_result(f"# Config file: {path} ({status})", style="dim")
    print(config.create_default_config())
    return 0


def main() -> None:
    """Main entry point for the cherry-radio command."""
    parser = argparse.ArgumentParser(
        description="Cherry Radio - Tag-driven internet radio",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Configuration file (default: ./config.toml or ~/.config/cherry-radio/config.toml)",
    )

    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")

    subparsers.add_parser("refresh", help="Download a fresh station list")

    search_parser = subparsers.add_parser(
        "search", help="Show the first station whose tags match"
    )
    search_parser.add_argument("tag", nargs="+", help="Tag to search for, e.g. jazz")

    title_parser = subparsers.add_parser("title", help="Print the current song of a stream")
    title_parser.add_argument("url", help="Stream URL")

    subparsers.add_parser("config", help="Show the config location and defaults")

    args = parser.parse_args()

    if args.subcommand == "refresh":
        sys.exit(run_refresh(args.config))

    elif args.subcommand == "search":
        sys.exit(run_search(" ".join(args.tag), args.config))

    elif args.subcommand == "title":
        sys.exit(run_title(args.url, args.config))

    elif args.subcommand == "config":
        sys.exit(run_config(args.config))

    # No subcommand - start interactive mode
    sys.exit(interactive_mode(args.config))


if __name__ == "__main__":
    main()
