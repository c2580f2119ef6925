"""Stations domain - directory download and local tag lookup.

Provides the station record, the remote catalog client and the on-disk
snapshot used to turn a free-text tag into a playable stream URL.
"""

from .cache import StationCache
from .directory import CATALOG_FILTER, fetch_catalog
from .exceptions import (
    CacheMissingError,
    CorruptCacheError,
    RefreshError,
    ResolveError,
    StationNotFoundError,
)
from .models import Station, normalize

__all__ = [
    # Models
    "Station",
    "normalize",
    # Directory
    "CATALOG_FILTER",
    "fetch_catalog",
    # Snapshot
    "StationCache",
    # Errors
    "ResolveError",
    "CacheMissingError",
    "CorruptCacheError",
    "StationNotFoundError",
    "RefreshError",
]
