"""Station lookup exceptions for error handling."""

from cherry_radio.core.exceptions import RadioError


class ResolveError(RadioError):
    """Base exception for tag lookups."""

    pass


class CacheMissingError(ResolveError):
    """Raised when no station snapshot exists yet."""

    pass


class CorruptCacheError(CacheMissingError):
    """Raised when the snapshot exists but is not a valid station list.

    Subclasses CacheMissingError so callers recover the same way: refresh.
    """

    pass


class StationNotFoundError(ResolveError):
    """Raised when no cached station matches a tag."""

    def __init__(self, tag: str, message: str = None):
        self.tag = tag
        super().__init__(message or f"No station with a tag {tag!r}")


class RefreshError(RadioError):
    """Raised when the directory download or snapshot write fails."""

    pass
