"""Base exceptions shared by every domain."""


class RadioError(Exception):
    """Base exception for recoverable Cherry Radio failures."""

    pass


class NetworkError(RadioError):
    """Raised when a directory fetch, metadata request or stream open fails."""

    pass
