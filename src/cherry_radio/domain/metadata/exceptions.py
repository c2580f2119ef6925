"""ICY metadata exceptions for error handling."""

from cherry_radio.core.exceptions import RadioError


class DecodeError(RadioError):
    """Raised when a stream does not follow the inline metadata protocol."""

    pass


class ShortReadError(DecodeError):
    """Raised when the stream ends before a full audio interval was skipped."""

    def __init__(self, expected: int, received: int):
        self.expected = expected
        self.received = received
        super().__init__(
            f"Stream ended prematurely: skipped {received} of {expected} audio bytes"
        )


class TruncatedError(DecodeError):
    """Raised when the length byte or the metadata block is cut short."""

    pass


class MissingMetaIntError(DecodeError):
    """Raised when the server did not answer with an icy-metaint header."""

    pass
