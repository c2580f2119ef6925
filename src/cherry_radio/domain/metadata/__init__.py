"""Metadata domain - ICY inline metadata decoding.

This domain handles:
- Decoding metadata blocks interleaved with the audio payload
- Parsing StreamTitle out of a block
- Independent metadata requests against a station URL
"""

from .exceptions import (
    DecodeError,
    MissingMetaIntError,
    ShortReadError,
    TruncatedError,
)
from .icy import (
    decode_frame,
    decode_next_title,
    fetch_stream_title,
    parse_stream_title,
    read_meta_interval,
)
from .models import MetadataFrame

__all__ = [
    # Models
    "MetadataFrame",
    # Decoding
    "decode_frame",
    "decode_next_title",
    "parse_stream_title",
    "read_meta_interval",
    "fetch_stream_title",
    # Errors
    "DecodeError",
    "ShortReadError",
    "TruncatedError",
    "MissingMetaIntError",
]
