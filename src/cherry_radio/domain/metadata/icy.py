"""
ICY (SHOUTcast/Icecast) inline metadata decoding.

Streaming servers that were asked for metadata (``Icy-MetaData: 1``) insert a
metadata block after every ``icy-metaint`` bytes of audio:

    [metaint audio bytes][length byte L][L * 16 metadata bytes][metaint audio bytes]...

The metadata block holds ``key='value';`` pairs, e.g.
``StreamTitle='Artist - Track';StreamUrl='';`` padded with NUL bytes.

Titles are always read over a dedicated connection (see fetch_stream_title),
never from the connection feeding the audio player, so the player's byte
stream is left untouched.
"""

from typing import Any, Mapping, Optional, Protocol

import requests
from loguru import logger
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from cherry_radio.core.exceptions import NetworkError

from .exceptions import (
    DecodeError,
    MissingMetaIntError,
    ShortReadError,
    TruncatedError,
)
from .models import MetadataFrame

STREAM_TITLE_KEY = "StreamTitle"

# Smallest block that can hold "StreamTitle='';"
MIN_BLOCK_LENGTH = 15

# Each length-byte unit is 16 bytes of metadata
BLOCK_UNIT = 16

# Largest read used while skipping audio payload
SKIP_CHUNK_SIZE = 8192


class ByteSource(Protocol):
    """Anything with a blocking read(n) returning bytes (b"" at end-of-stream)."""

    def read(self, size: int = ...) -> bytes: ...


def _read_exact(source: ByteSource, size: int) -> bytes:
    """Read up to ``size`` bytes, looping over short reads until EOF."""
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = source.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _skip_payload(source: ByteSource, meta_interval: int) -> None:
    """Discard exactly ``meta_interval`` audio bytes."""
    skipped = 0
    while skipped < meta_interval:
        chunk = source.read(min(SKIP_CHUNK_SIZE, meta_interval - skipped))
        if not chunk:
            raise ShortReadError(expected=meta_interval, received=skipped)
        skipped += len(chunk)


def _decode_text(block: bytes) -> str:
    """Decode block text; servers use UTF-8 or Latin-1 in practice."""
    try:
        return block.decode("utf-8")
    except UnicodeDecodeError:
        return block.decode("latin-1")


def parse_stream_title(block: bytes) -> str:
    """Extract the StreamTitle value from a raw metadata block.

    Args:
        block: Metadata block bytes (length byte already stripped)

    Returns:
        Title string, or "" if the block is too short or has no StreamTitle
    """
    if len(block) < MIN_BLOCK_LENGTH:
        return ""

    text = _decode_text(block).strip(" \t\r\n\x00")
    prefix = f"{STREAM_TITLE_KEY}='"

    # The key must open a key='value' pair, not sit inside another value
    start = text.find(prefix)
    while start > 0 and text[start - 1] not in "; \t\r\n":
        start = text.find(prefix, start + 1)
    if start == -1:
        return ""

    # Titles may contain ";" or "'", so the value ends at the first "';"
    value = text[start + len(prefix) :]
    end = value.find("';")
    if end != -1:
        return value[:end]
    if value.endswith("'"):
        return value[:-1]
    return ""


def decode_frame(source: ByteSource, meta_interval: int) -> MetadataFrame:
    """Read the next metadata block from a stream positioned at an audio boundary.

    Consumes exactly ``meta_interval + 1 + L * 16`` bytes from ``source``.

    Args:
        source: Byte source positioned at the start of the data segment
        meta_interval: Audio bytes preceding each metadata block (icy-metaint)

    Returns:
        MetadataFrame with the raw block and its StreamTitle

    Raises:
        ShortReadError: Stream ended before meta_interval bytes were skipped
        TruncatedError: Length byte or block could not be fully read
    """
    _skip_payload(source, meta_interval)

    length_byte = source.read(1)
    if not length_byte:
        raise TruncatedError("Stream ended before the metadata length byte")

    block_length = length_byte[0] * BLOCK_UNIT
    block = _read_exact(source, block_length)
    if len(block) != block_length:
        raise TruncatedError(
            f"Metadata block truncated: got {len(block)} of {block_length} bytes"
        )

    return MetadataFrame(raw=block, stream_title=parse_stream_title(block))


def decode_next_title(source: ByteSource, meta_interval: int) -> str:
    """Return the title carried by the next metadata block ("" if none)."""
    return decode_frame(source, meta_interval).stream_title


def read_meta_interval(headers: Mapping[str, str]) -> int:
    """Parse the icy-metaint response header.

    Raises:
        MissingMetaIntError: Header absent (server has no inline metadata)
        DecodeError: Header present but not a non-negative integer
    """
    value: Optional[str] = None
    for name, header_value in headers.items():
        if name.lower() == "icy-metaint":
            value = header_value
            break

    if value is None:
        raise MissingMetaIntError("Server did not send an icy-metaint header")

    try:
        interval = int(value.strip())
    except ValueError:
        raise DecodeError(f"Invalid icy-metaint header: {value!r}") from None

    if interval < 0:
        raise DecodeError(f"Invalid icy-metaint header: {value!r}")
    return interval


def fetch_stream_title(
    url: str,
    timeout: float = 10.0,
    http: Any = None,
) -> str:
    """Open an independent metadata connection and read the next title.

    Args:
        url: Station stream URL
        timeout: Connect/read timeout in seconds
        http: Object with a requests-compatible ``get`` (defaults to requests)

    Returns:
        Current StreamTitle, or "" when the block carries none

    Raises:
        NetworkError: Connection failed or HTTP error status
        DecodeError: Stream does not follow the ICY protocol
    """
    http = http or requests

    try:
        response = http.get(
            url,
            headers={"Icy-MetaData": "1"},
            stream=True,
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise NetworkError(f"Metadata request failed for {url}: {e}") from e

    with response:
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise NetworkError(f"Metadata request rejected for {url}: {e}") from e

        meta_interval = read_meta_interval(response.headers)

        try:
            title = decode_next_title(response.raw, meta_interval)
        except (Urllib3HTTPError, requests.RequestException, OSError) as e:
            raise NetworkError(f"Metadata read failed for {url}: {e}") from e

    logger.debug(f"StreamTitle for {url}: {title!r}")
    return title
