"""
Metadata domain models.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MetadataFrame:
    """One decoded metadata block.

    Transient: built on every poll and discarded right after the title
    is applied to the session.
    """

    raw: bytes
    stream_title: str = ""
