"""
Station domain models.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

# Fields every cached station must carry
REQUIRED_FIELDS = ("url", "name", "tags")


def normalize(text: str) -> str:
    """Trim surrounding whitespace and lower-case for tag comparison."""
    return text.strip().lower()


@dataclass(frozen=True)
class Station:
    """A streaming radio station from the directory.

    Identity is the URL. Directory fields other than url/name/tags are kept
    in ``extra`` so a cached entry round-trips unchanged.
    """

    url: str
    name: str
    tags: str = ""
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def __hash__(self) -> int:
        return hash(self.url)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Station):
            return NotImplemented
        return self.url == other.url

    def matches(self, tag: str) -> bool:
        """Substring match of a normalized tag against this station's tags."""
        return normalize(tag) in normalize(self.tags)

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the directory's JSON shape."""
        data = dict(self.extra)
        data.update({"url": self.url, "name": self.name, "tags": self.tags})
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Optional["Station"]:
        """Build a Station from a directory entry.

        Returns:
            Station, or None if url/name/tags are missing or not strings
        """
        if not all(isinstance(data.get(key), str) for key in REQUIRED_FIELDS):
            return None
        extra = {k: v for k, v in data.items() if k not in REQUIRED_FIELDS}
        return cls(url=data["url"], name=data["name"], tags=data["tags"], extra=extra)
