"""Value objects shared by the registry and the HTTP layer.

All models are frozen dataclasses. Updating a record (e.g. toggling
`is_enabled`) means building a new instance with `dataclasses.replace()`.

Example:
    >>> record = ShortURLRecord(
    ...     short_url='http://localhost:3000/aB3dE6gH',
    ...     original_url='https://example.com/article/123',
    ... )
    >>> record.is_enabled
    True
"""

from dataclasses import dataclass, asdict
from typing import Any


# fmt: off
@dataclass(frozen=True)
class ShortURLRecord:
    short_url: str            # Absolute short URL, e.g. http://<domain>/<key>
    original_url: str         # Long URL the short URL redirects to
    is_enabled: bool = True   # Disabled short URLs refuse access

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AccessMetadata:
    ip: str                   # Origin IP/host of the client
    user_agent: str           # Client User-Agent header
    timestamp: str            # UTC access time, e.g. 2026-01-01T12:00:00Z

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
# fmt: on


@dataclass(frozen=True)
class UrlStats:
    """Snapshot of the access history of one short URL.

    Attributes:
        short_url (str):
            The short URL the statistics belong to.
        metadata (tuple[AccessMetadata, ...]):
            Every recorded access, oldest first.
    """

    short_url: str
    metadata: tuple[AccessMetadata, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            'short_url': self.short_url,
            'metadata': [entry.to_dict() for entry in self.metadata],
        }
