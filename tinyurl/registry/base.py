"""Abstract base class for URL registries.

This class establishes a consistent contract for all URL registry
implementations, regardless of where records are kept.

Responsibilities:
    - Provide an interface for shortening, accessing, enabling and disabling URLs.
    - Provide an interface for reading the access history of a short URL.
    - Standardize error handling across registry implementations.

Example:
    Typical usage with a concrete implementation:

        >>> from tinyurl.models import AccessMetadata
        >>> from tinyurl.registry import InMemoryUrlRegistry

        >>> registry = InMemoryUrlRegistry(domain='localhost:3000')
        >>> short_url = registry.shorten('https://example.com/blog/article-123')
        >>> short_url
        'http://localhost:3000/aB3dE6gH'

        >>> metadata = AccessMetadata(ip='127.0.0.1', user_agent='curl/8.0', timestamp='2026-01-01T12:00:00Z')
        >>> registry.access('aB3dE6gH', metadata)
        'https://example.com/blog/article-123'

        >>> registry.stats(short_url).metadata
        (AccessMetadata(ip='127.0.0.1', user_agent='curl/8.0', timestamp='2026-01-01T12:00:00Z'),)
"""

from abc import ABC, abstractmethod

from tinyurl.models import AccessMetadata, ShortURLRecord, UrlStats


class UrlRegistryBase(ABC):
    """Interface for URL registries.

    Methods:
        shorten(original_url: str) -> str:
            Register an original URL and return its short URL.
            Raises ValidationError if the URL lacks an http(s) scheme.
            Raises KeyPoolExhaustedError if no unique key can be allocated.

        access(key: str, metadata: AccessMetadata) -> str:
            Record an access to a short URL and return its original URL.
            Raises KeyNotFoundError if the short URL doesn't exist.
            Raises UrlDisabledError if the short URL is disabled.

        stats(url: str) -> UrlStats:
            Return the access history of a short or original URL.
            Raises KeyNotFoundError if the URL is unknown or was never accessed.

        enable(url: str) -> str:
        disable(url: str) -> str:
            Toggle whether a short URL may be accessed; return the short URL.
            Raises KeyNotFoundError if the URL is unknown.

        get(url: str) -> ShortURLRecord:
            Look up a record by short URL first, then by original URL.
            Raises KeyNotFoundError if neither lookup succeeds.
    """

    @abstractmethod
    def shorten(self, original_url: str) -> str:
        raise NotImplementedError  # pragma: no cover

    @abstractmethod
    def access(self, key: str, metadata: AccessMetadata) -> str:
        raise NotImplementedError  # pragma: no cover

    @abstractmethod
    def stats(self, url: str) -> UrlStats:
        raise NotImplementedError  # pragma: no cover

    @abstractmethod
    def enable(self, url: str) -> str:
        raise NotImplementedError  # pragma: no cover

    @abstractmethod
    def disable(self, url: str) -> str:
        raise NotImplementedError  # pragma: no cover

    @abstractmethod
    def get(self, url: str) -> ShortURLRecord:
        raise NotImplementedError  # pragma: no cover
