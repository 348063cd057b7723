"""In-memory URL registry

This module provides an in-process implementation of UrlRegistryBase. It is the
single source of truth mapping original URLs to short URLs and back, and keeps
an append-only access log per short URL.

Responsibilities:
    - Allocate globally unique keys (pool keys are re-checked against issued keys);
    - Keep the short URL and original URL indices pointing at the same record;
    - Record access metadata on every successful redirect lookup;
    - Serialize every read and write behind a single re-entrant lock.

Classes:
    InMemoryUrlRegistry:
        Registry storing ShortURLRecord and AccessMetadata in Python dicts.

Example:
    >>> from tinyurl.registry import InMemoryUrlRegistry
    >>> registry = InMemoryUrlRegistry(domain='localhost:3000')
    >>> short_url = registry.shorten('https://example.com/page')
    >>> registry.disable(short_url)
    'http://localhost:3000/aB3dE6gH'
    >>> registry.get('https://example.com/page').is_enabled
    False
"""

import logging
import threading
from dataclasses import replace

from beartype import beartype

from tinyurl.constants import Event, KeyPool
from tinyurl.exceptions import (
    BadConfigurationError,
    KeyNotFoundError,
    KeyPoolExhaustedError,
    UrlDisabledError,
    ValidationError,
)
from tinyurl.models import AccessMetadata, ShortURLRecord, UrlStats
from tinyurl.registry.base import UrlRegistryBase
from tinyurl.utils.keygen import RandomKeyGenerator


logger = logging.getLogger(__name__)


class InMemoryUrlRegistry(UrlRegistryBase):
    """Thread-safe, in-memory URL registry

    State:
        _by_short_url (dict[str, ShortURLRecord]):
            short URL -> record.
        _by_original_url (dict[str, ShortURLRecord]):
            original URL -> record (the very same object as in `_by_short_url`).
        _metadata (dict[str, list[AccessMetadata]]):
            short URL -> access log, oldest first. A short URL only appears
            here after its first access.

    Args:
        domain (str):
            Host (and optional port) used to build short URLs: http://<domain>/<key>.
        key_generator (RandomKeyGenerator, optional):
            Source of candidate keys. A default generator is built if omitted.
        max_key_attempts (int, optional):
            How many pooled keys to try before giving up on a collision streak.

    Raises:
        BadConfigurationError: If domain is empty or max_key_attempts < 1.
    """

    @beartype
    def __init__(
        self,
        domain: str,
        key_generator: RandomKeyGenerator | None = None,
        max_key_attempts: int = KeyPool.MAX_KEY_ATTEMPTS,
    ):
        domain = domain.strip().rstrip('/')
        if not domain:
            raise BadConfigurationError('Registry domain must be a non-empty string.')
        if max_key_attempts < 1:
            raise BadConfigurationError(f'max_key_attempts must be positive (given value: {max_key_attempts}).')

        self.domain = domain
        self.key_generator = key_generator if key_generator is not None else RandomKeyGenerator()
        self.max_key_attempts = max_key_attempts

        self._lock = threading.RLock()
        self._by_short_url: dict[str, ShortURLRecord] = {}
        self._by_original_url: dict[str, ShortURLRecord] = {}
        self._metadata: dict[str, list[AccessMetadata]] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_short_url)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._by_short_url or url in self._by_original_url

    def short_url_for(self, key: str) -> str:
        return f'http://{self.domain}/{key}'

    @beartype
    def shorten(self, original_url: str) -> str:
        if not original_url.startswith(('http://', 'https://')):
            raise ValidationError(
                f'The provided original URL is invalid, please provide a full and valid URL. Provided URL: {original_url}'
            )

        with self._lock:
            # Re-registering keeps the existing record so both indices stay in sync
            existing = self._by_original_url.get(original_url)
            if existing is not None:
                logger.info(
                    'Original URL already shortened.',
                    extra={'short_url': existing.short_url, 'event': Event.URL_ALREADY_SHORTENED},
                )
                return existing.short_url

            short_url = self._allocate_short_url()
            record = ShortURLRecord(short_url=short_url, original_url=original_url, is_enabled=True)
            self._by_short_url[short_url] = record
            self._by_original_url[original_url] = record

        logger.info('Shortened %s to %s.', original_url, short_url, extra={'event': Event.URL_SHORTENED})
        return short_url

    @beartype
    def access(self, key: str, metadata: AccessMetadata) -> str:
        short_url = self.short_url_for(key)

        with self._lock:
            record = self._by_short_url.get(short_url)
            if record is None:
                raise KeyNotFoundError(f'The provided shortened URL does not exist: {short_url}')
            if not record.is_enabled:
                raise UrlDisabledError(f'The provided shortened URL has been disabled: {short_url}')

            self._metadata.setdefault(short_url, []).append(metadata)

        logger.debug('Recorded access to %s.', short_url, extra={'ip': metadata.ip, 'event': Event.URL_ACCESSED})
        return record.original_url

    @beartype
    def stats(self, url: str) -> UrlStats:
        with self._lock:
            record = self._resolve(url)
            history = self._metadata.get(record.short_url)
            if history is None:
                raise KeyNotFoundError(f'There is no metadata associated with the provided URL: {url}')
            return UrlStats(short_url=record.short_url, metadata=tuple(history))

    @beartype
    def enable(self, url: str) -> str:
        record = self._set_enabled(url, True)
        logger.info('Enabled %s.', record.short_url, extra={'event': Event.URL_ENABLED})
        return record.short_url

    @beartype
    def disable(self, url: str) -> str:
        record = self._set_enabled(url, False)
        logger.info('Disabled %s.', record.short_url, extra={'event': Event.URL_DISABLED})
        return record.short_url

    @beartype
    def get(self, url: str) -> ShortURLRecord:
        with self._lock:
            return self._resolve(url)

    def _allocate_short_url(self) -> str:
        # Pool keys are only unique within the pool, so check them against issued ones
        for attempt in range(1, self.max_key_attempts + 1):
            short_url = self.short_url_for(self.key_generator.get_key())
            if short_url not in self._by_short_url:
                return short_url
            logger.warning(
                'Generated key collides with an issued short URL. Retrying.',
                extra={'short_url': short_url, 'attempt': attempt, 'event': Event.KEY_COLLISION},
            )
        raise KeyPoolExhaustedError(f'Could not allocate a unique key after {self.max_key_attempts} attempts.')

    def _set_enabled(self, url: str, is_enabled: bool) -> ShortURLRecord:
        with self._lock:
            record = self._resolve(url)
            if record.is_enabled == is_enabled:
                return record

            # Replace (never mutate) the record in both indices under the same lock
            updated = replace(record, is_enabled=is_enabled)
            self._by_short_url[updated.short_url] = updated
            self._by_original_url[updated.original_url] = updated
            return updated

    def _resolve(self, url: str) -> ShortURLRecord:
        record = self._by_short_url.get(url)
        if record is None:
            record = self._by_original_url.get(url)
        if record is None:
            raise KeyNotFoundError(f'There is no shortened URL associated with the provided URL: {url}')
        return record
