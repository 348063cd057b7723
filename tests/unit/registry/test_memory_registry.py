"""Unit tests for InMemoryUrlRegistry in memory.py.

Test coverage includes:

1. shorten()
   - Returns http://<domain>/<key> short URLs for http(s) URLs.
   - Rejects URLs without an http:// or https:// scheme.
   - Re-shortening an original URL returns the existing short URL.
   - Retries key allocation when a pooled key is already issued.

2. access()
   - Returns the original URL and appends metadata in order.
   - Raises KeyNotFoundError for unknown keys, UrlDisabledError for disabled URLs.

3. stats()
   - Accepts either the short or the original URL.
   - Raises KeyNotFoundError for never-accessed and unknown URLs.
   - Returns an immutable snapshot.

4. enable() / disable()
   - Toggle access, are idempotent, and keep both indices consistent.

5. Construction and type checking

6. Concurrency
   - Concurrent shorten/access/toggle calls keep the registry consistent.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from tinyurl.exceptions import (
    BadConfigurationError,
    KeyNotFoundError,
    KeyPoolExhaustedError,
    UrlDisabledError,
    ValidationError,
)
from tinyurl.models import AccessMetadata, ShortURLRecord
from tinyurl.registry import InMemoryUrlRegistry, UrlRegistryBase
from tinyurl.utils import key_of


def assert_indices_consistent(registry: InMemoryUrlRegistry) -> None:
    assert len(registry._by_short_url) == len(registry._by_original_url)
    for short_url, record in registry._by_short_url.items():
        assert record.short_url == short_url
        assert registry._by_original_url[record.original_url] is record


# -------------------------------
# 1. shorten()
# -------------------------------


@pytest.mark.parametrize('original_url', ['https://example.com', 'http://example.com/blog/article-123?ref=home'])
def test_shorten_returns_short_url(registry, domain, original_url):
    short_url = registry.shorten(original_url)

    assert short_url.startswith(f'http://{domain}/')
    assert len(key_of(short_url)) == 8
    assert registry.get(short_url) == ShortURLRecord(short_url=short_url, original_url=original_url, is_enabled=True)
    assert len(registry) == 1
    assert_indices_consistent(registry)


@pytest.mark.parametrize('original_url', ['example.com', 'ftp://example.com', 'www.example.com/http://', '', 'httpx://example.com'])
def test_shorten_rejects_invalid_url(registry, original_url):
    with pytest.raises(ValidationError):
        registry.shorten(original_url)
    assert len(registry) == 0


def test_shorten_does_not_create_metadata(registry):
    short_url = registry.shorten('https://example.com')
    assert short_url not in registry._metadata


def test_shorten_distinct_urls_get_distinct_short_urls(registry):
    short_urls = {registry.shorten(f'https://example.com/{i}') for i in range(200)}
    assert len(short_urls) == 200
    assert_indices_consistent(registry)


def test_shorten_same_url_twice_returns_existing_short_url(registry):
    first = registry.shorten('https://example.com')
    second = registry.shorten('https://example.com')

    assert first == second
    assert len(registry) == 1
    assert_indices_consistent(registry)


def test_shorten_retries_on_key_collision(domain, scripted_key_generator):
    generator = scripted_key_generator(['aaaaaaaa', 'aaaaaaaa', 'bbbbbbbb'])
    registry = InMemoryUrlRegistry(domain=domain, key_generator=generator)

    first = registry.shorten('https://example.com/1')
    second = registry.shorten('https://example.com/2')

    assert first == f'http://{domain}/aaaaaaaa'
    assert second == f'http://{domain}/bbbbbbbb'
    assert generator.calls == 3
    assert registry.get(first).original_url == 'https://example.com/1'
    assert_indices_consistent(registry)


def test_shorten_gives_up_after_max_key_attempts(domain, scripted_key_generator):
    generator = scripted_key_generator(['aaaaaaaa'] * 10)
    registry = InMemoryUrlRegistry(domain=domain, key_generator=generator, max_key_attempts=3)
    registry.shorten('https://example.com/1')

    with pytest.raises(KeyPoolExhaustedError):
        registry.shorten('https://example.com/2')

    assert generator.calls == 4
    assert len(registry) == 1
    assert 'https://example.com/2' not in registry


# -------------------------------
# 2. access()
# -------------------------------


def test_access_round_trip(registry, metadata):
    short_url = registry.shorten('https://example.com')

    assert registry.access(key_of(short_url), metadata) == 'https://example.com'
    assert metadata in registry.stats(short_url).metadata
    assert metadata in registry.stats('https://example.com').metadata


def test_access_appends_metadata_in_order(registry):
    short_url = registry.shorten('https://example.com')
    entries = [AccessMetadata(ip=f'10.0.0.{i}', user_agent='pytest', timestamp=f'2026-01-01T12:00:0{i}Z') for i in range(5)]

    for entry in entries:
        registry.access(key_of(short_url), entry)

    assert registry.stats(short_url).metadata == tuple(entries)


def test_access_unknown_key_raises_key_not_found(registry, metadata):
    with pytest.raises(KeyNotFoundError, match='does not exist'):
        registry.access('missing1', metadata)


def test_access_disabled_url_raises_url_disabled(registry, metadata):
    short_url = registry.shorten('https://example.com')
    registry.disable(short_url)

    with pytest.raises(UrlDisabledError, match='disabled'):
        registry.access(key_of(short_url), metadata)

    # Refused accesses are not recorded
    with pytest.raises(KeyNotFoundError):
        registry.stats(short_url)


# -------------------------------
# 3. stats()
# -------------------------------


def test_stats_never_accessed_raises_key_not_found(registry):
    short_url = registry.shorten('https://example.com')

    with pytest.raises(KeyNotFoundError, match='no metadata'):
        registry.stats(short_url)


def test_stats_unknown_url_raises_key_not_found(registry):
    with pytest.raises(KeyNotFoundError):
        registry.stats('https://unknown.example.com')


def test_stats_returns_short_url_for_original_url(registry, metadata):
    short_url = registry.shorten('https://example.com')
    registry.access(key_of(short_url), metadata)

    assert registry.stats('https://example.com').short_url == short_url


def test_stats_returns_snapshot(registry, metadata):
    short_url = registry.shorten('https://example.com')
    registry.access(key_of(short_url), metadata)

    snapshot = registry.stats(short_url)
    registry.access(key_of(short_url), metadata)

    assert len(snapshot.metadata) == 1
    assert len(registry.stats(short_url).metadata) == 2


# -------------------------------
# 4. enable() / disable()
# -------------------------------


def test_disable_then_enable_restores_access(registry, metadata):
    short_url = registry.shorten('https://example.com')

    assert registry.disable(short_url) == short_url
    with pytest.raises(UrlDisabledError):
        registry.access(key_of(short_url), metadata)

    assert registry.enable(short_url) == short_url
    assert registry.access(key_of(short_url), metadata) == 'https://example.com'


@pytest.mark.parametrize('by_original_url', [False, True])
def test_toggle_keeps_indices_consistent(registry, by_original_url):
    short_url = registry.shorten('https://example.com')
    url = 'https://example.com' if by_original_url else short_url

    registry.disable(url)
    assert registry._by_short_url[short_url].is_enabled is False
    assert registry._by_original_url['https://example.com'].is_enabled is False
    assert_indices_consistent(registry)

    registry.enable(url)
    assert registry._by_short_url[short_url].is_enabled is True
    assert registry._by_original_url['https://example.com'].is_enabled is True
    assert_indices_consistent(registry)


def test_enable_is_idempotent(registry):
    short_url = registry.shorten('https://example.com')
    registry.disable(short_url)

    registry.enable(short_url)
    record = registry.get(short_url)
    registry.enable(short_url)

    assert registry.get(short_url) is record
    assert_indices_consistent(registry)


def test_toggle_replaces_record(registry):
    short_url = registry.shorten('https://example.com')
    before = registry.get(short_url)

    registry.disable(short_url)

    assert before.is_enabled is True
    assert registry.get(short_url) is not before


@pytest.mark.parametrize('operation', ['enable', 'disable', 'get'])
def test_toggle_unknown_url_raises_key_not_found(registry, operation):
    with pytest.raises(KeyNotFoundError):
        getattr(registry, operation)('https://unknown.example.com')


# -------------------------------
# 5. Construction and type checking
# -------------------------------


def test_registry_implements_base_interface(registry):
    assert isinstance(registry, UrlRegistryBase)


@pytest.mark.parametrize('domain', ['', '   ', '/'])
def test_empty_domain_raises_bad_configuration(domain):
    with pytest.raises(BadConfigurationError):
        InMemoryUrlRegistry(domain=domain)


def test_invalid_max_key_attempts_raises_bad_configuration():
    with pytest.raises(BadConfigurationError):
        InMemoryUrlRegistry(domain='sho.rt', max_key_attempts=0)


def test_domain_trailing_slash_is_stripped():
    registry = InMemoryUrlRegistry(domain='sho.rt/')
    assert registry.shorten('https://example.com').startswith('http://sho.rt/')


def test_public_methods_are_type_checked(registry):
    with pytest.raises(BeartypeCallHintParamViolation):
        registry.shorten(123)
    with pytest.raises(BeartypeCallHintParamViolation):
        registry.access('abc', {'ip': '127.0.0.1'})


# -------------------------------
# 6. Concurrency
# -------------------------------


def test_concurrent_operations_keep_registry_consistent(registry, metadata):
    original_urls = [f'https://example.com/{i}' for i in range(100)]

    with ThreadPoolExecutor(max_workers=8) as executor:
        short_urls = list(executor.map(registry.shorten, original_urls))
    assert len(set(short_urls)) == 100

    def work(short_url: str) -> None:
        for _ in range(10):
            registry.access(key_of(short_url), metadata)
        registry.disable(short_url)
        registry.enable(short_url)

    with ThreadPoolExecutor(max_workers=8) as executor:
        list(executor.map(work, short_urls))

    assert_indices_consistent(registry)
    for short_url in short_urls:
        assert len(registry.stats(short_url).metadata) == 10
        assert registry.get(short_url).is_enabled is True
