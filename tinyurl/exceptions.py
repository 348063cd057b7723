"""Application-specific exceptions.

Every exception carries a stable `error_code` string which is safe to log and
to hand back to HTTP clients.

Classes:
    TinyURLError:
        Base class for all application errors.

    RegistryError:
        Base class for errors raised by URL registries and key generators.
        Subclasses: ValidationError, KeyNotFoundError, UrlDisabledError,
        KeyPoolExhaustedError.

    ConfigurationError:
        Base class for configuration errors.
        Subclasses: BadConfigurationError.

Example:
    >>> from tinyurl.exceptions import KeyNotFoundError
    >>> raise KeyNotFoundError('No short URL for https://example.com')
    Traceback (most recent call last):
        ...
    tinyurl.exceptions.KeyNotFoundError: No short URL for https://example.com
"""


class TinyURLError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:tinyurl_error'


class RegistryError(TinyURLError):
    """Base exception for URL registry errors."""

    error_code = 'registry:registry_error'


class ValidationError(RegistryError):
    """Raised when an original URL is malformed (e.g. missing http(s) scheme)."""

    error_code = 'registry:validation_error'


class KeyNotFoundError(RegistryError):
    """Raised when a short/original URL has no record, or a record has no access metadata."""

    error_code = 'registry:key_not_found_error'


class UrlDisabledError(RegistryError):
    """Raised when a disabled short URL is accessed."""

    error_code = 'registry:url_disabled_error'


class KeyPoolExhaustedError(RegistryError):
    """Raised when no unique key can be supplied."""

    error_code = 'registry:key_pool_exhausted_error'


class ConfigurationError(TinyURLError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
