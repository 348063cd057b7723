"""Helper utilities for AWS lambda functions.

Functions:
    header(event, name, default=None) -> str | None
        Read an HTTP header from an API Gateway event (case-insensitive)
    source_ip(event) -> str
        Extract the client's origin IP from an API Gateway event
    request_metadata(event) -> AccessMetadata
        Build the access metadata recorded for a redirect request
    key_of(short_url) -> str
        Extract the key segment of a short URL
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(func) -> Callable
        Decorator: Turn unexpected handler exceptions into a 500 response

Example:
    Typical usage inside a Lambda handler:

        >>> from tinyurl.utils.helpers import request_metadata
        >>> event = {
        ...     "headers": {"User-Agent": "curl/8.0"},
        ...     "requestContext": {"identity": {"sourceIp": "203.0.113.7"}}
        ... }
        >>> request_metadata(event)
        AccessMetadata(ip='203.0.113.7', user_agent='curl/8.0', timestamp='2026-01-01T12:00:00Z')
"""

import os
import json
import logging
import functools
from datetime import datetime, UTC
from typing import Any
from collections.abc import Callable

from tinyurl.constants import Defaults, UNKNOWN_INTERNAL_SERVER_ERROR
from tinyurl.models import AccessMetadata
from tinyurl.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def header(event: dict[str, Any], name: str, default: str | None = None) -> str | None:
    """Read an HTTP header from an API Gateway event

    Header names are matched case-insensitively, since API Gateway forwards
    them as the client sent them.
    """
    headers = event.get('headers') or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted and value:
            return value
    return default


def source_ip(event: dict[str, Any]) -> str:
    """Extract the client's origin IP from an API Gateway event

    Lookup order:
        1. requestContext.identity.sourceIp (REST API)
        2. requestContext.http.sourceIp (HTTP API)
        3. first entry of the X-Forwarded-For header
        4. "Not provided"
    """
    request_context = event.get('requestContext') or {}
    ip = (request_context.get('identity') or {}).get('sourceIp') or (request_context.get('http') or {}).get('sourceIp')
    if ip:
        return ip

    forwarded_for = header(event, 'X-Forwarded-For')
    if forwarded_for:
        return forwarded_for.split(',')[0].strip()
    return Defaults.ORIGIN_IP


def request_metadata(event: dict[str, Any]) -> AccessMetadata:
    """Build the access metadata recorded for a redirect request

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        AccessMetadata: origin IP, user agent ("Not provided" if absent) and
                        the current UTC time formatted as YYYY-MM-DDTHH:MM:SSZ
    """
    return AccessMetadata(
        ip=source_ip(event),
        user_agent=header(event, 'User-Agent', Defaults.USER_AGENT),
        timestamp=datetime.now(UTC).strftime(Defaults.TIMESTAMP_FORMAT),
    )


def key_of(short_url: str) -> str:
    """Get the key segment of a short URL

    Example:
        >>> key_of('http://localhost:3000/aB3dE6gH')
        'aB3dE6gH'
    """
    return short_url.rstrip('/').rsplit('/', 1)[-1]


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        KeyError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        KeyError: "Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'"
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise KeyError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(func: Callable) -> Callable:
    """Decorator: respond with 500 when a lambda handler raises unexpectedly

    When running locally the original exception is re-raised, so stack traces
    stay visible in `sam local` output.
    """

    @functools.wraps(func)
    def wrapper(event: dict[str, Any], context: Any) -> dict[str, Any]:
        try:
            return func(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return {
                'statusCode': 500,
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
