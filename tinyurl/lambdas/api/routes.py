"""Route functions for the URL shortener API.

Each route receives the API Gateway event and the registry to operate on, and
returns an API Gateway (Lambda proxy) response. Registry errors are mapped to
HTTP responses here:

    ValidationError   -> 400
    KeyNotFoundError  -> 400
    UrlDisabledError  -> 404
"""

import json
import logging

from tinyurl.constants import Event
from tinyurl.exceptions import KeyNotFoundError, UrlDisabledError, ValidationError
from tinyurl.registry import UrlRegistryBase
from tinyurl.types import LambdaEvent, LambdaResponse
from tinyurl.utils.helpers import key_of, request_metadata
from tinyurl.lambdas.api.responses import response_200, response_302, response_400, response_404


logger = logging.getLogger(__name__)


def _body_field(event: LambdaEvent, field: str) -> tuple[str | None, LambdaResponse | None]:
    """Return (value, None) for a string field of the JSON body, or (None, error response)."""
    try:
        body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': Event.INVALID_JSON})
        return None, response_400(message='invalid JSON body', error_code=Event.INVALID_JSON)

    value = body.get(field) if isinstance(body, dict) else None
    if not value or not isinstance(value, str):
        logger.info('Missing "%s" in JSON body. Responding with 400.', field, extra={'event': Event.MISSING_FIELD})
        return None, response_400(message=f"missing '{field}' in JSON body", error_code=Event.MISSING_FIELD)
    return value, None


def shorten_url(event: LambdaEvent, registry: UrlRegistryBase) -> LambdaResponse:
    """POST /url {"original_url": ...} -> 200 {"message", "short_url", "key"}"""
    original_url, error = _body_field(event, 'original_url')
    if error:
        return error
    logger.info('Will shorten URL: %s', original_url)

    try:
        short_url = registry.shorten(original_url)
    except ValidationError as e:
        logger.info('Invalid original URL. Responding with 400.', extra={'original_url': original_url, 'event': Event.INVALID_URL})
        return response_400(message=str(e), error_code=Event.INVALID_URL)

    return response_200(
        {
            'message': f'Successfully shortened {original_url} to {short_url}',
            'short_url': short_url,
            'key': key_of(short_url),
        }
    )


def redirect_url(event: LambdaEvent, registry: UrlRegistryBase) -> LambdaResponse:
    """GET /{key} -> 302 Location: <original_url>"""
    key = (event.get('pathParameters') or {}).get('key')
    if not key:
        logger.info('Missing "key" in path. Responding with 400.', extra={'event': Event.MISSING_FIELD})
        return response_400(message="missing 'key' in path", error_code=Event.MISSING_FIELD)

    try:
        original_url = registry.access(key, request_metadata(event))
    except KeyNotFoundError as e:
        logger.info('Short URL not found. Responding with 400.', extra={'key': key, 'event': Event.SHORT_URL_NOT_FOUND})
        return response_400(message=str(e), error_code=Event.SHORT_URL_NOT_FOUND)
    except UrlDisabledError as e:
        logger.info('Short URL is disabled. Responding with 404.', extra={'key': key, 'event': Event.SHORT_URL_DISABLED})
        return response_404(message=str(e), error_code=Event.SHORT_URL_DISABLED)

    logger.info('User will be redirected to: %s', original_url, extra={'key': key, 'event': Event.URL_ACCESSED})
    return response_302(location=original_url)


def url_stats(event: LambdaEvent, registry: UrlRegistryBase) -> LambdaResponse:
    """GET /stats?url=... -> 200 {"short_url", "metadata": [...]}"""
    url = (event.get('queryStringParameters') or {}).get('url')
    if not url:
        logger.info('Missing "url" query parameter. Responding with 400.', extra={'event': Event.MISSING_FIELD})
        return response_400(message="missing 'url' query parameter", error_code=Event.MISSING_FIELD)
    logger.info('Will fetch stats from URL: %s', url)

    try:
        stats = registry.stats(url)
    except KeyNotFoundError as e:
        logger.info('No statistics for URL. Responding with 400.', extra={'url': url, 'event': Event.SHORT_URL_NOT_FOUND})
        return response_400(message=str(e), error_code=Event.SHORT_URL_NOT_FOUND)

    logger.info('Successfully fetched statistics from URL: %s', url, extra={'event': Event.STATS_FETCHED})
    return response_200(stats.to_dict())


def _toggle_url(event: LambdaEvent, registry: UrlRegistryBase, *, enable: bool) -> LambdaResponse:
    url, error = _body_field(event, 'url')
    if error:
        return error
    action = 'enable' if enable else 'disable'
    logger.info('Will %s URL: %s', action, url)

    try:
        short_url = registry.enable(url) if enable else registry.disable(url)
    except KeyNotFoundError as e:
        logger.info('Cannot %s unknown URL. Responding with 400.', action, extra={'url': url, 'event': Event.SHORT_URL_NOT_FOUND})
        return response_400(message=str(e), error_code=Event.SHORT_URL_NOT_FOUND)

    return response_200(
        {
            'message': f'Successfully {action}d URL: {url}',
            'short_url': short_url,
        }
    )


def enable_url(event: LambdaEvent, registry: UrlRegistryBase) -> LambdaResponse:
    """POST /enable {"url": ...} -> 200 {"message", "short_url"}"""
    return _toggle_url(event, registry, enable=True)


def disable_url(event: LambdaEvent, registry: UrlRegistryBase) -> LambdaResponse:
    """POST /disable {"url": ...} -> 200 {"message", "short_url"}"""
    return _toggle_url(event, registry, enable=False)
