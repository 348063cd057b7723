import functools
import logging

from tinyurl.constants import Event
from tinyurl.registry import InMemoryUrlRegistry, UrlRegistryBase
from tinyurl.types import LambdaEvent, LambdaContext, LambdaResponse
from tinyurl.utils import RandomKeyGenerator, registry_settings, initialize_logging, guarantee_500_response
from tinyurl.lambdas.api.responses import response_404
from tinyurl.lambdas.api.routes import shorten_url, redirect_url, url_stats, enable_url, disable_url


initialize_logging()
logger = logging.getLogger(__name__)


ROUTES = {
    ('POST', '/url'): shorten_url,
    ('GET', '/stats'): url_stats,
    ('POST', '/enable'): enable_url,
    ('POST', '/disable'): disable_url,
    ('GET', '/{key}'): redirect_url,
}


@functools.cache
def get_registry() -> UrlRegistryBase:
    """Build the registry once per Lambda container."""
    settings = registry_settings('api')
    logger.info('Initializing in-memory URL registry.', extra=settings)
    return InMemoryUrlRegistry(
        domain=settings['domain'],
        key_generator=RandomKeyGenerator(pool_size=settings['key_pool_size']),
    )


def dispatch(event: LambdaEvent, registry: UrlRegistryBase) -> LambdaResponse:
    """Route an API Gateway event to its route function

    Routes are matched on (httpMethod, resource). API Gateway reports the
    matched resource template, e.g. '/{key}' for 'GET /aB3dE6gH'.
    """
    method = (event.get('httpMethod') or '').upper()
    resource = event.get('resource') or event.get('path') or ''

    route = ROUTES.get((method, resource))
    if route is None:
        logger.info('No route for %s %s. Responding with 404.', method, resource, extra={'event': Event.ROUTE_NOT_FOUND})
        return response_404(message=f'no route for {method} {resource}', error_code=Event.ROUTE_NOT_FOUND)
    return route(event, registry)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests for the URL shortener

    Routes:
        POST /url      {"original_url": ...}  -> 200 short URL
        GET  /{key}                           -> 302 redirect to original URL
        GET  /stats    ?url=...               -> 200 access metadata history
        POST /enable   {"url": ...}           -> 200 short URL
        POST /disable  {"url": ...}           -> 200 short URL

    HTTP responses:
        400: Bad client request (invalid JSON, missing field, invalid or unknown URL)
        404: Short URL disabled, or unknown route
        500: Internal server error

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'httpMethod': 'POST', 'resource': '/url', 'body': '{"original_url": "https://example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
    """
    return dispatch(event, get_registry())
