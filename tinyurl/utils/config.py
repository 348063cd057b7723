"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to
access configuration data stored in **AWS AppConfig**. Each environment
(`APP_ENV`) has a dedicated AppConfig *Environment* within the shared
AppConfig *Application* identified by `APP_NAME`. Configuration data is
stored as a JSON document under a configuration profile (typically
`backend-config`) and deployed to the corresponding environment.

The configuration JSON follows this structure:

    {
        "build": 7,
        "active_backend": "memory",
        "configs": {
            "api": {
                "memory": {
                    "domain": "sho.rt",
                    "key_pool_size": 10
                }
            }
        }
    }

When the AppConfig identifiers are not set (e.g. plain local runs and unit
tests), registry settings fall back to the `TINYURL_DOMAIN` and
`TINYURL_KEY_POOL_SIZE` environment variables.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    local_agent_url() -> str
        Return the validated `APPCONFIG_AGENT_URL`, raising BadConfigurationError
        for a bad scheme, host or port.

    _sam_load_local_appconfig(func) -> Callable[[str], dict]:
        Load AppConfig from a local AppConfig agent when running under SAM.
        Decorates `load_config()`.

    load_config(lambda_name: str) -> dict
        Load configuration for a given Lambda from AWS AppConfig and
        return it as a Python dictionary.

    registry_settings(lambda_name: str) -> dict
        Return validated `domain` and `key_pool_size` for the URL registry.

Example:
    Typical usage inside a Lambda handler:

        >>> from tinyurl.utils.config import registry_settings
        >>> registry_settings('api')
        {'domain': 'localhost:3000', 'key_pool_size': 10}
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from collections.abc import Callable
from typing import Any

import boto3

from tinyurl.constants import ENV, Defaults, KeyPool
from tinyurl.exceptions import BadConfigurationError
from tinyurl.utils.helpers import require_environment
from tinyurl.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'"""
    return os.environ.get(ENV.App.APP_NAME)


def appconfig_enabled() -> bool:
    """Return True if every AppConfig identifier (or a local agent) is configured."""
    if running_locally() and os.getenv(ENV.AppConfig.AGENT_URL):
        return True
    return all(os.getenv(name) for name in (ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID))


LOCAL_AGENT_HOSTS = frozenset({'localhost', '127.0.0.1', 'host.docker.internal'})
LOCAL_AGENT_PORT = 2772


def local_agent_url() -> str:
    """Return the validated local AppConfig agent URL, or '' when unset

    Only plain http(s) URLs pointing at the local machine (or the Docker host)
    on the agent's port are accepted.

    Raises:
        BadConfigurationError: If `APPCONFIG_AGENT_URL` has a bad scheme, host or port.

    Example:
        >>> os.environ['APPCONFIG_AGENT_URL'] = 'http://host.docker.internal:2772'
        >>> local_agent_url()
        'http://host.docker.internal:2772'
    """
    url = os.getenv(ENV.AppConfig.AGENT_URL, '').rstrip('/')
    if not url:
        return ''

    components = urllib.parse.urlparse(url)
    try:
        port = components.port
    except ValueError as error:
        raise BadConfigurationError(f'Bad AppConfig agent port in {url!r}.') from error

    if components.scheme not in {'http', 'https'}:
        raise BadConfigurationError(f'Bad AppConfig agent scheme in {url!r} (expected http or https).')
    if components.hostname not in LOCAL_AGENT_HOSTS:
        raise BadConfigurationError(f'Bad AppConfig agent host in {url!r} (expected one of {sorted(LOCAL_AGENT_HOSTS)}).')
    if port not in {LOCAL_AGENT_PORT, None}:
        raise BadConfigurationError(f'Bad AppConfig agent port in {url!r} (expected {LOCAL_AGENT_PORT}).')
    return url


def _sam_load_local_appconfig(func: Callable[[str], dict]) -> Callable[[str], dict]:
    """Decorator: load AppConfig from a local AppConfig agent when running under SAM

    When running locally with `APPCONFIG_AGENT_URL` set, the document is read from
    <agent>/applications/<APP_NAME>/environments/<APP_ENV>/configurations/<profile>
    (profile from `APPCONFIG_PROFILE_NAME`, "backend-config" by default).
    Otherwise the wrapped function pulls from AWS AppConfig via boto3.
    """

    @functools.wraps(func)
    def wrapper(lambda_name: str, *args, **kwargs) -> dict:
        if not running_locally():
            return func(lambda_name, *args, **kwargs)
        agent_url = local_agent_url()
        if not agent_url:
            return func(lambda_name, *args, **kwargs)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Loading AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        backend = document['active_backend']
        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return {backend: document['configs'][lambda_name][backend]}

    return wrapper


@_sam_load_local_appconfig
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> dict:
    """Load configuration for a given Lambda from AWS AppConfig

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'api').

    Environment variables required:
        APPCONFIG_APP_ID       – AppConfig Application ID
        APPCONFIG_ENV_ID       – AppConfig Environment ID
        APPCONFIG_PROFILE_ID   – AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda (e.g., "api").

    Returns:
        dict: The lambda's config section as a Python dictionary.

    Example:
        >>> app_config = load_config('api')
        >>> app_config['memory']['domain']
        'sho.rt'
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    config = json.loads(content.decode('utf-8'))

    backend = config['active_backend']
    data = {backend: config['configs'][lambda_name][backend]}
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': config['build']})
    return data


def registry_settings(lambda_name: str) -> dict[str, Any]:
    """Return validated URL registry settings

    Settings come from AppConfig when it is configured, otherwise from the
    environment. Only the first backend section of the AppConfig payload is read.

    Args:
        lambda_name (str):
            Name of the Lambda whose AppConfig section should be read.

    Returns:
        dict: {'domain': str, 'key_pool_size': int}

    Raises:
        BadConfigurationError: If the domain is empty or the pool size is not a positive integer.
    """
    if appconfig_enabled():
        section = next(iter(load_config(lambda_name).values()))
        domain = section.get('domain', Defaults.DOMAIN)
        pool_size = section.get('key_pool_size', KeyPool.POOL_SIZE)
    else:
        domain = os.getenv(ENV.Registry.DOMAIN, Defaults.DOMAIN)
        pool_size = os.getenv(ENV.Registry.KEY_POOL_SIZE, KeyPool.POOL_SIZE)

    try:
        pool_size = int(pool_size)
    except (TypeError, ValueError) as error:
        raise BadConfigurationError(f'Key pool size must be an integer (given value: {pool_size!r}).') from error
    if pool_size < 1:
        raise BadConfigurationError(f'Key pool size must be a positive integer (given value: {pool_size}).')
    if not isinstance(domain, str) or not domain.strip():
        raise BadConfigurationError(f'Registry domain must be a non-empty string (given value: {domain!r}).')

    return {'domain': domain.strip(), 'key_pool_size': pool_size}
