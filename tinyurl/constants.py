import string
from enum import StrEnum


class KeyPool:
    """Key generation defaults."""

    # 62^8 (218,340,105,584,896) possible keys
    ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
    KEY_LENGTH = 8
    POOL_SIZE = 10
    # Registry-side retries when a pooled key is already taken
    MAX_KEY_ATTEMPTS = 16


class Defaults:
    """Fallback values used when configuration or request data is missing."""

    DOMAIN = 'localhost:3000'
    USER_AGENT = 'Not provided'
    ORIGIN_IP = 'Not provided'
    TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%SZ'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'

    class Registry(StrEnum):
        DOMAIN = 'TINYURL_DOMAIN'
        KEY_POOL_SIZE = 'TINYURL_KEY_POOL_SIZE'


class Event(StrEnum):
    """Log event codes (also used as HTTP `errorCode` values)."""

    URL_SHORTENED = 'URL_SHORTENED'
    URL_ALREADY_SHORTENED = 'URL_ALREADY_SHORTENED'
    URL_ACCESSED = 'URL_ACCESSED'
    URL_ENABLED = 'URL_ENABLED'
    URL_DISABLED = 'URL_DISABLED'
    STATS_FETCHED = 'STATS_FETCHED'
    KEY_COLLISION = 'KEY_COLLISION'
    INVALID_URL = 'INVALID_URL'
    INVALID_JSON = 'INVALID_JSON'
    MISSING_FIELD = 'MISSING_FIELD'
    SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
    SHORT_URL_DISABLED = 'SHORT_URL_DISABLED'
    ROUTE_NOT_FOUND = 'ROUTE_NOT_FOUND'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
