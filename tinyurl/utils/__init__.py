from tinyurl.utils.config import app_env, app_name, load_config, registry_settings
from tinyurl.utils.helpers import header, source_ip, request_metadata, key_of, require_environment, guarantee_500_response
from tinyurl.utils.keygen import RandomKeyGenerator
from tinyurl.utils.logging import initialize_logging


__all__ = [
    'RandomKeyGenerator',
    'app_env',
    'app_name',
    'load_config',
    'registry_settings',
    'header',
    'source_ip',
    'request_metadata',
    'key_of',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
