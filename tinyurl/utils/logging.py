"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` in the lambda handler module before any
other logging is done.

Logging format:
{
    "timestamp": "2026-01-01T12:00:00.000Z",
    "level": "INFO",
    "logger": "tinyurl.registry.memory",
    "service": "tinyurl",
    "env": "dev",
    "message": "Shortened https://example.com to http://localhost:3000/aB3dE6gH.",
    "event": "URL_SHORTENED"
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from tinyurl.constants import ENV
from tinyurl.exceptions import TinyURLError


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras

    Args:
        service (str): Value of the `service` field on every log line.
        env (str): Value of the `env` field on every log line.
    """

    STANDARD_ATTRS = frozenset(
        {
            'args',
            'asctime',
            'created',
            'exc_info',
            'exc_text',
            'filename',
            'funcName',
            'levelname',
            'levelno',
            'lineno',
            'module',
            'msecs',
            'msg',
            'name',
            'pathname',
            'process',
            'processName',
            'relativeCreated',
            'stack_info',
            'thread',
            'threadName',
            'taskName',
        }
    )

    def __init__(self, service: str = 'tinyurl', env: str = 'local'):
        super().__init__()
        self.service = service
        self.env = env

    def format(self, record: logging.LogRecord) -> str:
        # fmt: off
        timestamp = datetime.fromtimestamp(record.created, tz=UTC) \
                            .isoformat(timespec='milliseconds') \
                            .replace('+00:00', 'Z')
        # fmt: on

        log = {
            'timestamp': timestamp,
            'level': record.levelname,
            'logger': record.name,
            'service': self.service,
            'env': self.env,
            'message': record.getMessage(),
        }

        # Attach `extra` fields
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS:
                log[key] = value

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
            if isinstance(record.exc_info[1], TinyURLError):
                log['errorCode'] = record.exc_info[1].error_code

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    service = os.getenv(ENV.App.APP_NAME) or 'tinyurl'
    env = os.getenv(ENV.App.APP_ENV, 'local').lower()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                    'service': service,
                    'env': env,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
