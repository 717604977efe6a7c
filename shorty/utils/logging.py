"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` once at process start-up, before the
first Shorty instance is created. Library code only ever uses module loggers
(`logging.getLogger(__name__)`) and never configures handlers itself.

Every line written is one JSON document:
{
    "timestamp": "2026-10-19T12:00:00.000Z",
    "level": "INFO",
    "logger": "shorty.shortener",
    "message": "Purged expired records.",
    "purged": 3
}

Context goes through `extra={...}` with camelCase keys; each key becomes a
top-level field of the document.
"""

import os
import sys
import json
import logging
import logging.config
from datetime import datetime, UTC
from typing import TextIO

from shorty.constants import ENV


# Attributes every LogRecord carries; anything else was passed through `extra`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', (), None))) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    """Render LogRecords as single-line JSON, extras and tracebacks included"""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=UTC)
        log = {
            'timestamp': created.isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        # default=str: extras may hold datetimes, timedeltas, identifiers...
        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None, stream: TextIO | None = None) -> None:
    """Route all logs through JsonFormatter

    Args:
        level (str | None):
            Root log level. Defaults to the LOG_LEVEL environment variable, then 'INFO'.
        stream (TextIO | None):
            Destination stream. Defaults to stdout.
    """
    log_level = (level or os.getenv(ENV.App.LOG_LEVEL) or 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'json': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': stream or sys.stdout,
                }
            },
            'root': {'level': log_level, 'handlers': ['json']},
        }
    )
