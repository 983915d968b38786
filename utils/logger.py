import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '{"severity": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s", "timestamp": "%(asctime)s"}'

# Third-party loggers that flood INFO with per-request lines
NOISY_LOGGERS = ('werkzeug', 'aiohttp.access', 'urllib3', 'web3')


def setup_logging(log_level: Optional[str] = None):
    """Single-line JSON-ish logs on stdout for Cloud Logging"""
    level_name = (log_level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stdout, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
