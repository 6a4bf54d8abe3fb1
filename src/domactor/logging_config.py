import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from domactor.config import CONFIG


def setup_logging(stream=None, log_level=None, force_setup=False):
    """Setup logging configuration for domactor.

    Args:
        stream: Output stream for logs (default: sys.stdout).
        log_level: Override log level (default: uses CONFIG.LOGGING_LEVEL)
        force_setup: Force reconfiguration even if handlers already exist
    """
    log_type = (log_level or CONFIG.LOGGING_LEVEL).lower()

    # Check if handlers are already set up
    if logging.getLogger().hasHandlers() and not force_setup:
        return logging.getLogger('domactor')

    root = logging.getLogger()
    root.handlers = []

    class DomActorFormatter(logging.Formatter):
        def __init__(self, fmt, log_level):
            super().__init__(fmt)
            self.log_level = log_level

        def format(self, record):
            # Only clean up names in INFO mode, keep everything in DEBUG mode
            if self.log_level > logging.DEBUG and isinstance(record.name, str) and record.name.startswith('domactor.'):
                record.name = record.name.split('.')[-1]
            return super().format(record)

    if log_type == 'debug':
        level = logging.DEBUG
    elif log_type == 'warning':
        level = logging.WARNING
    else:
        level = logging.INFO

    console = logging.StreamHandler(stream or sys.stdout)
    console.setLevel(level)
    console.setFormatter(DomActorFormatter('%(levelname)-8s [%(name)s] %(message)s', level))

    root.addHandler(console)
    root.setLevel(level)

    domactor_logger = logging.getLogger('domactor')
    domactor_logger.propagate = False
    domactor_logger.handlers = [console]
    domactor_logger.setLevel(level)

    bubus_logger = logging.getLogger('bubus')
    bubus_logger.propagate = False
    bubus_logger.handlers = [console]
    bubus_logger.setLevel(max(level, logging.INFO))

    cdp_level = getattr(logging, CONFIG.CDP_LOGGING_LEVEL.upper(), logging.WARNING)
    for logger_name in ('websockets.client', 'cdp_use', 'cdp_use.client'):
        cdp_logger = logging.getLogger(logger_name)
        cdp_logger.setLevel(cdp_level)
        cdp_logger.handlers = [console]
        cdp_logger.propagate = False

    # Silence third-party loggers
    for logger_name in ('httpx', 'httpcore', 'asyncio', 'websockets'):
        third_party = logging.getLogger(logger_name)
        third_party.setLevel(logging.ERROR)
        third_party.propagate = False

    return domactor_logger
