"""
Logging utilities for the package builder
"""

import logging
from pathlib import Path

LOG_FORMAT = '[%(asctime)s] %(levelname)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logging(log_file=None, debug_mode=False):
    """Setup logging: console at INFO (DEBUG in debug mode), activity log gets everything"""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Drop handlers from a previous call so re-runs in one process don't duplicate lines
    for handler in list(root.handlers):
        if getattr(handler, '_xlibre_builder', False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if debug_mode else logging.INFO)
    console.setFormatter(formatter)
    console._xlibre_builder = True
    root.addHandler(console)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        file_handler._xlibre_builder = True
        root.addHandler(file_handler)

    return logging.getLogger(__name__)


def log_banner(logger, title):
    """Section header in the activity log"""
    logger.info("=" * 60)
    logger.info(title)
    logger.info("=" * 60)
