#!/usr/bin/env python3
"""
Main Entry Point for XLibre Package Builder

Run as a non-root user with passwordless sudo for pacman, inside a clean chroot.
"""

import logging
import sys

from .common.config_loader import ConfigLoader
from .common.errors import ConfigError
from .common.logging_utils import setup_logging
from .orchestrator.build_orchestrator import BuildOrchestrator

logger = logging.getLogger(__name__)


def main():
    """Load configuration, set up logging and run the orchestrator"""
    try:
        config = ConfigLoader().load()
    except ConfigError as e:
        setup_logging()
        logger.error(f"❌ CRITICAL: {e}")
        sys.exit(1)

    config['base_dir'].mkdir(parents=True, exist_ok=True)
    setup_logging(config['log_file'], config['debug_mode'])

    try:
        builder = BuildOrchestrator(config)
        exit_code = builder.run()
    except ConfigError as e:
        logger.error(f"❌ CRITICAL: {e}")
        exit_code = 1
    except Exception:
        logger.exception("❌ Unexpected error")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
