"""
Build Tracker Module - outcome ledgers and run statistics
"""

import time
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)


class BuildTracker:
    """
    Append-only outcome ledgers.

    Succeeded and failed packages get one "[timestamp] name" line in their
    ledger file. Skipped packages are only counted and logged, so a re-run
    that skips everything leaves both files untouched.
    """

    def __init__(self, success_log, failed_log, clock=None):
        self.success_log = Path(success_log)
        self.failed_log = Path(failed_log)
        self.clock = clock or datetime.now

        for path in (self.success_log, self.failed_log):
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch(exist_ok=True)

        self.built_packages = []
        self.failed_packages = []
        self.skipped_packages = []
        self.start_time = time.time()

    def _timestamp(self):
        return self.clock().strftime("%Y-%m-%d %H:%M:%S")

    @staticmethod
    def _append(path, line):
        with open(path, 'a', encoding='utf-8') as f:
            f.write(line + "\n")

    def record_built_package(self, pkg_name: str):
        self._append(self.success_log, f"[{self._timestamp()}] {pkg_name}")
        self.built_packages.append(pkg_name)
        logger.info(f"BUILD_OUTCOME=succeeded pkg={pkg_name}")

    def record_failed_package(self, pkg_name: str, reason: str = ""):
        self._append(self.failed_log, f"[{self._timestamp()}] {pkg_name}")
        self.failed_packages.append(pkg_name)
        logger.error(f"BUILD_OUTCOME=failed pkg={pkg_name} reason={reason}")

    def record_skipped_package(self, pkg_name: str):
        self.skipped_packages.append(pkg_name)
        logger.info(f"Skipping {pkg_name}, already built and installed")

    def get_elapsed_time(self) -> float:
        return time.time() - self.start_time

    def get_summary(self) -> Dict:
        return {
            "elapsed": self.get_elapsed_time(),
            "succeeded": len(self.built_packages),
            "failed": len(self.failed_packages),
            "skipped": len(self.skipped_packages),
        }

    def log_summary(self):
        summary = self.get_summary()
        logger.info(
            f"📦 Built: {summary['succeeded']}  Failed: {summary['failed']}  "
            f"Skipped: {summary['skipped']}  Elapsed: {summary['elapsed']:.0f}s"
        )
        for pkg_name in self.failed_packages:
            logger.warning(f"   ❌ {pkg_name} (see {self.failed_log})")
