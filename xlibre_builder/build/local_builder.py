"""
Local Builder Module - runs makepkg for a synthesized PKGBUILD
"""

import subprocess
import logging

from ..common.errors import NativeBuildFailed

logger = logging.getLogger(__name__)

TAIL_LINES = 50


class LocalBuilder:
    """Builds and installs a package with makepkg"""

    def __init__(self, shell_executor, flags=None, timeouts=None):
        self.shell_executor = shell_executor
        self.flags = list(flags or ["-si", "--noconfirm"])
        self.timeouts = dict(timeouts or {})

    def timeout_for(self, pkg_name):
        return self.timeouts.get(pkg_name, self.timeouts.get("default"))

    def run_makepkg(self, pkg_dir, pkg_name):
        """
        Build and install the package in pkg_dir

        Raises:
            NativeBuildFailed: makepkg exited non-zero or timed out
        """
        cmd = ["makepkg", *self.flags]
        timeout = self.timeout_for(pkg_name)
        logger.info(f"🔨 Building and installing {pkg_name} package")

        try:
            result = self.shell_executor.run_command(cmd, cwd=pkg_dir, timeout=timeout)
        except subprocess.TimeoutExpired:
            raise NativeBuildFailed(pkg_name, f"makepkg timed out after {timeout} seconds")

        if result.returncode != 0:
            logger.error(f"ERROR: Failed to build or install {pkg_name} (exit code {result.returncode})")
            self._log_tail(result)
            raise NativeBuildFailed(pkg_name, f"makepkg exited with {result.returncode}")

        logger.info(f"Successfully built and installed {pkg_name} package")
        return result

    @staticmethod
    def _log_tail(result):
        # Full output is already in the activity log; repeat the end on the console
        for stream_name, text in (("stdout", result.stdout), ("stderr", result.stderr)):
            if not text:
                continue
            lines = [line for line in text.splitlines() if line.strip()][-TAIL_LINES:]
            logger.error(f"Last {len(lines)} lines of {stream_name}:")
            for line in lines:
                logger.error(f"  {line}")
