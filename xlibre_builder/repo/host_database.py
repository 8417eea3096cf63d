"""
Host package database - the pacman operations the builder needs
"""

import logging

logger = logging.getLogger(__name__)


class PacmanDatabase:
    """Queries and modifies the build host's pacman database"""

    def __init__(self, shell_executor, timeout=None):
        self.shell_executor = shell_executor
        self.timeout = timeout

    def is_installed(self, pkg_name: str) -> bool:
        result = self.shell_executor.run_command(["pacman", "-Q", pkg_name], log_cmd=False)
        return result.returncode == 0

    def install_from_feed(self, pkg_name: str) -> bool:
        """pacman -S --needed: an already installed package counts as success"""
        result = self.shell_executor.run_command(
            ["sudo", "pacman", "-S", "--needed", "--noconfirm", pkg_name],
            timeout=self.timeout,
        )
        return result.returncode == 0

    def install_file(self, pkg_file) -> bool:
        result = self.shell_executor.run_command(
            ["sudo", "pacman", "-U", "--noconfirm", str(pkg_file)],
            timeout=self.timeout,
        )
        return result.returncode == 0

    def remove_packages(self, pkg_names) -> bool:
        """pacman -Rdd, skipping dependency checks"""
        result = self.shell_executor.run_command(
            ["sudo", "pacman", "-Rdd", "--noconfirm", *pkg_names],
            timeout=self.timeout,
        )
        return result.returncode == 0

    def upgrade_system(self) -> bool:
        result = self.shell_executor.run_command(
            ["sudo", "pacman", "-Syu", "--noconfirm"],
            timeout=self.timeout,
        )
        return result.returncode == 0
