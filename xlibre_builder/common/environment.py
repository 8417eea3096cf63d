"""
Environment validation module - pre-flight checks before any build
"""

import getpass
import shutil
import logging

from .errors import PrivilegeMissing, ToolMissing

logger = logging.getLogger(__name__)


class EnvironmentValidator:
    """Checks tools and sudo access; raises a fatal error on the first problem"""

    def __init__(self, shell_executor, required_tools):
        self.shell_executor = shell_executor
        self.required_tools = list(required_tools)

    def validate(self):
        self.check_required_tools()
        self.check_sudo_access()
        logger.info("✅ Environment validation passed")

    def check_required_tools(self):
        logger.info("Checking for required tools")
        for tool in self.required_tools:
            if shutil.which(tool) is None:
                logger.error(f"ERROR: {tool} is not installed. Please install it in the chroot.")
                raise ToolMissing(tool)
            logger.debug(f"TOOL_FOUND=1 tool={tool}")

    def check_sudo_access(self):
        logger.info("Checking for sudo access")
        result = self.shell_executor.run_command(["sudo", "-n", "true"], log_cmd=False)
        if result.returncode != 0:
            user = getpass.getuser()
            logger.error(f"ERROR: User {user} requires sudo access without password for pacman.")
            logger.error(f"Add to /etc/sudoers: {user} ALL=(ALL) NOPASSWD: /usr/bin/pacman")
            raise PrivilegeMissing(f"User {user} has no passwordless sudo")
