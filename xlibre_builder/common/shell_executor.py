"""
Shell Executor Module - Handles external command execution with logging
"""

import os
import shlex
import subprocess
import time
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_RETRY_ERRORS = [
    "500 Internal Server Error",
    "remote: Internal Server Error",
    "fatal: the remote end hung up unexpectedly",
    "Could not resolve host",
    "connection timed out",
]


class ShellExecutor:
    """Runs external tools; their output goes to the activity log at DEBUG level"""

    def __init__(self, debug_mode: bool = False):
        self.debug_mode = debug_mode

    def run_command_with_retry(self, cmd, max_retries: int = 5, initial_delay: float = 2.0,
                               retry_errors=None, **kwargs):
        """
        Run command, retrying with exponential backoff on transient remote errors

        Args:
            cmd: Command to execute
            max_retries: Maximum number of attempts
            initial_delay: Initial delay between attempts (doubles each retry)
            retry_errors: Output patterns worth retrying on
            kwargs: Same as run_command (check is handled here)

        Returns:
            Result of the last attempt
        """
        if retry_errors is None:
            retry_errors = DEFAULT_RETRY_ERRORS
        check = kwargs.pop('check', False)

        delay = initial_delay
        result = None
        for attempt in range(max_retries):
            if attempt > 0:
                logger.info(f"CMD_RETRY attempt={attempt} max={max_retries} delay={delay:.1f}s")
                time.sleep(delay)
                delay *= 2

            result = self.run_command(cmd, check=False, **kwargs)
            if result.returncode == 0:
                return result

            output = (result.stderr or "") + (result.stdout or "")
            reason = next((p for p in retry_errors if p.lower() in output.lower()), None)
            if reason is None:
                break
            logger.warning(f"CMD_RETRY_REASON attempt={attempt} reason={reason}")

        if check and result.returncode != 0:
            raise subprocess.CalledProcessError(result.returncode, cmd, result.stdout, result.stderr)
        return result

    def run_command(self, cmd, cwd=None, capture=True, check=False, shell=None,
                    log_cmd=True, timeout=None, extra_env=None):
        """
        Run a command and log its output

        A list runs directly, a string runs through the shell unless shell is
        given explicitly. Raises subprocess.TimeoutExpired when timeout elapses.
        """
        if shell is None:
            shell = isinstance(cmd, str)
        cmd_str = cmd if isinstance(cmd, str) else shlex.join(str(part) for part in cmd)
        if shell:
            args = cmd_str
        elif isinstance(cmd, str):
            args = shlex.split(cmd)
        else:
            args = [str(part) for part in cmd]

        if log_cmd or self.debug_mode:
            logger.info(f"RUNNING COMMAND: {cmd_str}")

        if cwd is None:
            cwd = Path.cwd()

        env = os.environ.copy()
        env['LC_ALL'] = 'C'
        if extra_env:
            env.update(extra_env)

        try:
            result = subprocess.run(
                args,
                cwd=str(cwd),
                shell=shell,
                capture_output=capture,
                text=True,
                check=False,
                env=env,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error(f"⚠️ Command timed out after {timeout} seconds: {cmd_str}")
            raise

        self._log_output(result)

        if result.returncode != 0 and (log_cmd or self.debug_mode):
            logger.debug(f"Command failed with exit code {result.returncode}: {cmd_str}")

        if check and result.returncode != 0:
            raise subprocess.CalledProcessError(result.returncode, cmd, result.stdout, result.stderr)
        return result

    @staticmethod
    def _log_output(result):
        if result.stdout:
            for line in result.stdout.splitlines():
                logger.debug(f"  {line}")
        if result.stderr:
            for line in result.stderr.splitlines():
                logger.debug(f"  {line}")
        logger.debug(f"EXIT CODE: {result.returncode}")
