"""
Git Client Module - Handles Git operations
"""

import subprocess
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class GitClient:
    """Clones and refreshes upstream source trees"""

    def __init__(self, shell_executor, timeout=None, max_retries: int = 3):
        self.shell_executor = shell_executor
        self.timeout = timeout
        self.max_retries = max_retries

    def clone_repository(self, repo_url: str, target_dir) -> bool:
        """Clone a Git repository"""
        target_dir = Path(target_dir)
        target_dir.parent.mkdir(parents=True, exist_ok=True)
        try:
            result = self.shell_executor.run_command_with_retry(
                ["git", "clone", repo_url, str(target_dir)],
                max_retries=self.max_retries,
                cwd=target_dir.parent,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return False

        if result.returncode == 0:
            logger.info(f"✅ Successfully cloned {repo_url}")
            return True
        logger.error(f"❌ Failed to clone {repo_url}: {(result.stderr or '').strip()[:500]}")
        return False

    def pull_latest(self, repo_dir) -> bool:
        """Pull latest changes from remote repository"""
        try:
            result = self.shell_executor.run_command_with_retry(
                ["git", "-C", str(repo_dir), "pull"],
                max_retries=self.max_retries,
                cwd=repo_dir,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return False

        if result.returncode == 0:
            logger.info(f"✅ Successfully updated {repo_dir}")
            return True
        logger.error(f"❌ Failed to update {repo_dir}: {(result.stderr or '').strip()[:500]}")
        return False

    def clone_or_update(self, repo_url: str, target_dir) -> bool:
        """Fresh clone when target_dir is absent, in-place pull otherwise"""
        target_dir = Path(target_dir)
        logger.info(f"Cloning or updating repository {repo_url}")
        if not target_dir.is_dir():
            return self.clone_repository(repo_url, target_dir)
        logger.info(f"Repository {target_dir.name} already exists, updating")
        return self.pull_latest(target_dir)
