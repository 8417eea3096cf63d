"""
Database manager for repository database operations
"""

import logging
from pathlib import Path

from ..common.errors import CatalogFailed

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Indexes the local repository directory with repo-add"""

    def __init__(self, config, shell_executor):
        self.shell_executor = shell_executor
        self.repo_name = config['repo_db_name']
        self.repo_dir = Path(config['repo_dir'])
        self.pkg_ext = config['pkg_ext']

    def generate_database(self):
        """
        Rebuild the repository database from every archive in the repository directory

        Returns:
            List of archive paths that were indexed

        Raises:
            CatalogFailed: no archives to index, or repo-add failed
        """
        logger.info(f"Creating repository database in {self.repo_dir}")

        packages = sorted(self.repo_dir.glob(f"*{self.pkg_ext}")) if self.repo_dir.is_dir() else []
        if not packages:
            logger.error(f"ERROR: No package files found in {self.repo_dir}")
            raise CatalogFailed(f"No package files in {self.repo_dir}")

        db_file = f"{self.repo_name}.db.tar.gz"

        # Clean old database files
        for name in (f"{self.repo_name}.db", db_file, f"{self.repo_name}.db.tar.gz.old",
                     f"{self.repo_name}.files", f"{self.repo_name}.files.tar.gz",
                     f"{self.repo_name}.files.tar.gz.old"):
            stale = self.repo_dir / name
            if stale.exists() or stale.is_symlink():
                stale.unlink()

        result = self.shell_executor.run_command(
            ["repo-add", db_file, *[p.name for p in packages]],
            cwd=self.repo_dir,
        )
        if result.returncode != 0:
            logger.error(f"ERROR: Failed to create repository database: {result.stderr}")
            raise CatalogFailed(f"repo-add exited with {result.returncode}")

        logger.info(f"✅ Successfully created repository database ({len(packages)} packages)")
        return packages
