"""
Artifact manager - handles package files and build residue
"""

import shutil
import logging
from pathlib import Path

from ..common.errors import ArtifactMissingAfterBuild, ArtifactMoveFailed
from ..models import artifact_filename

logger = logging.getLogger(__name__)


class ArtifactManager:
    """Moves finished archives into the repository directory"""

    def __init__(self, repo_dir, pkgver, pkgrel, arch, pkg_ext='.pkg.tar.zst'):
        self.repo_dir = Path(repo_dir)
        self.pkgver = pkgver
        self.pkgrel = pkgrel
        self.arch = arch
        self.pkg_ext = pkg_ext

        self.repo_dir.mkdir(parents=True, exist_ok=True)

    def expected_files(self, spec):
        return [artifact_filename(a, self.pkgver, self.pkgrel, self.arch, self.pkg_ext) for a in spec.artifacts]

    def move_built_packages(self, source_dir, spec):
        """
        Move every archive makepkg left in source_dir into the repository

        Raises:
            ArtifactMissingAfterBuild: an expected archive is not in source_dir
            ArtifactMoveFailed: an archive could not be moved
        """
        source_dir = Path(source_dir)
        missing = [name for name in self.expected_files(spec) if not (source_dir / name).is_file()]
        if missing:
            logger.error(f"ERROR: No package files found for {', '.join(missing)}")
            raise ArtifactMissingAfterBuild(spec.identifier, missing)

        logger.info(f"Moving {spec.identifier} packages to {self.repo_dir}")
        moved_files = []
        for pkg_file in sorted(source_dir.glob(f"*{self.pkg_ext}")):
            dest = self.repo_dir / pkg_file.name
            try:
                shutil.move(str(pkg_file), str(dest))
            except OSError as e:
                logger.error(f"ERROR: Failed to move {pkg_file.name} to {self.repo_dir}: {e}")
                raise ArtifactMoveFailed(spec.identifier, pkg_file, e) from e
            logger.info(f"Moved package: {pkg_file.name}")
            moved_files.append(dest)
        return moved_files

    def cleanup_failed_build(self, pkg_dir):
        """Remove src/, pkg/, archives and logs so the next run starts clean"""
        pkg_dir = Path(pkg_dir)
        if not pkg_dir.is_dir():
            return
        logger.info(f"Cleaning failed build artifacts in {pkg_dir}")
        for sub in ("src", "pkg"):
            shutil.rmtree(pkg_dir / sub, ignore_errors=True)
        for pattern in ("*.tar.*", "*.log"):
            for residue in pkg_dir.glob(pattern):
                if not (residue.is_file() or residue.is_symlink()):
                    continue
                try:
                    residue.unlink()
                except OSError as e:
                    logger.warning(f"⚠️ Could not remove {residue}: {e}")
        logger.info(f"Cleanup complete for {pkg_dir}")
