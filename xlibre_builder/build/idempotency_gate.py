"""
Idempotency Gate - decides whether a package can be skipped this run
"""

import logging
from pathlib import Path

from ..models import artifact_filename

logger = logging.getLogger(__name__)


class IdempotencyGate:
    """A package is done when every artifact is in the repository and installed"""

    def __init__(self, host_db, repo_dir, pkgver, pkgrel, arch, pkg_ext='.pkg.tar.zst'):
        self.host_db = host_db
        self.repo_dir = Path(repo_dir)
        self.pkgver = pkgver
        self.pkgrel = pkgrel
        self.arch = arch
        self.pkg_ext = pkg_ext

    def is_done(self, spec) -> bool:
        if not self.repo_dir.is_dir():
            return False
        return all(self._artifact_done(artifact) for artifact in spec.artifacts)

    def _artifact_done(self, artifact) -> bool:
        pkg_file = self.repo_dir / artifact_filename(artifact, self.pkgver, self.pkgrel, self.arch, self.pkg_ext)
        if not pkg_file.is_file():
            logger.debug(f"GATE_MISS=1 artifact={artifact} reason=no_archive")
            return False
        if not self.host_db.is_installed(artifact):
            logger.debug(f"GATE_MISS=1 artifact={artifact} reason=not_installed")
            return False
        return True
