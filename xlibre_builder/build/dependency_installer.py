"""
Dependency Installer Module - installs a recipe's depends and makedepends

Dependencies produced by another package of this run come from the local
repository directory (pacman -U); everything else comes from the configured
pacman feeds (pacman -S --needed). Installation stops at the first failure and
does not roll back what was already installed.
"""

import subprocess
import logging
from pathlib import Path
from typing import Dict, List

from ..common.errors import DepInstallFailed, MissingLocalArtifact
from ..models import artifact_filename

logger = logging.getLogger(__name__)


def build_local_providers(package_set) -> Dict[str, List[str]]:
    """Map each package identifier of the run to the artifacts that satisfy it"""
    return {spec.identifier: list(spec.artifacts) for spec in package_set}


class DependencyInstaller:
    """Installs recipe dependencies from the local repository or the pacman feeds"""

    def __init__(self, host_db, repo_dir, local_providers, pkgver, pkgrel, arch, pkg_ext='.pkg.tar.zst'):
        self.host_db = host_db
        self.repo_dir = Path(repo_dir)
        self.local_providers = dict(local_providers)
        self.pkgver = pkgver
        self.pkgrel = pkgrel
        self.arch = arch
        self.pkg_ext = pkg_ext

    def local_artifact_path(self, artifact: str) -> Path:
        return self.repo_dir / artifact_filename(artifact, self.pkgver, self.pkgrel, self.arch, self.pkg_ext)

    def install_deps(self, pkg_name: str, recipe, exclude=()):
        """
        Install every dependency declared by recipe

        Args:
            pkg_name: Package being built (for logs and errors)
            recipe: Recipe whose depends + makedepends are installed
            exclude: Names never installed (the package's own artifacts)

        Raises:
            MissingLocalArtifact: a locally produced dependency is not in the repository
            DepInstallFailed: pacman could not install a dependency
        """
        deps = [dep for dep in recipe.all_dependencies() if dep not in set(exclude)]
        if not deps:
            logger.info(f"No dependencies found for {pkg_name}")
            return

        logger.info(f"DEP_INSTALL_START=1 pkg={pkg_name} count={len(deps)}")
        logger.info(f"Installing dependencies: {' '.join(deps)}")

        for dep in deps:
            if dep in self.local_providers:
                self._install_local(pkg_name, dep)
            else:
                self._install_from_feed(pkg_name, dep)

        logger.info(f"✅ Successfully installed dependencies for {pkg_name}")

    def _install_local(self, pkg_name, dep):
        for artifact in self.local_providers[dep]:
            pkg_file = self.local_artifact_path(artifact)
            if not pkg_file.is_file():
                logger.error(f"ERROR: {artifact} package not found in {self.repo_dir}")
                raise MissingLocalArtifact(pkg_name, dep, pkg_file)

            logger.info(f"Installing {artifact} from local repository")
            if not self._run(self.host_db.install_file, pkg_file):
                logger.error(f"ERROR: Failed to install {artifact} from {pkg_file}")
                raise DepInstallFailed(pkg_name, dep, f"pacman -U failed for {pkg_file.name}")

    def _install_from_feed(self, pkg_name, dep):
        if not self._run(self.host_db.install_from_feed, dep):
            logger.error(f"ERROR: Failed to install dependency {dep} for {pkg_name}")
            raise DepInstallFailed(pkg_name, dep)
        logger.debug(f"DEP_INSTALL_OK=1 dep={dep}")

    @staticmethod
    def _run(operation, target) -> bool:
        try:
            return operation(target)
        except subprocess.TimeoutExpired:
            return False
