"""
Package Builder Module - builds, installs and archives one package

Steps for a package (each one can end the package with a failure):
1. Clone or update the upstream source
2. Remove conflicting host packages
3. Write the synthesized PKGBUILD
4. Install dependencies
5. makepkg -si
6. Move the produced archives into the repository directory
"""

import subprocess
import logging
from pathlib import Path

from ..common.errors import BuildError, FoundationalBuildFailed, RecipeWriteFailed, SourceFetchFailed
from ..models import BuildOutcome

logger = logging.getLogger(__name__)


class PackageBuilder:
    """Build-and-install driver for a single PackageSpec"""

    def __init__(self, config, git_client, synthesizer, dependency_installer,
                 local_builder, artifact_manager, host_db, tracker):
        self.base_dir = Path(config['base_dir'])
        self.pkgver = config['pkgver']
        self.pkgrel = config['pkgrel']
        self.conflicting_packages = config.get('conflicting_packages', {})
        self.git_client = git_client
        self.synthesizer = synthesizer
        self.dependency_installer = dependency_installer
        self.local_builder = local_builder
        self.artifact_manager = artifact_manager
        self.host_db = host_db
        self.tracker = tracker

    def package_dir(self, spec) -> Path:
        return self.base_dir / spec.identifier

    def build(self, spec) -> BuildOutcome:
        """
        Run every build step for spec and record exactly one ledger entry

        Returns:
            SUCCEEDED or FAILED

        Raises:
            FoundationalBuildFailed: spec is the foundational package and any step failed
        """
        logger.info(f"Starting build process for {spec.identifier}")
        pkg_dir = self.package_dir(spec)

        try:
            self._acquire_source(spec, pkg_dir)
            self._remove_conflicts(spec)
            recipe = self._write_recipe(spec, pkg_dir)
            if not spec.is_meta:
                # makepkg -si resolves the meta-package's dependencies itself
                self.dependency_installer.install_deps(spec.identifier, recipe, exclude=spec.artifacts)
            self.local_builder.run_makepkg(pkg_dir, spec.identifier)
            self.artifact_manager.move_built_packages(pkg_dir, spec)
        except BuildError as e:
            logger.error(f"ERROR: {spec.identifier}: {e}. Check the activity log")
            self.tracker.record_failed_package(spec.identifier, type(e).__name__)
            self.artifact_manager.cleanup_failed_build(pkg_dir)
            if spec.is_foundational:
                raise FoundationalBuildFailed(spec.identifier, e) from e
            return BuildOutcome.FAILED

        logger.info(f"✅ Successfully moved {spec.identifier} packages")
        self.tracker.record_built_package(spec.identifier)
        return BuildOutcome.SUCCEEDED

    def _acquire_source(self, spec, pkg_dir):
        if not spec.source_url:
            return
        source_dir = pkg_dir / spec.repo_dir
        try:
            fetched = self.git_client.clone_or_update(f"{spec.source_url}.git", source_dir)
        except OSError as e:
            raise SourceFetchFailed(spec.identifier, f"Cannot prepare {source_dir}: {e}") from e
        if not fetched:
            raise SourceFetchFailed(spec.identifier, f"Failed to clone or update {spec.source_url}")

    def _remove_conflicts(self, spec):
        # pacman -R aborts the whole transaction when one target is missing
        conflicts = [
            name for name in self.conflicting_packages.get(spec.identifier, [])
            if self.host_db.is_installed(name)
        ]
        if not conflicts:
            logger.info(f"No conflicting packages installed for {spec.identifier}")
            return
        logger.info(f"Removing {' and '.join(conflicts)} to avoid conflicts")
        try:
            removed = self.host_db.remove_packages(conflicts)
        except subprocess.TimeoutExpired:
            removed = False
        if not removed:
            logger.warning(f"⚠️ Could not remove {' and '.join(conflicts)}, makepkg will likely fail")

    def _write_recipe(self, spec, pkg_dir):
        logger.info(f"Creating PKGBUILD for {spec.identifier} in {pkg_dir}")
        recipe = self.synthesizer.synthesize(spec, self.pkgver, self.pkgrel)
        try:
            pkg_dir.mkdir(parents=True, exist_ok=True)
            (pkg_dir / "PKGBUILD").write_text(recipe.render(), encoding='utf-8')
        except OSError as e:
            raise RecipeWriteFailed(spec.identifier, f"Cannot write PKGBUILD in {pkg_dir}: {e}") from e
        return recipe
