"""
Build Orchestrator Module - runs the whole package set and indexes the repository

EXECUTION PHASES:
PHASE 1: Pre-flight (tools, sudo, pacman -Syu)
PHASE 2: Package building, tier by tier (server, drivers, meta-package)
PHASE 3: Repository database (repo-add over every archive)

RETURNS: Exit code (0 = run completed, even with failed drivers; 1 = fatal error)
"""

import subprocess
import logging
from itertools import groupby

from ..build.artifact_manager import ArtifactManager
from ..build.build_tracker import BuildTracker
from ..build.dependency_installer import DependencyInstaller, build_local_providers
from ..build.idempotency_gate import IdempotencyGate
from ..build.local_builder import LocalBuilder
from ..build.package_builder import PackageBuilder
from ..build.recipe_synthesizer import RecipeSynthesizer
from ..common.environment import EnvironmentValidator
from ..common.errors import ConfigError, FatalError, FoundationalBuildFailed, HostUpdateFailed
from ..common.logging_utils import log_banner
from ..common.shell_executor import ShellExecutor
from ..models import BuildOutcome, PackageKind
from ..packages import get_package_set
from ..repo.database_manager import DatabaseManager
from ..repo.host_database import PacmanDatabase
from ..scm.git_client import GitClient
from .state import RunState

logger = logging.getLogger(__name__)


class BuildOrchestrator:
    """Main orchestrator that coordinates between modules for package building"""

    def __init__(self, config, package_set=None, shell_executor=None, tracker=None):
        self.config = config
        if package_set is None:
            package_set = get_package_set(config.get('exclude_packages'))
        self.package_set = list(package_set)
        self._validate_package_set()

        self.shell_executor = shell_executor or ShellExecutor(config.get('debug_mode', False))
        self.tracker = tracker or BuildTracker(config['success_log'], config['failed_log'])
        self.state = None

        self._init_modules()

    def _validate_package_set(self):
        identifiers = [spec.identifier for spec in self.package_set]
        duplicates = sorted({name for name in identifiers if identifiers.count(name) > 1})
        if duplicates:
            raise ConfigError(f"Duplicate package identifiers: {', '.join(duplicates)}")

        foundational = [s for s in self.package_set if s.kind is PackageKind.FOUNDATIONAL]
        if len(foundational) != 1:
            raise ConfigError(f"Expected exactly one foundational package, found {len(foundational)}")

        metas = [s for s in self.package_set if s.kind is PackageKind.META]
        if len(metas) > 1:
            raise ConfigError(f"Expected at most one meta-package, found {len(metas)}")

    def _init_modules(self):
        config = self.config
        version = (config['pkgver'], config['pkgrel'], config['arch'], config['pkg_ext'])

        self.host_db = PacmanDatabase(self.shell_executor, timeout=config.get('pacman_timeout'))
        self.environment = EnvironmentValidator(self.shell_executor, config['required_tools'])
        self.gate = IdempotencyGate(self.host_db, config['repo_dir'], *version)
        self.artifact_manager = ArtifactManager(config['repo_dir'], *version)
        self.dependency_installer = DependencyInstaller(
            self.host_db,
            config['repo_dir'],
            build_local_providers(self.package_set),
            *version,
        )
        self.package_builder = PackageBuilder(
            config,
            git_client=GitClient(self.shell_executor, timeout=config.get('git_timeout')),
            synthesizer=RecipeSynthesizer(arch=config['arch'], maintainer=config.get('maintainer', '')),
            dependency_installer=self.dependency_installer,
            local_builder=LocalBuilder(
                self.shell_executor,
                flags=config.get('makepkg_flags'),
                timeouts=config.get('makepkg_timeout'),
            ),
            artifact_manager=self.artifact_manager,
            host_db=self.host_db,
            tracker=self.tracker,
        )
        self.database_manager = DatabaseManager(config, self.shell_executor)

    def tiers(self):
        """Package set grouped by tier, lowest first; order inside a tier is kept"""
        ordered = sorted(self.package_set, key=lambda spec: spec.tier)
        return [(tier, list(specs)) for tier, specs in groupby(ordered, key=lambda spec: spec.tier)]

    def run(self) -> int:
        log_banner(logger, "🚀 XLIBRE PACKAGE BUILDER")
        logger.info(f"Base directory: {self.config['base_dir']}")
        logger.info(f"Repository directory: {self.config['repo_dir']}")
        logger.info(f"Version: {self.config['pkgver']}-{self.config['pkgrel']}")
        logger.info(f"Packages: {len(self.package_set)}")

        try:
            log_banner(logger, "PHASE 1: PRE-FLIGHT")
            self.environment.validate()
            self._update_host()

            log_banner(logger, "PHASE 2: PACKAGE BUILDING")
            self.state = RunState([s.identifier for s in self.package_set], self.config.get('state_file'))
            finished = []
            for tier, specs in self.tiers():
                if tier == PackageKind.META.tier and not self.state.all_terminal(finished):
                    raise RuntimeError(f"Meta tier reached with unfinished packages: {self.state.pending()}")
                logger.info(f"TIER_START=1 tier={tier} packages={len(specs)}")
                for spec in specs:
                    self.process(spec)
                    finished.append(spec.identifier)

            log_banner(logger, "PHASE 3: REPOSITORY DATABASE")
            self.database_manager.generate_database()
        except FatalError as e:
            logger.error(f"❌ FATAL: {e}")
            if self.state is not None and self.state.pending():
                logger.error(f"Not processed: {', '.join(self.state.pending())}")
            self.tracker.log_summary()
            return 1

        self.tracker.log_summary()
        self._log_usage_hint()
        return 0

    def process(self, spec) -> BuildOutcome:
        """Gate, then build; records the terminal state of spec"""
        logger.info(f"Checking if {spec.identifier} is already built and installed")
        if self.gate.is_done(spec):
            self.tracker.record_skipped_package(spec.identifier)
            outcome = BuildOutcome.SKIPPED
        else:
            try:
                outcome = self.package_builder.build(spec)
            except FoundationalBuildFailed:
                self.state.set(spec.identifier, BuildOutcome.FAILED)
                raise
        self.state.set(spec.identifier, outcome)
        return outcome

    def _update_host(self):
        logger.info("Updating pacman package database")
        try:
            updated = self.host_db.upgrade_system()
        except subprocess.TimeoutExpired:
            updated = False
        if not updated:
            logger.error("ERROR: Failed to update pacman database. Check the activity log")
            raise HostUpdateFailed("pacman -Syu failed")

    def _log_usage_hint(self):
        repo_dir = self.config['repo_dir']
        repo_name = self.config['repo_db_name']
        logger.info(f"Build and installation process complete! Repository created at {repo_dir}")
        logger.info("To use the repository outside the chroot, add to /etc/pacman.conf:")
        logger.info(f"[{repo_name}]")
        logger.info(f"Server = file://{repo_dir}")
        meta = next((s.identifier for s in self.package_set if s.is_meta), None)
        if meta:
            logger.info(f"Then run: sudo pacman -Syu {meta}")
