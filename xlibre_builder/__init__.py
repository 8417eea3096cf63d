"""
XLibre Package Builder
"""

# Common modules
from .common.config_loader import ConfigLoader
from .common.environment import EnvironmentValidator
from .common.logging_utils import setup_logging
from .common.shell_executor import ShellExecutor

# Build modules
from .build.artifact_manager import ArtifactManager
from .build.build_tracker import BuildTracker
from .build.dependency_installer import DependencyInstaller
from .build.idempotency_gate import IdempotencyGate
from .build.local_builder import LocalBuilder
from .build.package_builder import PackageBuilder
from .build.recipe_synthesizer import RecipeSynthesizer

# Orchestrator modules
from .orchestrator.build_orchestrator import BuildOrchestrator
from .orchestrator.state import RunState

# Repository modules
from .repo.database_manager import DatabaseManager
from .repo.host_database import PacmanDatabase

# SCM module
from .scm.git_client import GitClient

# Data model
from .models import BuildOutcome, PackageKind, PackageSpec, Recipe

__all__ = [
    # Common
    'ConfigLoader',
    'EnvironmentValidator',
    'setup_logging',
    'ShellExecutor',

    # Build
    'ArtifactManager',
    'BuildTracker',
    'DependencyInstaller',
    'IdempotencyGate',
    'LocalBuilder',
    'PackageBuilder',
    'RecipeSynthesizer',

    # Orchestrator
    'BuildOrchestrator',
    'RunState',

    # Repository
    'DatabaseManager',
    'PacmanDatabase',

    # SCM
    'GitClient',

    # Model
    'BuildOutcome',
    'PackageKind',
    'PackageSpec',
    'Recipe',
]
