"""
Build module for package building operations
"""

from .artifact_manager import ArtifactManager
from .build_tracker import BuildTracker
from .dependency_installer import DependencyInstaller
from .idempotency_gate import IdempotencyGate
from .local_builder import LocalBuilder
from .package_builder import PackageBuilder
from .recipe_synthesizer import RecipeSynthesizer

__all__ = [
    'ArtifactManager',
    'BuildTracker',
    'DependencyInstaller',
    'IdempotencyGate',
    'LocalBuilder',
    'PackageBuilder',
    'RecipeSynthesizer',
]
