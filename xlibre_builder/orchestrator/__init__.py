"""
Orchestrator modules package
"""

from .build_orchestrator import BuildOrchestrator
from .state import RunState

__all__ = ['BuildOrchestrator', 'RunState']
