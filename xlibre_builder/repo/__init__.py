"""
Repository management modules package
"""

from .database_manager import DatabaseManager
from .host_database import PacmanDatabase

__all__ = [
    'DatabaseManager',
    'PacmanDatabase',
]
