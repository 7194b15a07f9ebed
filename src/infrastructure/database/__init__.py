"""
Database Infrastructure

Contains SQLAlchemy models and the database manager.
"""

from .models import Base
from .operations import DatabaseManager, get_db_manager, init_db, set_db_manager

__all__ = [
    "Base",
    "DatabaseManager",
    "get_db_manager",
    "init_db",
    "set_db_manager",
]
