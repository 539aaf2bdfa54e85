"""
Database Module
"""
from .connection import init_database, close_database, get_db, check_database_health
from .models import Base, KeyValueRecord

__all__ = [
    "init_database",
    "close_database",
    "get_db",
    "check_database_health",
    "Base",
    "KeyValueRecord",
]
