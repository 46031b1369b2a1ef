"""
Database module for CrowdRisk
SQLAlchemy persistence for incident reports and their vote ledger
"""

from .connection import DatabaseConnection, get_db, init_db
from .models import Base, IncidentRecord
from .repository import IncidentRepository

__all__ = [
    "DatabaseConnection",
    "get_db",
    "init_db",
    "Base",
    "IncidentRecord",
    "IncidentRepository",
]
