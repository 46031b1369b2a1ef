"""
Pytest configuration and fixtures
"""
import pytest
import sys
import uuid
from datetime import datetime, timedelta
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.core.geo_utils import GeoPoint
from src.crowdsource.incident import Incident, IncidentType, Severity
from src.database.connection import DatabaseConnection
from src.database.repository import IncidentRepository
from src.api.service import IncidentRiskService


@pytest.fixture
def bhimavaram():
    """Query point in Bhimavaram, Andhra Pradesh."""
    return GeoPoint(latitude=16.5449, longitude=81.5212)


@pytest.fixture
def make_incident():
    """Factory for domain incidents."""
    counter = {"n": 0}

    def _make(
        lat,
        lng,
        severity="low",
        incident_type="flood",
        incident_id=None,
        **kwargs
    ):
        counter["n"] += 1
        return Incident(
            id=incident_id or f"inc-{counter['n']}",
            type=IncidentType(incident_type),
            severity=Severity(severity),
            latitude=lat,
            longitude=lng,
            created_at=datetime(2026, 1, 1) + timedelta(minutes=counter["n"]),
            **kwargs
        )

    return _make


@pytest.fixture
def db():
    """In-memory SQLite database with tables created."""
    connection = DatabaseConnection(database_url="sqlite://")
    connection.create_tables()
    yield connection
    connection.close()


@pytest.fixture
def repository(db):
    return IncidentRepository(db)


@pytest.fixture
def service(repository):
    return IncidentRiskService(repository)


@pytest.fixture
def stored_incident(repository):
    """A single persisted low-severity flood incident."""
    return repository.create_incident(
        Incident(
            id=uuid.uuid4().hex,
            type=IncidentType.FLOOD,
            severity=Severity.LOW,
            latitude=16.5500,
            longitude=81.5300,
            description="Street flooded near the canal",
        )
    )
