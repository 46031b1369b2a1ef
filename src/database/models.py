"""
SQLAlchemy models for CrowdRisk
Portable column types so the same schema runs on PostgreSQL and SQLite
"""

from datetime import datetime

from sqlalchemy import (
    Column, Integer, Float, String, Text, Boolean,
    DateTime, Index, JSON, Enum as SQLEnum
)
from sqlalchemy.orm import declarative_base

from src.crowdsource.incident import (
    Incident,
    IncidentType,
    Severity,
    VerificationStatus,
)

Base = declarative_base()


class IncidentRecord(Base):
    """
    Persisted incident report.

    Voter ids are stored as JSON arrays; the repository replaces the whole
    list on every vote so change tracking picks it up.
    """
    __tablename__ = "incidents"

    id = Column(String(36), primary_key=True)

    type = Column(SQLEnum(IncidentType), nullable=False)
    severity = Column(SQLEnum(Severity), nullable=False, default=Severity.MEDIUM)
    description = Column(Text)

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    # Verification aggregate
    confirmations = Column(Integer, nullable=False, default=0)
    flags = Column(Integer, nullable=False, default=0)
    confirm_voters = Column(JSON, nullable=False, default=list)
    flag_voters = Column(JSON, nullable=False, default=list)
    verification_status = Column(
        SQLEnum(VerificationStatus),
        nullable=False,
        default=VerificationStatus.UNVERIFIED,
    )

    is_simulation = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_incident_created_at", created_at),
        Index("idx_incident_simulation", is_simulation),
    )

    def __repr__(self):
        return (
            f"<IncidentRecord({self.id}, type={self.type.value if self.type else None}, "
            f"lat={self.latitude}, lng={self.longitude})>"
        )

    @classmethod
    def from_incident(cls, incident: Incident) -> "IncidentRecord":
        """Create a record from a domain incident."""
        return cls(
            id=incident.id,
            type=incident.type,
            severity=incident.severity,
            description=incident.description,
            latitude=incident.latitude,
            longitude=incident.longitude,
            confirmations=incident.confirmations,
            flags=incident.flags,
            confirm_voters=list(incident.confirm_voters),
            flag_voters=list(incident.flag_voters),
            verification_status=incident.verification_status,
            is_simulation=incident.is_simulation,
            created_at=incident.created_at,
        )

    def to_incident(self) -> Incident:
        """Detach into a domain incident."""
        return Incident(
            id=self.id,
            type=self.type,
            severity=self.severity,
            description=self.description,
            latitude=self.latitude,
            longitude=self.longitude,
            created_at=self.created_at,
            confirmations=self.confirmations or 0,
            flags=self.flags or 0,
            confirm_voters=list(self.confirm_voters or []),
            flag_voters=list(self.flag_voters or []),
            verification_status=self.verification_status or VerificationStatus.UNVERIFIED,
            is_simulation=bool(self.is_simulation),
        )

    def apply_ledger(self, incident: Incident) -> None:
        """Copy the verification aggregate of a domain incident onto this record."""
        self.confirmations = incident.confirmations
        self.flags = incident.flags
        self.confirm_voters = list(incident.confirm_voters)
        self.flag_voters = list(incident.flag_voters)
        self.verification_status = incident.verification_status
