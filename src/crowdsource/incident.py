"""
Incident reports submitted by the community
Domain model shared by the evaluators, the vote ledger and storage
"""

from datetime import datetime
from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering

from src.core.geo_utils import GeoPoint


class IncidentType(Enum):
    """Category of a reported incident."""
    FLOOD = "flood"
    EARTHQUAKE = "earthquake"
    FIRE = "fire"
    CYCLONE = "cyclone"
    LANDSLIDE = "landslide"
    ACCIDENT = "accident"
    OTHER = "other"


@total_ordering
class Severity(Enum):
    """Ordinal severity of an incident."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: "Severity") -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank


_SEVERITY_RANK = {Severity.LOW: 0, Severity.MEDIUM: 1, Severity.HIGH: 2}


class VerificationStatus(Enum):
    """Trust classification derived from community votes."""
    UNVERIFIED = "unverified"
    VERIFIED = "verified"
    SUSPICIOUS = "suspicious"


class VoteAction(Enum):
    """Vote a community member can cast on an incident."""
    CONFIRM = "confirm"
    FLAG = "flag"


@dataclass
class Incident:
    """
    Geotagged incident report with its verification aggregate.

    Voter lists keep insertion order; a voter id never appears in both.
    """
    id: str
    type: IncidentType
    latitude: float
    longitude: float
    severity: Severity = Severity.MEDIUM
    description: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    # Verification aggregate
    confirmations: int = 0
    flags: int = 0
    confirm_voters: List[str] = field(default_factory=list)
    flag_voters: List[str] = field(default_factory=list)
    verification_status: VerificationStatus = VerificationStatus.UNVERIFIED

    # Demo marker, not used by any evaluator
    is_simulation: bool = False

    @property
    def location(self) -> GeoPoint:
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)

    @property
    def is_high_severity(self) -> bool:
        return self.severity >= Severity.HIGH

    def has_voted(self, voter_id: str) -> bool:
        """Check whether a voter already confirmed or flagged this incident."""
        return voter_id in self.confirm_voters or voter_id in self.flag_voters

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "type": self.type.value,
            "severity": self.severity.value,
            "description": self.description,
            "lat": self.latitude,
            "lng": self.longitude,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "confirmations": self.confirmations,
            "flags": self.flags,
            "confirmVoters": list(self.confirm_voters),
            "flagVoters": list(self.flag_voters),
            "verificationStatus": self.verification_status.value,
            "isSimulation": self.is_simulation,
        }
