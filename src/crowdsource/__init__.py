"""
CrowdRisk - Crowdsource Module
Community incident reports and vote-driven verification.
"""

from src.crowdsource.incident import (
    Incident,
    IncidentType,
    Severity,
    VerificationStatus,
    VoteAction,
)
from src.crowdsource.verification import (
    apply_vote,
    compute_verification_status,
    parse_vote_action,
)

__all__ = [
    # Incident
    "Incident",
    "IncidentType",
    "Severity",
    "VerificationStatus",
    "VoteAction",
    # Verification
    "apply_vote",
    "compute_verification_status",
    "parse_vote_action",
]
