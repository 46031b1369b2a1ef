"""
CrowdRisk - Incident Risk Service

Transport-agnostic operations exposed to the API layer. Raw coordinates
are parsed here, once, before any evaluator runs; the evaluators then work
on a single incident snapshot fetched per call.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from src.core.config import Settings, settings as default_settings
from src.core.coordinates import parse_point, parse_point_mapping
from src.core.exceptions import InvalidInputError
from src.crowdsource.incident import Incident, IncidentType, Severity
from src.crowdsource.verification import parse_vote_action
from src.database.repository import IncidentRepository
from src.risk.point_risk import evaluate_point_risk
from src.risk.route_safety import evaluate_route_sampled, evaluate_route_corridor

logger = logging.getLogger(__name__)

VOTE_RECORDED = "recorded"
VOTE_ALREADY_VOTED = "alreadyVoted"


class IncidentRiskService:
    """Risk checks and community verification over stored incidents."""

    def __init__(
        self,
        repository: IncidentRepository,
        config: Optional[Settings] = None
    ):
        self.repository = repository
        self.config = config or default_settings

    # ------------------------------------------------------------------
    # Risk checks
    # ------------------------------------------------------------------

    def check_point_risk(self, lat: Any, lng: Any) -> Dict[str, Any]:
        """Classify risk within the configured radius of a point."""
        target = parse_point(lat, lng)
        incidents = self.repository.fetch_all_incidents()

        result = evaluate_point_risk(
            target, incidents, radius_km=self.config.risk_radius_km
        )
        return result.to_dict()

    def check_route_safety_a(
        self,
        start: Optional[Mapping[str, Any]],
        end: Optional[Mapping[str, Any]]
    ) -> Dict[str, Any]:
        """Classify a route by incident density around sampled points."""
        start_point = parse_point_mapping(start, "start")
        end_point = parse_point_mapping(end, "end")
        incidents = self.repository.fetch_all_incidents()

        result = evaluate_route_sampled(
            start_point,
            end_point,
            incidents,
            steps=self.config.route_sample_steps,
            radius_km=self.config.route_radius_km,
        )
        return result.to_dict()

    def check_route_safety_b(
        self,
        start: Optional[Mapping[str, Any]],
        end: Optional[Mapping[str, Any]]
    ) -> Dict[str, Any]:
        """Score a route by incidents close to the straight start-end corridor."""
        start_point = parse_point_mapping(start, "start")
        end_point = parse_point_mapping(end, "end")
        incidents = self.repository.fetch_all_incidents()

        result = evaluate_route_corridor(
            start_point,
            end_point,
            incidents,
            threshold_km=self.config.corridor_threshold_km,
            penalty_per_incident=self.config.corridor_penalty_per_incident,
        )
        return result.to_dict()

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def vote_on_incident(
        self,
        incident_id: str,
        voter_id: Any,
        action: Any
    ) -> Dict[str, Any]:
        """
        Record a confirm or flag vote.

        Returns:
            {"status": "recorded" | "alreadyVoted", "incident": {...}}
        """
        if not isinstance(voter_id, str) or not voter_id.strip():
            raise InvalidInputError("userId is required", field="userId")
        vote = parse_vote_action(action)

        recorded, incident = self.repository.append_vote_and_recompute(
            incident_id, voter_id.strip(), vote
        )
        if not recorded:
            logger.info(f"Voter {voter_id.strip()} already voted on incident {incident_id}")

        return {
            "status": VOTE_RECORDED if recorded else VOTE_ALREADY_VOTED,
            "incident": incident.to_dict(),
        }

    # ------------------------------------------------------------------
    # Incident management
    # ------------------------------------------------------------------

    def list_incidents(self) -> List[Dict[str, Any]]:
        return [incident.to_dict() for incident in self.repository.fetch_all_incidents()]

    def report_incident(
        self,
        incident_type: Any,
        lat: Any,
        lng: Any,
        severity: Any = Severity.MEDIUM.value,
        description: Optional[str] = None,
        is_simulation: bool = False
    ) -> Dict[str, Any]:
        """Validate and store a new incident report."""
        location = parse_point(lat, lng)

        try:
            kind = IncidentType(incident_type)
        except ValueError:
            allowed = ", ".join(t.value for t in IncidentType)
            raise InvalidInputError(f"type must be one of: {allowed}", field="type")

        try:
            level = Severity(severity)
        except ValueError:
            raise InvalidInputError("severity must be one of: low, medium, high", field="severity")

        incident = Incident(
            id=uuid.uuid4().hex,
            type=kind,
            severity=level,
            latitude=location.latitude,
            longitude=location.longitude,
            description=description,
            created_at=datetime.utcnow(),
            is_simulation=is_simulation,
        )
        return self.repository.create_incident(incident).to_dict()

    def remove_incident(self, incident_id: str) -> None:
        self.repository.delete_incident(incident_id)

    def clear_simulations(self) -> int:
        return self.repository.delete_simulations()
