"""
Incident storage for CrowdRisk
Snapshot reads for the evaluators and the serialized vote ledger
"""

import logging
import threading
from typing import Dict, Optional, Tuple

from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError

from src.core.exceptions import IncidentNotFoundError, StorageUnavailableError
from src.crowdsource.incident import Incident, VoteAction
from src.crowdsource.verification import apply_vote
from .connection import DatabaseConnection
from .models import IncidentRecord

logger = logging.getLogger(__name__)


class IncidentRepository:
    """
    Reads and writes incidents through a DatabaseConnection.

    Votes are serialized per incident with an in-process lock and a single
    transaction that reads the row FOR UPDATE, so a voter can never be
    counted twice even when the same vote arrives concurrently.
    """

    def __init__(self, db: DatabaseConnection):
        self.db = db
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, incident_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(incident_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[incident_id] = lock
            return lock

    def _forget_lock(self, incident_id: str) -> None:
        with self._locks_guard:
            self._locks.pop(incident_id, None)

    def fetch_all_incidents(self) -> Tuple[Incident, ...]:
        """
        Fetch a point-in-time snapshot of every incident, newest first.

        Raises:
            StorageUnavailableError: If the database cannot be read
        """
        try:
            with self.db.get_session() as session:
                records = session.scalars(
                    select(IncidentRecord).order_by(IncidentRecord.created_at.desc())
                ).all()
                return tuple(record.to_incident() for record in records)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch incidents: {e}")
            raise StorageUnavailableError("Failed to fetch incidents", original=e)

    def fetch_incident_by_id(self, incident_id: str) -> Incident:
        """
        Fetch a single incident.

        Raises:
            IncidentNotFoundError: If no incident has this id
            StorageUnavailableError: If the database cannot be read
        """
        try:
            with self.db.get_session() as session:
                record = session.get(IncidentRecord, incident_id)
                if record is None:
                    raise IncidentNotFoundError(incident_id)
                return record.to_incident()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch incident {incident_id}: {e}")
            raise StorageUnavailableError(f"Failed to fetch incident {incident_id}", original=e)

    def create_incident(self, incident: Incident) -> Incident:
        """Persist a newly reported incident."""
        try:
            with self.db.get_session() as session:
                record = IncidentRecord.from_incident(incident)
                session.add(record)
                session.flush()
                created = record.to_incident()
        except SQLAlchemyError as e:
            logger.error(f"Failed to create incident: {e}")
            raise StorageUnavailableError("Failed to create incident", original=e)

        logger.info(
            f"Incident created: {created.id} ({created.type.value}, "
            f"{created.severity.value}) at ({created.latitude}, {created.longitude})"
        )
        return created

    def append_vote_and_recompute(
        self,
        incident_id: str,
        voter_id: str,
        action: VoteAction
    ) -> Tuple[bool, Incident]:
        """
        Atomically record a vote and recompute the verification status.

        Args:
            incident_id: Incident to vote on
            voter_id: Identifier of the voter
            action: Confirm or flag

        Returns:
            Tuple of (recorded, incident). recorded is False when the voter
            had already voted; the incident is then returned unchanged.

        Raises:
            IncidentNotFoundError: If no incident has this id
            StorageUnavailableError: If the database fails
        """
        with self._lock_for(incident_id):
            try:
                with self.db.get_session() as session:
                    record = session.scalars(
                        select(IncidentRecord)
                        .where(IncidentRecord.id == incident_id)
                        .with_for_update()
                    ).first()

                    if record is None:
                        self._forget_lock(incident_id)
                        raise IncidentNotFoundError(incident_id)

                    incident = record.to_incident()
                    recorded = apply_vote(incident, voter_id, action)

                    if recorded:
                        record.apply_ledger(incident)
            except SQLAlchemyError as e:
                logger.error(f"Failed to record vote on {incident_id}: {e}")
                raise StorageUnavailableError(
                    f"Failed to record vote on incident {incident_id}", original=e
                )

        if recorded:
            logger.info(
                f"Vote recorded: incident={incident_id} voter={voter_id} "
                f"action={action.value} status={incident.verification_status.value}"
            )
        return recorded, incident

    def delete_incident(self, incident_id: str) -> None:
        """
        Permanently delete an incident.

        Raises:
            IncidentNotFoundError: If no incident has this id
        """
        try:
            with self.db.get_session() as session:
                record = session.get(IncidentRecord, incident_id)
                if record is None:
                    raise IncidentNotFoundError(incident_id)
                session.delete(record)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete incident {incident_id}: {e}")
            raise StorageUnavailableError(f"Failed to delete incident {incident_id}", original=e)

        self._forget_lock(incident_id)
        logger.info(f"Incident deleted: {incident_id}")

    def delete_simulations(self) -> int:
        """
        Delete every incident marked as simulation data.

        Returns:
            Number of incidents deleted
        """
        try:
            with self.db.get_session() as session:
                simulated = IncidentRecord.is_simulation.is_(True)
                ids = session.scalars(select(IncidentRecord.id).where(simulated)).all()
                result = session.execute(
                    delete(IncidentRecord)
                    .where(simulated)
                    .execution_options(synchronize_session=False)
                )
                deleted = result.rowcount or 0
        except SQLAlchemyError as e:
            logger.error(f"Failed to clear simulation incidents: {e}")
            raise StorageUnavailableError("Failed to clear simulation incidents", original=e)

        for incident_id in ids:
            self._forget_lock(incident_id)

        logger.info(f"Simulation incidents cleared: {deleted}")
        return deleted

    def count(self) -> Optional[int]:
        """Number of stored incidents, or None if the database is unreachable."""
        try:
            with self.db.get_session() as session:
                return session.scalar(select(func.count()).select_from(IncidentRecord))
        except SQLAlchemyError as e:
            logger.warning(f"Incident count unavailable: {e}")
            return None
