"""
Community vote ledger for incident reports
Derives a trust classification from confirm/flag votes
"""

import logging
from typing import Any, Union

from src.core.constants import VERIFIED_MIN_CONFIRMATIONS, SUSPICIOUS_MIN_FLAGS
from src.core.exceptions import InvalidInputError
from src.crowdsource.incident import Incident, VerificationStatus, VoteAction

logger = logging.getLogger(__name__)


def compute_verification_status(confirmations: int, flags: int) -> VerificationStatus:
    """
    Classify an incident from its vote counters.

    Only a unanimous direction counts: once both counters are nonzero the
    status is Unverified whatever their magnitude.
    """
    if confirmations >= VERIFIED_MIN_CONFIRMATIONS and flags == 0:
        return VerificationStatus.VERIFIED
    if flags >= SUSPICIOUS_MIN_FLAGS and confirmations == 0:
        return VerificationStatus.SUSPICIOUS
    return VerificationStatus.UNVERIFIED


def parse_vote_action(action: Union[str, VoteAction, Any]) -> VoteAction:
    """
    Parse a raw vote action.

    Raises:
        InvalidInputError: If the action is not "confirm" or "flag"
    """
    if isinstance(action, VoteAction):
        return action
    try:
        return VoteAction(action)
    except ValueError:
        raise InvalidInputError(
            f"vote must be one of: confirm, flag (got {action!r})", field="vote"
        )


def apply_vote(incident: Incident, voter_id: str, action: VoteAction) -> bool:
    """
    Record a vote on an incident in place.

    A voter may vote once per incident, in one direction, ever. Callers
    sharing the incident across threads must serialize calls per incident.

    Args:
        incident: Incident to update
        voter_id: Identifier of the voter
        action: Confirm or flag

    Returns:
        True if the vote was recorded, False if the voter had already voted
    """
    if not voter_id:
        raise InvalidInputError("voter id is required", field="userId")

    if incident.has_voted(voter_id):
        logger.debug(f"Duplicate vote ignored: incident={incident.id} voter={voter_id}")
        return False

    if action == VoteAction.CONFIRM:
        incident.confirm_voters.append(voter_id)
        incident.confirmations += 1
    else:
        incident.flag_voters.append(voter_id)
        incident.flags += 1

    previous = incident.verification_status
    incident.verification_status = compute_verification_status(
        incident.confirmations, incident.flags
    )

    if incident.verification_status != previous:
        logger.info(
            f"Incident {incident.id} verification: "
            f"{previous.value} -> {incident.verification_status.value}"
        )

    return True
