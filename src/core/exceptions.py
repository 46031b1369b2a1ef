"""
CrowdRisk - Error Taxonomy

Errors raised by the core and the storage collaborator. The API layer maps
each class to an HTTP status code.
"""

from typing import Optional


class CrowdRiskError(Exception):
    """Base class for all application errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(CrowdRiskError):
    """Malformed, non-numeric or non-finite input rejected at the boundary."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class IncidentNotFoundError(CrowdRiskError):
    """No incident exists for the requested id."""

    status_code = 404

    def __init__(self, incident_id: str):
        super().__init__(f"Incident not found: {incident_id}")
        self.incident_id = incident_id


class StorageUnavailableError(CrowdRiskError):
    """The storage backend failed while reading or writing incidents."""

    status_code = 503

    def __init__(self, message: str, original: Optional[Exception] = None):
        super().__init__(message)
        self.original = original
