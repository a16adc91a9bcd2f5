from typing import Optional


class CensusError(Exception):
    """Base class for every recoverable census failure."""


class ValidationError(CensusError, ValueError):
    """Bad or missing form input. Raised before any side effect."""


class NotFoundError(CensusError, KeyError):
    """No record with the requested id."""

    def __init__(self, patient_id: int):
        super().__init__(patient_id)
        self.patient_id = patient_id

    def __str__(self) -> str:
        return f"No patient record with id {self.patient_id}"


class EmptyDatasetError(CensusError):
    """Operation needs at least one record."""


class FetchFailure(CensusError):
    """Reference dataset could not be retrieved or parsed."""

    def __init__(self, reason: str, source: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.source = source
