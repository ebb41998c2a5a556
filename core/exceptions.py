class HRServiceError(Exception):
    """Base class for errors raised by the HR service layer."""


class NotFoundError(HRServiceError):
    """A referenced employee, department or record does not exist."""


class ValidationError(HRServiceError):
    """Input rejected at the write boundary. Nothing has been persisted."""


class ExternalServiceError(HRServiceError):
    """The narrative generation service failed or returned nothing usable."""


class ComputationError(HRServiceError):
    """Unexpected failure while scoring or aggregating."""
