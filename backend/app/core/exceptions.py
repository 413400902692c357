"""
Domain exceptions raised by the service layer.

Services never raise HTTPException; the API layer maps these to responses.
"""


class PlavelError(Exception):
    """Base class for all domain errors."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(PlavelError):
    """Raised when a trip, payment, share, invite or itinerary item is missing."""
    status_code = 404


class AuthorizationDenied(PlavelError):
    """Raised by callers that treat a failed access check as fatal."""
    status_code = 403


class ValidationError(PlavelError):
    """Raised when user input fails a business rule."""
    status_code = 400


class ConflictError(PlavelError):
    """Raised when an action clashes with existing state."""
    status_code = 409


class InvalidLedgerError(PlavelError):
    """Raised when settlement input violates the ledger preconditions."""
    status_code = 422


class ExternalServiceError(PlavelError):
    """Raised when a third-party integration fails."""
    status_code = 502
