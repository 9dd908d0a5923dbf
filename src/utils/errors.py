"""Error handling utilities."""

from typing import Optional


class RumooError(Exception):
    """Base exception for Rumoo backend."""
    status_code: int = 500

    def __init__(self, message: str = "", details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(RumooError):
    """Malformed or missing required input."""
    status_code = 400


class UnsupportedSourceError(ValidationError):
    """Listing URL does not belong to a supported provider."""
    pass


class InvalidRequestError(ValidationError):
    """Request body matches no known intake shape."""
    pass


class NotFoundError(RumooError):
    """Record or token lookup missed."""
    status_code = 404


class AlreadyConfirmedError(RumooError):
    """Confirmation token was already consumed."""
    status_code = 410


AlreadyConsumedError = AlreadyConfirmedError


class ConflictError(RumooError):
    """Resource already exists and regeneration was not requested."""
    status_code = 409


class ConfigurationError(RumooError):
    """Optional integration is missing its credentials."""
    pass


class AdapterError(RumooError):
    """External service call failed (absorbed at the adapter boundary)."""
    pass


class PipelineError(RumooError):
    """Ingestion pipeline failed past its absorbing stages."""
    pass


class SupabaseError(RumooError):
    """Supabase operation error."""
    pass
