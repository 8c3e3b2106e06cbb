class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced user or record does not exist."""


class InferenceServiceError(DomainError):
    """Raised when the fraud assessment call fails. The check-in may be retried."""


class InferenceSchemaError(InferenceServiceError):
    """Raised when the assessment response does not match the verdict schema."""
