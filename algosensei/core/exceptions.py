"""
Custom exceptions for AlgoSensei API

Every exception carries the HTTP status and error code it is mapped to
by the global handlers in algosensei.utils.error_handlers.
"""

from fastapi import status


class AlgoSenseiException(Exception):
    """Base exception for AlgoSensei"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthenticationError(AlgoSenseiException):
    """Missing or invalid session credential"""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "unauthorized"
    default_message = "Invalid authentication credentials"


class ValidationError(AlgoSenseiException):
    """Missing or invalid request fields"""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "validation_error"
    default_message = "Request validation failed."


class DuplicateError(ValidationError):
    """Duplicate resource"""

    error = "duplicate"
    default_message = "Resource already exists."


class NotFoundError(AlgoSenseiException):
    """Resource not found (or not owned by the caller)"""

    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"
    default_message = "Resource not found"


class StorageError(AlgoSenseiException):
    """Storage backend transport failure"""

    error = "storage_error"
    default_message = "Storage backend error occurred."


class ConfigurationError(AlgoSenseiException):
    """Required settings are absent"""

    error = "configuration_error"
    default_message = "Server is not configured correctly."


class UpstreamProviderError(AlgoSenseiException):
    """LLM provider call failed"""

    error = "upstream_error"
    default_message = "Error processing your request"
