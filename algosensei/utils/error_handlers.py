"""
Centralized Error Handling

Maps every error that reaches the request boundary to a JSON body
{"error": <code>, "message": <text>} with the matching status code.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Dict, Any
import logging
import traceback

from algosensei.core.exceptions import AlgoSenseiException, AuthenticationError
from algosensei.utils.sanitize import sanitize_headers, sanitize_string

logger = logging.getLogger(__name__)


class ErrorHandler:
    """Centralized error handling"""

    @staticmethod
    def handle_app_error(error: AlgoSenseiException) -> Dict[str, Any]:
        """
        Handle AlgoSensei exceptions

        Server-side failures are logged as errors, client mistakes as warnings.
        """
        if error.status_code >= 500:
            logger.error(f"{type(error).__name__}: {sanitize_string(error.message)}")
        else:
            logger.warning(f"{type(error).__name__}: {sanitize_string(error.message)}")
        return {
            "error": error.error,
            "message": error.message,
        }

    @staticmethod
    def handle_validation_error(error: RequestValidationError) -> Dict[str, Any]:
        """
        Handle Pydantic request validation errors

        Returns:
            Error dictionary naming the offending fields
        """
        fields = [
            ".".join(str(part) for part in e.get("loc", ()) if part != "body")
            for e in error.errors()
        ]
        logger.warning(f"Validation error on fields: {fields}")
        return {
            "error": "validation_error",
            "message": "Missing or invalid fields: " + ", ".join(f for f in fields if f),
        }

    @staticmethod
    def handle_generic_error(error: Exception) -> Dict[str, Any]:
        """
        Handle generic/unknown errors

        Args:
            error: Exception

        Returns:
            Error dictionary
        """
        logger.error(f"Unexpected error: {sanitize_string(str(error))}\n{traceback.format_exc()}")
        return {
            "error": "internal_error",
            "message": "An unexpected error occurred. Please try again.",
        }


# Global exception handlers for FastAPI

async def app_error_handler(request: Request, exc: AlgoSenseiException):
    """FastAPI exception handler for AlgoSensei exceptions"""
    error_data = ErrorHandler.handle_app_error(exc)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_data,
        headers=headers
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """FastAPI exception handler for request validation errors (400, not 422)"""
    error_data = ErrorHandler.handle_validation_error(exc)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_data
    )


async def generic_error_handler(request: Request, exc: Exception):
    """FastAPI exception handler for generic errors"""
    logger.debug(f"Failed request headers: {sanitize_headers(dict(request.headers))}")
    error_data = ErrorHandler.handle_generic_error(exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_data
    )


# Setup function for FastAPI app
def setup_error_handlers(app):
    """
    Setup global error handlers for FastAPI app

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AlgoSenseiException, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    logger.info("Error handlers registered")
