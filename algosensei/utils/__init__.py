"""
Utility Functions and Classes

Provides error handling and log sanitizing helpers.
"""

from algosensei.utils.error_handlers import (
    ErrorHandler,
    setup_error_handlers
)
from algosensei.utils.sanitize import (
    sanitize_headers,
    sanitize_string,
    get_safe_token_display
)

__all__ = [
    "ErrorHandler",
    "setup_error_handlers",
    "sanitize_headers",
    "sanitize_string",
    "get_safe_token_display"
]
