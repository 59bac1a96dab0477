"""
Core Utilities

Modules:
    - security: Password hashing, session tokens
    - exceptions: Custom exceptions mapped to HTTP errors
"""

from algosensei.core import security, exceptions

__all__ = ["security", "exceptions"]
