"""
Security utilities for authentication
Password hashing, session token issuing and validation
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

import jwt
from passlib.context import CryptContext

from algosensei.config import settings
from algosensei.core.exceptions import AuthenticationError, ConfigurationError

# Password hashing context (bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SESSION_ALGORITHM = "HS256"
SESSION_TOKEN_TYPE = "session"


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt

    Args:
        password: Plain text password

    Returns:
        str: Bcrypt hashed password
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash

    Args:
        plain_password: Plain text password
        hashed_password: Stored bcrypt hash

    Returns:
        bool: True if password matches hash
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_session_token(request) -> Optional[str]:
    """
    Extract the session credential from a request

    Checks:
    1. Authorization header (Bearer token)
    2. Session cookie (SESSION_COOKIE_NAME)

    Returns:
        Token string, or None if the request carries no credential
    """
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer ") and auth[7:].strip():
        return auth[7:].strip()

    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


def _get_session_secret() -> str:
    if not settings.SESSION_SECRET:
        raise ConfigurationError('Missing environment variable: "SESSION_SECRET"')
    return settings.SESSION_SECRET


def create_session_token(email: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed session credential for a user

    Args:
        email: Stable user identifier, stored as the token subject
        expires_delta: Optional custom lifetime (default: SESSION_TTL_MINUTES)

    Returns:
        str: Encoded JWT
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.SESSION_TTL_MINUTES))

    payload = {
        "sub": email,
        "iat": now,
        "exp": expire,
        "type": SESSION_TOKEN_TYPE,
    }
    return jwt.encode(payload, _get_session_secret(), algorithm=SESSION_ALGORITHM)


def decode_session_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a session credential

    Args:
        token: Encoded JWT

    Returns:
        dict: Token payload (``sub`` holds the user email)

    Raises:
        AuthenticationError: If the token is expired, tampered with, or malformed
    """
    secret = _get_session_secret()
    try:
        payload = jwt.decode(token, secret, algorithms=[SESSION_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Session has expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid session token")

    if payload.get("type") != SESSION_TOKEN_TYPE or not payload.get("sub"):
        raise AuthenticationError("Invalid session token")

    return payload
