"""
Rate Limiting Middleware

Protects the AI and authentication endpoints from abuse using SlowAPI.
Limits are tracked per valid session credential, falling back to client IP.
Authentication endpoints are always limited per client IP.
"""

import hashlib

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request, status
from fastapi.responses import JSONResponse
from algosensei.config import settings
from algosensei.core.exceptions import AuthenticationError, ConfigurationError
from algosensei.core.security import decode_session_token, get_session_token
from algosensei.utils.sanitize import get_safe_token_display
import logging

logger = logging.getLogger(__name__)


def rate_limit_key(request: Request) -> str:
    """
    Generate rate limit key based on session credential or IP

    Only a credential that decodes counts as a session; anything else
    is keyed by client address.

    Format: "session:{sha256 of token}" or "ip:{address}"
    """
    token = get_session_token(request)
    if token:
        try:
            decode_session_token(token)
        except (AuthenticationError, ConfigurationError):
            token = None
    if token:
        return f"session:{hashlib.sha256(token.encode()).hexdigest()}"
    return f"ip:{get_remote_address(request)}"



# Initialize rate limiter (in-memory by default, any limits storage URI works)
limiter = Limiter(
    key_func=rate_limit_key,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED
)


def custom_rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """
    Custom handler for rate limit exceeded errors

    Returns:
        429 JSON response with Retry-After header
    """
    retry_after = "60"
    if getattr(exc, "headers", None):
        retry_after = exc.headers.get("Retry-After", retry_after)

    token = get_session_token(request)
    who = get_safe_token_display(token) if token else get_remote_address(request)
    logger.warning(f"Rate limit exceeded for {who} on {request.url.path}")

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": "rate_limit_exceeded",
            "message": f"Too many requests ({exc.detail}). Please slow down.",
        },
        headers={"Retry-After": str(retry_after)}
    )


# Rate limit decorators for different endpoints

def ai_rate_limit():
    """
    Rate limit for the AI endpoint

    Default: 10 requests per minute
    """
    return limiter.limit(settings.RATE_LIMIT_AI)


def auth_rate_limit():
    """
    Rate limit for authentication endpoints

    Default: 5 requests per minute, keyed by client IP regardless of
    any credential sent with the request
    """
    return limiter.limit(settings.RATE_LIMIT_AUTH, key_func=get_remote_address)


# Middleware setup function
def setup_rate_limiting(app):
    """
    Setup rate limiting

    Args:
        app: FastAPI application instance
    """
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, custom_rate_limit_exceeded_handler)
    if settings.RATE_LIMIT_ENABLED:
        logger.info(f"Rate limiting enabled ({settings.RATE_LIMIT_STORAGE_URI})")
    else:
        logger.warning("Rate limiting disabled")
