"""
Middleware Components

Provides cross-cutting concerns like rate limiting.
"""

from algosensei.middleware.rate_limiter import limiter, setup_rate_limiting

__all__ = ["limiter", "setup_rate_limiting"]
