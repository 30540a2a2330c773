"""
Middleware components for request processing.

This package contains middleware for:
- Request context (request ID, IP address, user agent)
- Rate limiting (anti-abuse protection)
- CORS for the browser client
"""

from app.middleware.cors import CORSMiddleware
from app.middleware.rate_limit_dependencies import (
    rate_limit_ip_only,
    rate_limit_payment,
    rate_limit_token_issue,
    rate_limit_user_only,
)
from app.middleware.rate_limit_headers import RateLimitHeadersMiddleware
from app.middleware.rate_limiter import rate_limiter
from app.middleware.request_context import RequestContextMiddleware

__all__ = [
    "RequestContextMiddleware",
    "RateLimitHeadersMiddleware",
    "CORSMiddleware",
    "rate_limiter",
    "rate_limit_ip_only",
    "rate_limit_payment",
    "rate_limit_token_issue",
    "rate_limit_user_only",
]
