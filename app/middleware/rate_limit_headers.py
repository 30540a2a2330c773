"""
Rate Limit Headers Middleware.

Copies ``request.state.rate_limit_info`` (left there by the rate limit
dependencies) onto the response as ``X-RateLimit-Limit``,
``X-RateLimit-Remaining``, ``X-RateLimit-Reset`` and, when blocked,
``Retry-After``. Requests that never hit a limiter get no headers.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware


class RateLimitHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        response = await call_next(request)

        info = getattr(request.state, "rate_limit_info", None)
        if not info:
            return response

        if "limit" in info:
            response.headers["X-RateLimit-Limit"] = str(info["limit"])
        if "remaining" in info:
            response.headers["X-RateLimit-Remaining"] = str(info["remaining"])

        retry_after = info.get("retry_after")
        if retry_after:
            response.headers["X-RateLimit-Reset"] = str(int(time.time()) + retry_after)
            if not info.get("allowed", True):
                response.headers["Retry-After"] = str(retry_after)

        return response
