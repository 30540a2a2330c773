"""
Rate Limit Dependencies - one-line rate limiting for endpoints.

Usage:
    from app.middleware.rate_limit_dependencies import rate_limit_payment

    @router.post("/create-payment-intent")
    async def create_payment_intent(
        request: Request,
        caller: Caller = Depends(get_caller),
        _rate: None = Depends(rate_limit_payment),
    ):
        ...

Blocked requests get a 429 with ``Retry-After``; the limit info is left on
``request.state.rate_limit_info`` for ``RateLimitHeadersMiddleware``.
"""

from fastapi import Depends, HTTPException, Request, status

from app.auth.verify import auth_dependency
from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.middleware.rate_limiter import rate_limiter
from app.utils import audit_helpers

logger = get_logger(__name__)


def _too_many_requests(info: dict, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail={
            "error": "rate_limit_exceeded",
            "message": f"{message} Try again in {info['retry_after']} seconds.",
            "limit": info["limit"],
            "retry_after": info["retry_after"],
        },
        headers={"Retry-After": str(info["retry_after"])},
    )


async def _enforce(
    request: Request,
    scope: str,
    identifier: str,
    *,
    actor_email: str | None,
    message: str,
) -> None:
    allowed, info = await rate_limiter.check_scope(scope, identifier)
    request.state.rate_limit_info = info
    if allowed:
        return

    logger.warning(
        "Rate limit exceeded",
        scope=scope,
        actor=actor_email,
        limit=info["limit"],
        retry_after=info["retry_after"],
        path=request.url.path,
    )
    await audit_helpers.audit_security_event(
        request=request,
        event_type="rate_limit_exceeded",
        severity="medium",
        description=f"{scope} rate limit exceeded on {request.url.path}",
        actor_email=actor_email,
        metadata={
            "scope": scope,
            "limit": info["limit"],
            "retry_after": info["retry_after"],
            "endpoint": request.url.path,
        },
    )
    raise _too_many_requests(info, message)


async def rate_limit_ip_only(request: Request) -> None:
    """Per-IP limit for public endpoints."""
    if not settings.RATE_LIMIT_ENABLED:
        return

    ip_address = getattr(request.state, "ip_address", None)
    if not ip_address:
        logger.warning("Rate limit check skipped - no IP address")
        return
    await _enforce(request, "ip", ip_address, actor_email=None, message="Too many requests from your IP.")


async def rate_limit_token_issue(request: Request) -> None:
    """Per-IP limit on token issuance."""
    if not settings.RATE_LIMIT_ENABLED:
        return

    ip_address = getattr(request.state, "ip_address", None)
    if not ip_address:
        logger.warning("Rate limit check skipped - no IP address")
        return
    await _enforce(request, "token", ip_address, actor_email=None, message="Too many token requests.")


async def rate_limit_user_only(request: Request, claims: dict = Depends(auth_dependency)) -> None:
    """Per-caller limit for authenticated endpoints."""
    if not settings.RATE_LIMIT_ENABLED:
        return

    email = claims.get("email") or claims.get("sub")
    if not email:
        logger.warning("Rate limit check skipped - no caller in claims")
        return
    await _enforce(request, "user", email, actor_email=email, message="Too many requests.")


async def rate_limit_payment(request: Request, claims: dict = Depends(auth_dependency)) -> None:
    """
    Layered limit for paid actions: the caller's IP first, then the tighter
    per-caller payment budget.
    """
    if not settings.RATE_LIMIT_ENABLED:
        return

    email = claims.get("email") or claims.get("sub")
    ip_address = getattr(request.state, "ip_address", None)
    if ip_address:
        await _enforce(request, "ip", ip_address, actor_email=email, message="Too many requests from your IP.")
    if email:
        await _enforce(request, "payment", email, actor_email=email, message="Too many payment requests.")
