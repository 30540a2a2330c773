"""
auth.py
-------
Purpose:
    Token issuance. The client signs in with its identity provider and
    exchanges the verified email for an API access token.
"""

from fastapi import APIRouter, Depends

from app.auth.verify import issue_access_token
from app.config import settings
from app.infrastructure.observability.logging import get_logger
from app.middleware.rate_limit_dependencies import rate_limit_token_issue
from app.models.api.user_request import TokenRequest
from app.models.api.user_response import TokenResponse

router = APIRouter(tags=["auth"])
logger = get_logger(__name__)


@router.post("/jwt", response_model=TokenResponse)
async def issue_token(body: TokenRequest, _rate: None = Depends(rate_limit_token_issue)):
    """Sign an access token carrying only the caller's email."""
    token = issue_access_token(body.email)
    logger.info("Access token issued", email=body.email)
    return TokenResponse(token=token, expires_in=settings.ACCESS_TOKEN_TTL_SECONDS)
