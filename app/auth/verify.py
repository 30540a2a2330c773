"""
verify.py
---------
Purpose:
    Issue and verify the API's HS256 access tokens.

Notes:
    - Tokens carry identity only (``sub`` and ``email``). The role is read
      from the users table on every request, so a role change takes effect
      without reissuing tokens and a client cannot claim a role.
    - Provides `auth_dependency` for protected routes.
"""

from datetime import UTC, datetime, timedelta

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import settings

_security = HTTPBearer()


def issue_access_token(email: str, now: datetime | None = None) -> str:
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": email,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=settings.ACCESS_TOKEN_TTL_SECONDS),
    }
    return jwt.encode(payload, settings.ACCESS_TOKEN_SECRET, algorithm=settings.ACCESS_TOKEN_ALGORITHM)


def verify_jwt(token: str) -> dict:
    try:
        decoded = jwt.decode(
            token,
            settings.ACCESS_TOKEN_SECRET,
            algorithms=[settings.ACCESS_TOKEN_ALGORITHM],
            options={"verify_exp": True, "require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid authentication token: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    if not decoded.get("email"):
        decoded["email"] = decoded["sub"]
    return decoded


def auth_dependency(credentials: HTTPAuthorizationCredentials = Depends(_security)) -> dict:
    token = credentials.credentials
    return verify_jwt(token)
