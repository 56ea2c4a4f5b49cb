"""
Authentication module for Donor Service API.

Hospitals log in with a username and password and receive a signed JWT.
Protected endpoints take the token from the `Authorization: Bearer` header.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

import jwt
from fastapi import HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import settings
from core.datetime_utils import utc_now

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(
    auto_error=False,  # We'll handle the error ourselves for better messages
    description="Hospital access token from POST /api/v1/auth/login.",
)


@dataclass(frozen=True)
class AuthenticatedHospital:
    """Identity carried by a valid access token."""
    username: str
    name: str
    area: str


def create_access_token(username: str, name: str, area: str) -> Tuple[str, int]:
    """
    Sign an access token for a hospital.

    Returns:
        Tuple of (encoded token, lifetime in seconds).
    """
    expires_in = settings.donor_svc_jwt_expiry_hours * 3600
    now = utc_now()
    payload = {
        "sub": username,
        "name": name,
        "area": area,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
    }
    token = jwt.encode(
        payload,
        settings.donor_svc_jwt_secret,
        algorithm=settings.donor_svc_jwt_algorithm
    )
    return token, expires_in


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        jwt.InvalidTokenError: If the token is malformed, expired or forged.
    """
    return jwt.decode(
        token,
        settings.donor_svc_jwt_secret,
        algorithms=[settings.donor_svc_jwt_algorithm],
        options={"require": ["exp", "sub"]},
    )


async def get_current_hospital(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
) -> AuthenticatedHospital:
    """
    Resolve the hospital behind the bearer token.

    This dependency should be used on all protected endpoints.

    Raises:
        HTTPException: 401 if the token is missing or invalid.
    """
    if credentials is None:
        logger.warning("API request without access token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = decode_access_token(credentials.credentials)
    except jwt.InvalidTokenError as e:
        logger.warning("API request with invalid access token", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthenticatedHospital(
        username=claims["sub"],
        name=claims.get("name", ""),
        area=claims.get("area", ""),
    )
