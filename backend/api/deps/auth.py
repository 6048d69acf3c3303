"""
Caller identity dependency.

Resolves the authenticated user id from the Authorization bearer token.

Dependencies: fastapi, backend.core.security
System role: Authentication boundary for API routes
"""

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.api.deps.dependencies import get_settings_dependency
from backend.configs import Settings
from backend.core.exceptions import AuthenticationError
from backend.core.security.tokens import decode_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings_dependency),
) -> str:
    """
    Return the caller's user id.

    Raises:
        HTTPException: 401 when the token is missing or invalid
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = decode_token(credentials.credentials, settings.auth)
    except AuthenticationError as e:
        logger.warning("Rejected bearer token", extra={"error": e.message})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return claims["userId"]
