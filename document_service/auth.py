"""
Authentication Module

Verifies Supabase access tokens sent as `Authorization: Bearer <token>`.
The service-role client resolves the token to a user; ownership checks are
left to the routes.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import Client

from .config import MISSING_SERVICE_KEY_MESSAGE
from .models import AuthenticatedUser
from .supabase_client import get_admin_client

logger = logging.getLogger(__name__)

# auto_error=False so a missing header answers our own 401 message
security = HTTPBearer(auto_error=False)


def require_admin_client() -> Client:
    """
    Get the service-role client or fail with 500.

    Raises:
        HTTPException: 500 if the service key is not configured
    """
    client = get_admin_client()
    if client is None:
        logger.error("Missing SUPABASE_SERVICE_ROLE_KEY")
        raise HTTPException(status_code=500, detail=MISSING_SERVICE_KEY_MESSAGE)
    return client


def verify_token(
    client: Client = Depends(require_admin_client),
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
) -> AuthenticatedUser:
    """
    Resolve the bearer token to a Supabase user.

    Args:
        client: Service-role Supabase client
        credentials: Bearer token from request header

    Returns:
        The authenticated user

    Raises:
        HTTPException: 401 if the header is missing or the token is rejected
    """
    if credentials is None or not credentials.credentials.strip():
        raise HTTPException(
            status_code=401,
            detail="Missing or invalid Authorization header",
        )

    try:
        response = client.auth.get_user(credentials.credentials.strip())
    except Exception as e:
        # gotrue raises AuthApiError for expired or forged tokens
        logger.warning(f"Token verification failed: {e}")
        response = None

    user = getattr(response, "user", None)
    if user is None:
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired session. Please sign in again.",
        )

    return AuthenticatedUser(id=str(user.id), email=getattr(user, "email", None))
