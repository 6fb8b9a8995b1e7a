"""
Authentication dependencies for FastAPI.

Bearer tokens come from the external credential service. This module
validates them and exposes the decoded payload as the current principal:
    {"sub", "user_id", "role", "company_id"?, "manager_id"?, ...}
"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from transport_admin.app.core.exceptions import AuthenticationError, TokenRevokedError
from transport_admin.app.core.jwt import decode_access_token
from transport_admin.app.core.redis_client import get_redis
from transport_admin.app.core.token_revocation import is_token_revoked
from transport_admin.app.models.enums import UserRole

# HTTP Bearer security scheme
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    redis_client=Depends(get_redis)
) -> dict:
    """
    FastAPI dependency for JWT authentication.

    Checks:
    1. Validates JWT token signature and expiry
    2. Requires user_id and a known role
    3. Rejects tokens on the revocation list

    Raises:
        AuthenticationError / TokenRevokedError: 401 if authentication fails
    """
    token = credentials.credentials

    # 1. Decode and validate JWT
    payload = decode_access_token(token)
    if payload is None:
        raise AuthenticationError("Could not validate credentials")

    # 2. Payload shape
    if not payload.get("user_id"):
        raise AuthenticationError("Invalid token payload")

    try:
        UserRole(payload.get("role"))
    except ValueError:
        raise AuthenticationError("Invalid role in token")

    # 3. Check if this specific token has been revoked
    if await is_token_revoked(redis_client, token):
        raise TokenRevokedError()

    return payload
