"""
Token Revocation using Redis.

The credential service blacklists tokens on logout or when an account is
blocked; this module reads (and, for tooling, writes) that blacklist.
"""

import logging

from transport_admin.app.core.config import settings

logger = logging.getLogger("transport_admin.auth")

# Redis key prefix for blacklisted tokens
TOKEN_BLACKLIST_PREFIX = "blacklist:token:"


async def revoke_token(redis_client, token: str, user_id: int) -> bool:
    """
    Revoke a specific JWT token by adding it to the blacklist.

    The API never calls this: the external credential service writes the
    blacklist on logout or account block. It is kept for operator tooling
    and tests, and mirrors the issuer's key format and TTL exactly.

    Returns:
        True if successfully revoked, False otherwise
    """
    try:
        # Tokens auto-expire anyway, so the entry only needs to outlive them
        ttl_seconds = settings.access_token_expire_minutes * 60
        key = f"{TOKEN_BLACKLIST_PREFIX}{token}"
        await redis_client.set(key, str(user_id), ex=ttl_seconds)
        return True
    except Exception as exc:
        logger.error("Error revoking token for user %s: %s", user_id, exc)
        return False


async def is_token_revoked(redis_client, token: str) -> bool:
    """
    Check if a token has been revoked.

    Fails open: if Redis is unreachable the token is treated as valid.
    """
    try:
        key = f"{TOKEN_BLACKLIST_PREFIX}{token}"
        exists = await redis_client.exists(key)
        return exists > 0
    except Exception as exc:
        logger.warning("Error checking token revocation, allowing request: %s", exc)
        return False
