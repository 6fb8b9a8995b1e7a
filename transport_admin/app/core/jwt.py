"""
JWT token utilities.

Tokens are issued by the external credential service; this backend only
verifies them. Besides `sub`, `user_id` and `role`, a party token names
the party it acts for through a role-id claim:

    company        -> company_id        (required)
    manager        -> manager_id        (falls back to user_id)
    vehicle_owner  -> vehicle_owner_id  (falls back to user_id)
    driver         -> driver_id         (falls back to user_id)

Admin tokens carry no role-id claim. `build_claims` and
`create_access_token` mirror the issuer's format for seed scripts and tests.
"""

from datetime import timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from transport_admin.app.core.config import settings
from transport_admin.app.core.exceptions import AuthenticationError
from transport_admin.app.core.timeutils import utcnow
from transport_admin.app.models.enums import UserRole

ROLE_ID_CLAIMS = {
    UserRole.COMPANY: "company_id",
    UserRole.MANAGER: "manager_id",
    UserRole.VEHICLE_OWNER: "vehicle_owner_id",
    UserRole.DRIVER: "driver_id",
}

# Roles whose role-id claim may not be replaced by user_id
STRICT_ROLE_ID_CLAIMS = {UserRole.COMPANY}


def build_claims(role: UserRole, user_id: int, owner_id: Optional[int] = None, sub: Optional[str] = None) -> Dict[str, Any]:
    """
    Token payload in the issuer's format.

    Example:
        build_claims(UserRole.COMPANY, 12, owner_id=3, sub="ops@acme.example")
        -> {"sub": "ops@acme.example", "user_id": 12, "role": "company", "company_id": 3}
    """
    claims = {"sub": sub or f"{role.value}-{user_id}", "user_id": user_id, "role": role.value}
    if owner_id is not None and role in ROLE_ID_CLAIMS:
        claims[ROLE_ID_CLAIMS[role]] = owner_id
    return claims


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode (see `build_claims`)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and validate a JWT access token.

    Returns:
        Decoded token payload if valid, None otherwise
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def owner_id_from_claims(payload: Dict[str, Any]) -> Optional[int]:
    """
    Id of the party a token acts for, None for admins.

    Raises:
        AuthenticationError: "Unauthorized access" when a company token has
            no company_id, "Invalid token payload" when the id is not an integer
    """
    role = UserRole(payload["role"])
    if role == UserRole.ADMIN:
        return None

    raw = payload.get(ROLE_ID_CLAIMS[role])
    if not raw:
        if role in STRICT_ROLE_ID_CLAIMS:
            raise AuthenticationError("Unauthorized access")
        raw = payload.get("user_id")

    # bool is an int subclass but never a valid id
    if isinstance(raw, bool):
        raise AuthenticationError("Invalid token payload")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token payload")
