"""Bearer token verification for tokens issued by the auth service."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from app.core.config import settings

bearer_scheme = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)

ROLE_PLAYER = "player"
ROLE_OWNER = "owner"
ROLE_ADMIN = "admin"

_ROLES_BY_ID = {1: ROLE_PLAYER, 2: ROLE_ADMIN, 3: ROLE_OWNER}


class CurrentUser(BaseModel):
    """Identity extracted from a verified access token."""

    id_user: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class TokenDecodeError(RuntimeError):
    """Raised when an access token cannot be decoded."""


def decode_access_token(token: str) -> Dict[str, Any]:
    """Decode a JWT access token using the shared auth secret."""

    if not token:
        raise TokenDecodeError("Token must not be empty")

    try:
        return jwt.decode(
            token.strip(),
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except JWTError as exc:
        logger.info("Rejected access token: %s", exc)
        raise TokenDecodeError("Invalid or expired token") from exc


def extract_role_from_claims(payload: Dict[str, Any]) -> Optional[str]:
    """Return the textual role from either a ``role`` or an ``id_role`` claim."""

    raw_role = payload.get("role")
    if isinstance(raw_role, str) and raw_role.strip():
        return raw_role.strip().lower()

    raw_role_id = payload.get("id_role")
    if raw_role_id is None:
        return None
    try:
        role_id = int(raw_role_id)
    except (TypeError, ValueError):
        logger.warning("Unexpected role claim type: %s", raw_role_id)
        return None

    role = _ROLES_BY_ID.get(role_id)
    if role is None:
        logger.info("Unknown role id in token: %s", role_id)
    return role


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    """Validate the bearer token and return the caller's identity.

    Raises an HTTP 401 error when the token is missing, invalid or lacks the
    subject/role claims this service relies on.
    """

    if credentials is None or not credentials.scheme or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        payload = decode_access_token(credentials.credentials)
    except TokenDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    role = extract_role_from_claims(payload)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        user_id = None

    if user_id is None or role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return CurrentUser(id_user=user_id, role=role)


def require_roles(*roles: str):
    """Build a dependency that only lets the listed roles through."""

    allowed = {role.lower() for role in roles}

    def _dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions for this operation",
            )
        return current_user

    return _dependency


__all__ = [
    "CurrentUser",
    "ROLE_ADMIN",
    "ROLE_OWNER",
    "ROLE_PLAYER",
    "TokenDecodeError",
    "decode_access_token",
    "extract_role_from_claims",
    "get_current_user",
    "require_roles",
]
