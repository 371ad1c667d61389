import logging
from functools import lru_cache
from typing import Any
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from shared.auth.config import AuthSettings
from shared.constants import Role
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

_KNOWN_ROLES = {r.value for r in Role}


@lru_cache
def get_auth_settings() -> AuthSettings:
    return AuthSettings()


def decode_access_token(token: str, settings: AuthSettings) -> CurrentUser:
    """Verify an identity-provider token and map its claims to a CurrentUser.

    Raises JWTError for a bad signature, issuer, audience or expiry and
    ValueError when the subject is missing or malformed.
    """
    claims: dict[str, Any] = jwt.decode(
        token,
        settings.secret,
        algorithms=[settings.algorithm],
        issuer=settings.issuer,
        audience=settings.audience,
    )
    subject = claims.get("sub")
    if not subject:
        raise ValueError("token has no subject")

    # Roles this service does not know about are ignored
    roles = [Role(r) for r in claims.get("roles") or [] if r in _KNOWN_ROLES]
    return CurrentUser(
        id=UUID(str(subject)),
        email=claims.get("email") or "",
        name=claims.get("name") or claims.get("full_name"),
        roles=roles,
    )


async def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: AuthSettings = Depends(get_auth_settings),
) -> CurrentUser | None:
    if credentials is None or not credentials.credentials:
        return None
    try:
        return decode_access_token(credentials.credentials, settings)
    except (JWTError, ValueError) as exc:
        logger.debug("Rejected bearer token: %s", exc)
        return None


async def get_current_user_required(
    user: CurrentUser | None = Depends(get_current_user_optional),
) -> CurrentUser:
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(
    current_user: CurrentUser = Depends(get_current_user_required),
) -> CurrentUser:
    """403 unless the caller holds an admin role."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required.",
        )
    return current_user
