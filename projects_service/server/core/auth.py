"""
Bearer token authentication.

Tokens are JWTs verified with PyJWT. User tokens carry their claims under a
configurable namespace (``<ns>userId``, ``<ns>roles``, ``<ns>handle``,
``<ns>email``), with the plain claim names accepted as a fallback.
Machine-to-machine tokens are recognised by ``gty == "client-credentials"``;
they carry a space-separated ``scope`` claim and act as the configured
default machine user.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from projects_service.core.errors import UnauthorizedError
from projects_service.core.logging_config import get_logger
from projects_service.core.models.domain import AuthUser

from .config import settings

logger = get_logger(__name__)

security = HTTPBearer(auto_error=False)

M2M_GRANT_TYPE = "client-credentials"


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify a JWT and return its decoded payload.

    Raises:
        UnauthorizedError: If the token is expired or invalid
    """
    auth = settings.auth
    try:
        return jwt.decode(
            token,
            auth.secret,
            algorithms=[auth.algorithm],
            options={"verify_aud": False},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token expired")
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise UnauthorizedError("Invalid token")


def _claim(payload: Dict[str, Any], name: str) -> Any:
    namespaced = payload.get(f"{settings.auth.claim_namespace}{name}")
    return namespaced if namespaced is not None else payload.get(name)


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return [str(v) for v in value]


def build_auth_user(payload: Dict[str, Any]) -> AuthUser:
    """Build the caller from a verified token payload."""
    if payload.get("gty") == M2M_GRANT_TYPE:
        return AuthUser(
            user_id=settings.auth.default_m2m_user_id,
            handle=payload.get("sub"),
            scopes=_as_list(payload.get("scope") or payload.get("scopes")),
            is_machine=True,
        )

    user_id = _claim(payload, "userId")
    if user_id is None:
        raise UnauthorizedError("Invalid token")
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token")

    return AuthUser(
        user_id=user_id,
        handle=_claim(payload, "handle"),
        email=_claim(payload, "email"),
        roles=_as_list(_claim(payload, "roles")),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthUser:
    """
    FastAPI dependency returning the authenticated caller.

    Raises:
        UnauthorizedError: If no bearer token is provided or it does not verify
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    return build_auth_user(verify_token(credentials.credentials))
