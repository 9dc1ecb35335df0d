"""
JWT bearer authentication and role checks, exposed as FastAPI dependencies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from realestate.config import Settings, get_settings
from realestate.dependencies import get_user_service
from realestate.models import UserRole
from realestate.users import UserService

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthenticatedUser:
    id: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


def create_access_token(email: str, role: str, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": email,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.jwt_expiration_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Optional[Settings] = None) -> dict:
    """Raises jwt.InvalidTokenError for a bad signature, a malformed or expired token."""
    settings = settings or get_settings()
    return jwt.decode(
        token,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["sub", "exp"]},
    )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    users: UserService = Depends(get_user_service),
) -> AuthenticatedUser:
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Not authenticated")
    try:
        claims = decode_access_token(credentials.credentials)
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise _unauthorized("Invalid or expired token") from exc

    # Role and enabled flag come from the stored account, not the token.
    user = users.load_by_email(claims["sub"])
    if user is None or not user.enabled:
        raise _unauthorized("User not found or disabled")
    return AuthenticatedUser(id=user.id, email=user.email, role=user.role)


def require_admin(user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return user
