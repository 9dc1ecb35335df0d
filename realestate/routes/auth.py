"""
Login and self-registration.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from realestate.auth import create_access_token
from realestate.dependencies import get_user_service
from realestate.errors import DuplicateUserError, InvalidCredentialsError
from realestate.models import User, UserRole
from realestate.schemas import LoginRequest, RegisterRequest, RegisterResponse, TokenResponse
from realestate.users import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, users: UserService = Depends(get_user_service)):
    try:
        user = users.authenticate(payload.email, payload.password)
    except InvalidCredentialsError as exc:
        raise HTTPException(
            status_code=401,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    return TokenResponse(token=create_access_token(user.email, user.role))


@router.post("/register", response_model=RegisterResponse)
def register(payload: RegisterRequest, users: UserService = Depends(get_user_service)):
    if payload.role and payload.role.strip().upper() not in ("USER", UserRole.USER.value):
        logger.warning("Ignoring requested role %s for %s", payload.role, payload.email)
    user = User(email=payload.email, password=payload.password, role=UserRole.USER.value)
    try:
        user_id = users.create_user(user)
    except DuplicateUserError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return RegisterResponse(token=create_access_token(user.email, user.role), user_id=user_id)
