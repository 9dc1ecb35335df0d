"""
Admin-only user management.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from realestate.auth import require_admin
from realestate.dependencies import get_user_service
from realestate.errors import DuplicateUserError, EntityNotFoundError
from realestate.models import User
from realestate.routes.common import not_found
from realestate.schemas import CreatedResponse, UserPayload, UserResponse
from realestate.users import UserService

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_admin)])


def _to_entity(payload: UserPayload) -> User:
    return User(
        email=payload.email,
        password=payload.password,
        role=payload.role,
        enabled=payload.enabled,
    )


@router.post("", response_model=CreatedResponse)
def create_user(payload: UserPayload, users: UserService = Depends(get_user_service)):
    if not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="email and password are required")
    try:
        user_id = users.create_user(_to_entity(payload))
    except DuplicateUserError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid role: {payload.role}") from exc
    return CreatedResponse(id=user_id)


@router.get("", response_model=List[UserResponse])
def list_users(users: UserService = Depends(get_user_service)):
    return [UserResponse.model_validate(u) for u in users.get_all_users()]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, users: UserService = Depends(get_user_service)):
    user = users.get_user(user_id)
    if user is None:
        raise not_found("User", user_id)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: str, payload: UserPayload, users: UserService = Depends(get_user_service)
):
    try:
        users.update_user(user_id, _to_entity(payload))
    except EntityNotFoundError as exc:
        raise not_found("User", user_id) from exc
    except DuplicateUserError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid role: {payload.role}") from exc
    return UserResponse.model_validate(users.get_user(user_id))


@router.delete("/{user_id}")
def delete_user(user_id: str, users: UserService = Depends(get_user_service)):
    users.delete_user(user_id)
    return {"status": "ok"}
