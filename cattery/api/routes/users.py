"""User Routes — thin transport over UserLifecycle.

Invariants:
    - Bodies validated by require_valid() before the engine runs
    - Force delete is a separate DELETE endpoint; safe delete is POST /delete
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Path, Query, status

from cattery.api.dependencies import get_user_lifecycle
from cattery.schemas.user import (
    CreateUserRequest, DeleteUserRequest, EmailAvailabilityResponse,
    ForcedUserRemovalResponse, UserRemovalResponse, UserResponse,
)
from cattery.schemas.base import MAX_ID
from cattery.schemas.validation import require_valid
from cattery.services.user_lifecycle import UserLifecycle

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    include_stats: bool = Query(False),
    users: UserLifecycle = Depends(get_user_lifecycle),
):
    """All users, newest first, optionally with cat/post counts."""
    records = (await users.find_all(include_stats)).unwrap()
    return [UserResponse.model_validate(r) for r in records]


@router.get("/check-email/{email}", response_model=EmailAvailabilityResponse)
async def check_email(
    email: str,
    exclude_user_id: int | None = Query(None, ge=1, le=MAX_ID),
    users: UserLifecycle = Depends(get_user_lifecycle),
):
    """Whether an email is free (optionally for a given user to keep)."""
    outcome = await users.check_email(email, exclude_user_id)
    return EmailAvailabilityResponse.model_validate(outcome.unwrap())


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int = Path(ge=1, le=MAX_ID),
    include_details: bool = Query(False),
    users: UserLifecycle = Depends(get_user_lifecycle),
):
    outcome = await users.find_by_id(user_id, include_details)
    return UserResponse.model_validate(outcome.unwrap())


@router.post(
    "", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def create_user(
    payload: dict[str, Any] = Body(...),
    users: UserLifecycle = Depends(get_user_lifecycle),
):
    body = require_valid(CreateUserRequest, payload)
    outcome = await users.create(body.name, body.email)
    return UserResponse.model_validate(outcome.unwrap())


@router.post("/delete", response_model=UserRemovalResponse)
async def delete_user(
    payload: dict[str, Any] = Body(...),
    users: UserLifecycle = Depends(get_user_lifecycle),
):
    """Safe delete — refused while the user owns cats or posts."""
    body = require_valid(DeleteUserRequest, payload)
    outcome = await users.remove(body.user_id, body.reason)
    return UserRemovalResponse.model_validate(outcome.unwrap())


@router.delete("/{user_id}/force", response_model=ForcedUserRemovalResponse)
async def force_delete_user(
    user_id: int = Path(ge=1, le=MAX_ID),
    users: UserLifecycle = Depends(get_user_lifecycle),
):
    """Strays the user's cats, deletes their posts, then the user."""
    outcome = await users.force_remove(user_id)
    return ForcedUserRemovalResponse.model_validate(outcome.unwrap())
