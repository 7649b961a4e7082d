"""Cat Routes — thin transport over CatLifecycle.

Invariants:
    - Bodies validated by require_valid() before the engine runs
    - Every engine Outcome is unwrapped here; failures become CatteryError
      and are rendered by the global handlers
    - Static paths are registered before /{cat_id}
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Path, status

from cattery.api.dependencies import get_cat_lifecycle
from cattery.schemas.cat import (
    AdoptCatRequest, CatCountResponse, CatDeletionResponse, CatResponse,
    CatRestorationResponse, CreateCatRequest, DeleteCatRequest, RestoreCatRequest,
)
from cattery.schemas.base import MAX_ID
from cattery.schemas.validation import require_valid
from cattery.services.cat_lifecycle import CatLifecycle

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/cats", tags=["cats"])


@router.get("/count", response_model=CatCountResponse)
async def count_cats(cats: CatLifecycle = Depends(get_cat_lifecycle)):
    """Number of active (not soft-deleted) cats."""
    count = (await cats.count_active_cats()).unwrap()
    return CatCountResponse(count=count)


@router.get("/available", response_model=list[CatResponse])
async def list_available_cats(cats: CatLifecycle = Depends(get_cat_lifecycle)):
    """Strays that can be adopted."""
    records = (await cats.get_available_cats()).unwrap()
    return [CatResponse.model_validate(r) for r in records]


@router.get("/deleted", response_model=list[CatResponse])
async def list_deleted_cats(cats: CatLifecycle = Depends(get_cat_lifecycle)):
    records = (await cats.get_deleted_cats()).unwrap()
    return [CatResponse.model_validate(r) for r in records]


@router.get("/owner/{user_id}", response_model=list[CatResponse])
async def list_cats_by_owner(
    user_id: int = Path(ge=1, le=MAX_ID),
    cats: CatLifecycle = Depends(get_cat_lifecycle),
):
    """Active cats adopted by a user."""
    records = (await cats.get_cats_by_owner(user_id)).unwrap()
    return [CatResponse.model_validate(r) for r in records]


@router.get("/{cat_id}", response_model=CatResponse)
async def get_cat(
    cat_id: int = Path(ge=1, le=MAX_ID),
    cats: CatLifecycle = Depends(get_cat_lifecycle),
):
    """Cat detail with owner info."""
    return CatResponse.model_validate((await cats.get_detail(cat_id)).unwrap())


@router.post(
    "", response_model=CatResponse, status_code=status.HTTP_201_CREATED,
)
async def create_cat(
    payload: dict[str, Any] = Body(...),
    cats: CatLifecycle = Depends(get_cat_lifecycle),
):
    body = require_valid(CreateCatRequest, payload)
    outcome = await cats.insert_cat(body.name, body.age, body.owner_id)
    return CatResponse.model_validate(outcome.unwrap())


@router.post("/adopt", response_model=CatResponse)
async def adopt_cat(
    payload: dict[str, Any] = Body(...),
    cats: CatLifecycle = Depends(get_cat_lifecycle),
):
    """Adopt a stray cat."""
    body = require_valid(AdoptCatRequest, payload)
    if body.reason:
        logger.info(
            f"Adoption requested: {body.reason}",
            extra={"cat_id": body.cat_id, "user_id": body.user_id},
        )
    outcome = await cats.adopt_cat(body.cat_id, body.user_id)
    return CatResponse.model_validate(outcome.unwrap())


@router.post("/delete", response_model=CatDeletionResponse)
async def delete_cat(
    payload: dict[str, Any] = Body(...),
    cats: CatLifecycle = Depends(get_cat_lifecycle),
):
    """Soft delete a cat."""
    body = require_valid(DeleteCatRequest, payload)
    outcome = await cats.delete_cat(body.cat_id, body.reason)
    return CatDeletionResponse.model_validate(outcome.unwrap())


@router.post("/restore", response_model=CatRestorationResponse)
async def restore_cat(
    payload: dict[str, Any] = Body(...),
    cats: CatLifecycle = Depends(get_cat_lifecycle),
):
    body = require_valid(RestoreCatRequest, payload)
    outcome = await cats.restore_cat(body.cat_id, body.reason)
    return CatRestorationResponse.model_validate(outcome.unwrap())
