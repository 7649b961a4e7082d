"""Cat Schemas — request bodies and responses for /api/v1/cats.

Invariants:
    - Ids are positive integers; age is a positive integer
    - name is stripped and non-empty
    - reason/note fields are optional free text (max 500 chars)
"""

from datetime import datetime

from pydantic import Field, field_validator

from cattery.schemas.base import MAX_ID, CamelModel


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty or whitespace")
    return v


class CreateCatRequest(CamelModel):
    """Cat creation — owner optional (omitted means stray)."""
    name: str = Field(min_length=1, max_length=100)
    age: int = Field(gt=0, le=MAX_ID)
    owner_id: int | None = Field(None, gt=0, le=MAX_ID)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v)


class AdoptCatRequest(CamelModel):
    cat_id: int = Field(gt=0, le=MAX_ID)
    user_id: int = Field(gt=0, le=MAX_ID)
    reason: str | None = Field(None, max_length=500)


class DeleteCatRequest(CamelModel):
    cat_id: int = Field(gt=0, le=MAX_ID)
    reason: str | None = Field(None, max_length=500)


class RestoreCatRequest(CamelModel):
    cat_id: int = Field(gt=0, le=MAX_ID)
    reason: str | None = Field(None, max_length=500)


class OwnerResponse(CamelModel):
    id: int
    name: str
    email: str


class CatResponse(CamelModel):
    id: int
    name: str
    age: int
    owner_id: int | None = None
    deleted_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    owner: OwnerResponse | None = None


class CatDeletionResponse(CamelModel):
    message: str
    cat: CatResponse


class CatRestorationResponse(CamelModel):
    message: str
    cat: CatResponse


class CatCountResponse(CamelModel):
    count: int
