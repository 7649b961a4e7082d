"""User Schemas — request bodies and responses for /api/v1/users.

Invariants:
    - name is stripped and non-empty; email must look like an address
    - counts.cats counts active cats only
"""

from datetime import datetime

from pydantic import Field, field_validator

from cattery.schemas.base import MAX_ID, CamelModel
from cattery.schemas.cat import CatResponse

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CreateUserRequest(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)

    @field_validator("name", "email", mode="before")
    @classmethod
    def strip_text(cls, v):
        """Strip before the length and pattern checks run."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("must not be empty or whitespace")
        return v


class DeleteUserRequest(CamelModel):
    user_id: int = Field(gt=0, le=MAX_ID)
    reason: str | None = Field(None, max_length=500)


class PostSummaryResponse(CamelModel):
    id: int
    title: str
    published: bool


class CountsResponse(CamelModel):
    cats: int
    posts: int


class UserResponse(CamelModel):
    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
    cats: list[CatResponse] | None = None
    posts: list[PostSummaryResponse] | None = None
    counts: CountsResponse | None = None


class UserRemovalResponse(CamelModel):
    message: str
    user: UserResponse


class DeletedUserDataResponse(CamelModel):
    user: UserResponse
    cats_affected: int
    posts_deleted: int


class ForcedUserRemovalResponse(CamelModel):
    message: str
    deleted_data: DeletedUserDataResponse


class EmailAvailabilityResponse(CamelModel):
    email: str
    available: bool
    message: str
