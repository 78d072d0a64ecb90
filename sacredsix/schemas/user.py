"""User schemas."""

from pydantic import Field

from .base import BaseModelSchema, BaseSchema


class UserResponse(BaseModelSchema):
    email: str
    name: str | None = None
    is_active: bool


class UserUpdateRequest(BaseSchema):
    name: str | None = Field(None, max_length=100)
