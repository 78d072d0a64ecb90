"""Current-user endpoints."""

from fastapi import APIRouter, Depends

from models.user import User
from sacredsix.core.dependencies import get_current_user, validate_token
from sacredsix.database import get_store
from sacredsix.domains.user.service import UserService
from sacredsix.schemas.base import ResponseSchema
from sacredsix.schemas.user import UserResponse, UserUpdateRequest
from sacredsix.shared.entity_store import EntityStore

router = APIRouter(prefix="/api/users", tags=["users"], dependencies=[Depends(validate_token)])


@router.get("/me", response_model=ResponseSchema)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the authenticated user, registering them on first use."""
    return ResponseSchema(
        status="success",
        message="User retrieved successfully",
        data=UserResponse.model_validate(current_user).model_dump(mode="json"),
    )


@router.put("/me", response_model=ResponseSchema)
async def update_me(
    update: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
    store: EntityStore = Depends(get_store),
):
    user = await UserService(store).update_user(current_user.id, name=update.name)
    return ResponseSchema(
        status="success",
        message="User updated successfully",
        data=UserResponse.model_validate(user).model_dump(mode="json"),
    )
