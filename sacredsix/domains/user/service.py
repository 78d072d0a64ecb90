# sacredsix/domains/user/service.py
import logging
from typing import Optional
from uuid import UUID

from models import User
from sacredsix.exceptions import ValidationError
from sacredsix.shared.entity_store import EntityStore

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, store: EntityStore):
        self.store = store

    async def get_user_by_subject(self, auth_subject: str) -> Optional[User]:
        """Get a user by the identity provider's subject id."""
        return await self.store.first(User, auth_subject=auth_subject)

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        return await self.store.get(User, user_id)

    async def create_user(self, auth_subject: str, email: str, name: str | None = None) -> User:
        """Create a new user."""
        if not email:
            raise ValidationError("An email claim is required to register a user")

        async with self.store.transaction():
            user = User(auth_subject=auth_subject, email=email.strip().lower(), name=name, is_active=True)
            await self.store.put(user)

        logger.info(f"Registered user {user.id} for subject {auth_subject}")
        return user

    async def get_or_create_user(self, auth_subject: str, payload: dict) -> User:
        """Get existing user or create new one from the token payload."""
        user = await self.get_user_by_subject(auth_subject)
        if not user:
            user = await self.create_user(
                auth_subject=auth_subject,
                email=payload.get("email"),
                name=payload.get("name"),
            )
        return user

    async def update_user(self, user_id: UUID, name: str | None = None) -> Optional[User]:
        """Update user information."""
        async with self.store.transaction():
            user = await self.get_user_by_id(user_id)
            if not user:
                return None
            if name is not None:
                user.name = name.strip() or None
            await self.store.put(user)
        return user
