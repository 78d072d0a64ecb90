# sacredsix/core/dependencies.py
import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from models import User
from sacredsix.core.security import TokenAuthenticator
from sacredsix.database import get_store
from sacredsix.domains.collaboration.engine import CollaborationEngine
from sacredsix.domains.user.service import UserService
from sacredsix.services.notification_service import InvitationNotifier, get_invitation_notifier
from sacredsix.shared.entity_store import EntityStore

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_authenticator() -> TokenAuthenticator:
    return TokenAuthenticator()


async def validate_token(
    token: HTTPAuthorizationCredentials | None = Depends(security),
    auth: TokenAuthenticator = Depends(get_authenticator),
) -> dict:
    """Validate and decode the bearer token.

    Returns:
        dict: Decoded token payload

    Raises:
        HTTPException: If token is missing, invalid or expired
    """
    if not token or not token.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication token is required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth.verify_token(token.credentials)


async def get_current_user(
    request: Request,
    payload: dict = Depends(validate_token),
    store: EntityStore = Depends(get_store),
) -> User:
    """Get current authenticated user from the token payload.

    Returns:
        User: Current authenticated user

    Raises:
        HTTPException: If the user is inactive
    """
    auth_subject = payload["sub"]

    user = await UserService(store).get_or_create_user(auth_subject, payload)
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")

    # Add user info to request state for logging
    request.state.user_id = user.id
    return user


def get_notifier() -> InvitationNotifier:
    return get_invitation_notifier()


def get_collaboration_engine(
    store: EntityStore = Depends(get_store),
    notifier: InvitationNotifier = Depends(get_notifier),
) -> CollaborationEngine:
    return CollaborationEngine(store, notifier)
