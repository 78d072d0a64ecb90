"""
Provides the User model for the application's database schema.

Users are created on first authenticated request from the identity issued by
the external authentication provider. The model is needed by the core to
resolve invitation recipients by email and to name inviters.

Attributes
----------
auth_subject : sqlalchemy.Column
    Subject identifier issued by the authentication provider.
email : sqlalchemy.Column
    The email address of the user, which must also be unique.
name : sqlalchemy.Column
    Optional display name.
is_active : sqlalchemy.Column
    A boolean indicating if the user is active. Defaults to `True`.
"""

from sqlalchemy import Boolean, Column, String

from .base import BaseModel


class User(BaseModel):
    """
    Represents a user entity in the application.

    :ivar auth_subject: Identifier provided by the authentication provider.
    :type auth_subject: str
    :ivar email: Email address of the user. It must be unique.
    :type email: str
    :ivar name: Display name of the user. This is optional.
    :type name: str
    :ivar is_active: Indicates whether the user account is active.
    :type is_active: bool
    """

    __tablename__ = "users"

    auth_subject = Column(String(255), unique=True, nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(100))
    is_active = Column(Boolean, default=True)

    @property
    def display_name(self) -> str:
        return self.name or self.email.split("@")[0]
