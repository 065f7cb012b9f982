# =============================================================================
# core/models/session.py - Session Schemas
# =============================================================================
# These models describe the locally cached authenticated identity:
# - UserRole: Enum for profile roles
# - Session: What the Session Store holds for the signed-in user
#
# A Session is created on app start (hydrate) or sign-in and cleared on
# sign-out or when the backend reports no session.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """
    Roles stored in profiles.role.

    - user: buyers and sellers
    - admin: may open the admin dashboard
    """
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: str | None) -> "UserRole":
        """Map a raw profile value to a role, defaulting to USER."""
        try:
            return cls(value)
        except ValueError:
            return cls.USER


class Session(BaseModel):
    """
    Locally cached representation of the authenticated identity.

    `role` is only trusted once `loaded` is True, i.e. after a profile
    fetch keyed by `user_id` succeeded.

    Example:
        {
            "user_id": "550e8400-e29b-41d4-a716-446655440000",
            "email": "buyer@example.com",
            "role": "user",
            "loaded": true
        }
    """

    user_id: str = Field(
        ...,
        min_length=1,
        description="Supabase auth user id"
    )

    email: str | None = Field(
        default=None,
        description="Email address from the auth user"
    )

    role: UserRole = Field(
        default=UserRole.USER,
        description="Role from the profiles table"
    )

    loaded: bool = Field(
        default=False,
        description="True once the profile (and therefore role) was fetched"
    )

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        """Admin only when the role came from a successful profile fetch."""
        return self.loaded and self.role == UserRole.ADMIN
