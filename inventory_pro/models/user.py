"""
User and preference data models.
"""

from enum import Enum

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Dashboard roles."""
    ADMIN = "admin"
    STAFF = "staff"


class User(BaseModel):
    """An authenticated dashboard user."""

    id: str
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    role: UserRole

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class NotificationSettings(BaseModel):
    """Which channels alerts are delivered to."""

    browser: bool = True
    email: bool = True
    slack: bool = False

    def enabled_channels(self) -> list:
        """Names of the enabled channels, in dispatch order."""
        return [name for name in ("browser", "email", "slack") if getattr(self, name)]
