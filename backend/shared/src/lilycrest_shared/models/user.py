"""User record linking a Firebase account to a role and branch."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import Branch, UserRole


class User(BaseModel):
    """A registered user as stored in the users table."""

    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(..., description="Primary key")
    firebase_uid: str = Field(..., description="Firebase Auth uid")
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: UserRole = UserRole.USER
    branch: Branch | None = None

    @field_validator("role", mode="before")
    @classmethod
    def _unknown_role_is_user(cls, value: Any) -> Any:
        try:
            return UserRole(value)
        except ValueError:
            return UserRole.USER

    @field_validator("branch", mode="before")
    @classmethod
    def _unknown_branch_is_none(cls, value: Any) -> Any:
        try:
            return Branch(value) if value else None
        except ValueError:
            return None
