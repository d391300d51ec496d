"""Signed-in identity passed explicitly to request handlers."""

from typing import Callable

from pydantic import BaseModel, ConfigDict

from .enums import Branch, UserRole
from .errors import BookingError, ErrorCode


class Session(BaseModel):
    """Who is calling, resolved once at the API boundary.

    `token_provider` returns the caller's Firebase ID token for any
    downstream call that needs to act on their behalf.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    user_id: str
    firebase_uid: str
    role: UserRole = UserRole.USER
    branch: Branch | None = None
    token_provider: Callable[[], str | None] | None = None

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.SUPER_ADMIN)

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    @property
    def branch_filter(self) -> Branch | None:
        """Branch an admin is restricted to; None only for super admins.

        Raises:
            BookingError: NO_BRANCH_ASSIGNED for an admin without a branch.
        """
        if self.role != UserRole.ADMIN:
            return None
        if self.branch is None:
            raise BookingError(code=ErrorCode.NO_BRANCH_ASSIGNED)
        return self.branch

    def id_token(self) -> str | None:
        return self.token_provider() if self.token_provider else None
