"""Resolving the caller into an explicit Session.

Trust model:
- API Gateway verifies the Firebase ID token with a JWT authorizer
- After verification it injects the token's uid as the x-user-sub header
- The backend trusts that header and looks the user up by firebase_uid

Routes declare `Depends(get_session)` (any signed-in user) or
`Depends(require_admin)` (admin or superAdmin).
"""

from typing import Callable

from fastapi import Depends, Request

from lilycrest_api.dependencies import get_user_repository
from lilycrest_shared.models.errors import BookingError, ErrorCode
from lilycrest_shared.models.session import Session
from lilycrest_shared.services.users import UserRepository
from lilycrest_shared.utils.logging import get_logger

logger = get_logger(__name__)

USER_SUB_HEADER = "x-user-sub"


def _get_header_case_insensitive(request: Request, header_name: str) -> str | None:
    for name, value in request.headers.items():
        if name.lower() == header_name.lower():
            return value.strip() if value else None
    return None


def get_firebase_uid(request: Request) -> str | None:
    """Extract the verified Firebase uid from an API Gateway request.

    Supports two API Gateway configurations:
    1. HTTP API with JWT authorizer: uid mapped to the x-user-sub header
    2. REST API authorizer: claims in event.requestContext.authorizer.claims

    Returns:
        The uid, or None when the request is anonymous.
    """
    uid = _get_header_case_insensitive(request, USER_SUB_HEADER)

    if not uid:
        event = request.scope.get("aws.event", {})
        claims = event.get("requestContext", {}).get("authorizer", {}).get("claims", {})
        uid = claims.get("user_id") or claims.get("sub")

    return uid or None


def bearer_token_provider(request: Request) -> Callable[[], str | None]:
    """Callable returning the request's Firebase ID token, read on demand."""

    def provide() -> str | None:
        authorization = _get_header_case_insensitive(request, "authorization") or ""
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return None
        return token.strip()

    return provide


def get_session(
    request: Request,
    users: UserRepository = Depends(get_user_repository),
) -> Session:
    """Resolve the signed-in user.

    Raises:
        BookingError: AUTH_REQUIRED without a uid, USER_NOT_FOUND when the
            account never completed registration.
    """
    uid = get_firebase_uid(request)
    if not uid:
        logger.warning("auth_uid_missing", extra={"path": request.url.path})
        raise BookingError(code=ErrorCode.AUTH_REQUIRED)

    user = users.get_by_firebase_uid(uid)
    if user is None:
        logger.warning(
            "auth_user_not_found",
            extra={"firebase_uid": uid[:8] + "...", "path": request.url.path},
        )
        raise BookingError(code=ErrorCode.USER_NOT_FOUND)

    return Session(
        user_id=user.user_id,
        firebase_uid=uid,
        role=user.role,
        branch=user.branch,
        token_provider=bearer_token_provider(request),
    )


def require_admin(session: Session = Depends(get_session)) -> Session:
    """Like get_session, but only for admin and superAdmin roles."""
    if not session.is_admin:
        raise BookingError(code=ErrorCode.ADMIN_REQUIRED)
    return session
