"""Standard error codes for the Lilycrest booking backend.

All services raise BookingError with one of these codes; the API layer
converts them to ErrorResponse bodies with a matching HTTP status.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes."""

    # Reservation error codes (ERR_001-ERR_007)
    RESERVATION_NOT_FOUND = "ERR_001"
    ROOM_NOT_FOUND = "ERR_002"
    ROOM_NOT_AVAILABLE = "ERR_003"
    INVALID_TRANSITION = "ERR_004"
    INVALID_RESERVATION_ID = "ERR_005"
    RESERVATION_ACCESS_DENIED = "ERR_006"
    PAYMENT_STATUS_ADMIN_ONLY = "ERR_007"

    # Authentication/authorization error codes (ERR_AUTH_001-ERR_AUTH_005)
    AUTH_REQUIRED = "ERR_AUTH_001"
    USER_NOT_FOUND = "ERR_AUTH_002"
    ADMIN_REQUIRED = "ERR_AUTH_003"
    BRANCH_ACCESS_DENIED = "ERR_AUTH_004"
    NO_BRANCH_ASSIGNED = "ERR_AUTH_005"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.RESERVATION_NOT_FOUND: "Reservation not found",
    ErrorCode.ROOM_NOT_FOUND: "Room not found",
    ErrorCode.ROOM_NOT_AVAILABLE: "Room is not available for reservation",
    ErrorCode.INVALID_TRANSITION: "This action is not allowed at the reservation's current stage",
    ErrorCode.INVALID_RESERVATION_ID: "Invalid reservation ID format",
    ErrorCode.RESERVATION_ACCESS_DENIED: "You can only manage your own reservations",
    ErrorCode.PAYMENT_STATUS_ADMIN_ONLY: "Payment status can only be set by an admin",
    ErrorCode.AUTH_REQUIRED: "Authentication required to perform this action",
    ErrorCode.USER_NOT_FOUND: "User not found in database",
    ErrorCode.ADMIN_REQUIRED: "Admin access required",
    ErrorCode.BRANCH_ACCESS_DENIED: "You can only manage reservations for your own branch",
    ErrorCode.NO_BRANCH_ASSIGNED: "No branch is assigned to your admin account",
}

# Recovery suggestions shown alongside the message
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.RESERVATION_NOT_FOUND: "Refresh your reservations and try again",
    ErrorCode.ROOM_NOT_FOUND: "Browse the available rooms and pick another",
    ErrorCode.ROOM_NOT_AVAILABLE: "Browse the available rooms and pick another",
    ErrorCode.INVALID_TRANSITION: "Reload the reservation to see its current stage",
    ErrorCode.INVALID_RESERVATION_ID: "Check the reservation ID",
    ErrorCode.RESERVATION_ACCESS_DENIED: "Sign in with the account that made the reservation",
    ErrorCode.PAYMENT_STATUS_ADMIN_ONLY: "Upload your proof of payment and wait for verification",
    ErrorCode.AUTH_REQUIRED: "Sign in and try again",
    ErrorCode.USER_NOT_FOUND: "Complete registration first",
    ErrorCode.ADMIN_REQUIRED: "Ask a super admin for access",
    ErrorCode.BRANCH_ACCESS_DENIED: "Ask an admin of the reservation's branch",
    ErrorCode.NO_BRANCH_ASSIGNED: "Ask a super admin to assign you a branch",
}


class ErrorResponse(BaseModel):
    """Standard error body returned by the API for any BookingError."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "ErrorResponse":
        """Create an ErrorResponse from an error code.

        Args:
            code: The error code
            details: Optional additional context about the error

        Returns:
            An ErrorResponse with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class BookingError(Exception):
    """Exception raised by reservation and room operations."""

    def __init__(
        self,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ):
        self.code = code
        self.message = ERROR_MESSAGES[code]
        self.recovery = ERROR_RECOVERY[code]
        self.details = details
        super().__init__(self.message)

    def to_error_response(self) -> ErrorResponse:
        """Convert this exception to an ErrorResponse."""
        return ErrorResponse.from_code(self.code, self.details)
