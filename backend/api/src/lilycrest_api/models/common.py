"""Response envelopes shared by every endpoint."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from lilycrest_shared.models.errors import ErrorCode, ErrorResponse

__all__ = [
    "ErrorCode",
    "ErrorResponse",
    "SuccessMessage",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
    "format_validation_errors",
]


class ValidationErrorDetail(BaseModel):
    """Detail of a single validation error."""

    loc: list[str] = Field(
        ...,
        description="Path to the field that failed validation",
        examples=[["query", "branch"]],
    )
    msg: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Error type identifier", examples=["enum"])


class ValidationErrorResponse(BaseModel):
    """Body of HTTP 422 responses, in the same envelope as ErrorResponse."""

    success: bool = False
    error_code: str = "ERR_VALIDATION"
    message: str = "Request validation failed"
    recovery: str = "Check the request parameters and try again"
    details: list[ValidationErrorDetail] = Field(default_factory=list)


class SuccessMessage(BaseModel):
    """Acknowledgement for operations without a data payload (e.g. DELETE)."""

    model_config = ConfigDict(strict=True)

    success: bool = True
    message: str = Field(
        default="Operation completed successfully",
        description="Human-readable success message",
    )


def format_validation_errors(errors: list[Any]) -> ValidationErrorResponse:
    """Convert Pydantic/FastAPI error dicts to a ValidationErrorResponse."""
    details = [
        ValidationErrorDetail(
            loc=[str(loc) for loc in error.get("loc", [])],
            msg=error.get("msg", ""),
            type=error.get("type", ""),
        )
        for error in errors
    ]
    return ValidationErrorResponse(details=details)
