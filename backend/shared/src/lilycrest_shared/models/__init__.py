"""Pydantic models for Lilycrest data entities."""

from .enums import (
    ActionKind,
    Branch,
    PaymentStatus,
    ProgressStep,
    ReservationStatus,
    RoomType,
    StepClick,
    StepStatus,
    UserRole,
    ViewingType,
)
from .errors import (
    BookingError,
    ErrorCode,
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    ErrorResponse,
)
from .progress import STEP_ORDER, DerivedProgress, NextAction, StepView
from .reservation import (
    Address,
    EmergencyContact,
    Reservation,
    ReservationChanges,
    ReservationDraft,
    ReservationSummary,
    SelectedBed,
    generate_reservation_code,
)
from .room import Bed, Room
from .session import Session
from .user import User

__all__ = [
    # Enums
    "ActionKind",
    "Branch",
    "PaymentStatus",
    "ProgressStep",
    "ReservationStatus",
    "RoomType",
    "StepClick",
    "StepStatus",
    "UserRole",
    "ViewingType",
    # Errors
    "BookingError",
    "ErrorCode",
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    "ErrorResponse",
    # Progress
    "STEP_ORDER",
    "DerivedProgress",
    "NextAction",
    "StepView",
    # Reservation
    "Address",
    "EmergencyContact",
    "Reservation",
    "ReservationChanges",
    "ReservationDraft",
    "ReservationSummary",
    "SelectedBed",
    "generate_reservation_code",
    # Room
    "Bed",
    "Room",
    # Identity
    "Session",
    "User",
]
