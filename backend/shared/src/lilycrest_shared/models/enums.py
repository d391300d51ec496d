"""Enumeration types for Lilycrest data models."""

from enum import Enum


class ReservationStatus(str, Enum):
    """Coarse lifecycle label of a reservation."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked-in"
    CHECKED_OUT = "checked-out"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    """Payment status for a reservation."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class Branch(str, Enum):
    """Physical dormitory locations."""

    GIL_PUYAT = "gil-puyat"
    GUADALUPE = "guadalupe"

    @property
    def display_name(self) -> str:
        return "Gil Puyat" if self is Branch.GIL_PUYAT else "Guadalupe"


class RoomType(str, Enum):
    """Room occupancy types."""

    PRIVATE = "private"
    DOUBLE_SHARING = "double-sharing"
    QUADRUPLE_SHARING = "quadruple-sharing"


class ViewingType(str, Enum):
    """How the tenant views the room before applying."""

    IN_PERSON = "inperson"
    VIRTUAL = "virtual"
    NONE = "none"


class UserRole(str, Enum):
    """Role strings stored on user records."""

    USER = "user"
    TENANT = "tenant"
    ADMIN = "admin"
    SUPER_ADMIN = "superAdmin"


class ProgressStep(str, Enum):
    """The six stages of the reservation progress tracker, in pipeline order."""

    ROOM_SELECTED = "room_selected"
    VISIT_SCHEDULED = "visit_scheduled"
    VISIT_COMPLETED = "visit_completed"
    APPLICATION_SUBMITTED = "application_submitted"
    PAYMENT_SUBMITTED = "payment_submitted"
    CONFIRMED = "confirmed"


class StepStatus(str, Enum):
    """Display status of a single progress step."""

    COMPLETED = "completed"
    CURRENT = "current"
    LOCKED = "locked"
    PENDING_APPROVAL = "pending_approval"
    REJECTED = "rejected"


class ActionKind(str, Enum):
    """What the next recommended action does when triggered."""

    BROWSE_ROOMS = "browse_rooms"
    OPEN_STEP = "open_step"
    NOTICE = "notice"
    VIEW_DETAILS = "view_details"


class StepClick(str, Enum):
    """Outcome of clicking a step in the progress tracker."""

    NAVIGATE = "navigate"
    BROWSE_ROOMS = "browse_rooms"
    NOTICE = "notice"
    IGNORED = "ignored"
