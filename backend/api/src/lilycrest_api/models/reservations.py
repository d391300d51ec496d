"""Request and response models for reservation endpoints."""

from pydantic import BaseModel, Field

from lilycrest_shared.models import (
    DerivedProgress,
    NextAction,
    ProgressStep,
    Reservation,
    ReservationSummary,
    StepClick,
)


class ReservationListResponse(BaseModel):
    """A tenant's (or a branch's) reservations, newest first."""

    reservations: list[Reservation] = Field(default_factory=list)
    total: int = 0

    @classmethod
    def of(cls, reservations: list[Reservation]) -> "ReservationListResponse":
        return cls(reservations=reservations, total=len(reservations))


class TrackerResponse(BaseModel):
    """Everything the tenant dashboard needs to render the progress tracker.

    `step_clicks` tells the client what a click on each stage should do, so
    navigation rules live in one place.
    """

    active_reservations: list[ReservationSummary] = Field(default_factory=list)
    tracked_reservation_id: str | None = None
    reservation: Reservation | None = None
    progress: DerivedProgress
    next_action: NextAction
    step_clicks: dict[ProgressStep, StepClick] = Field(default_factory=dict)


class RejectionRequest(BaseModel):
    """Optional reason attached to a schedule or payment rejection."""

    reason: str | None = Field(
        default=None,
        max_length=500,
        description="Shown to the tenant; defaults to 'No reason provided'",
        examples=["Requested time slot is fully booked"],
    )
