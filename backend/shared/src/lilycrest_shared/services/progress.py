"""Reservation progress tracker.

Derives the six-stage tracker shown in the tenant portal from a reservation
snapshot:

    room_selected -> visit_scheduled -> visit_completed
        -> application_submitted -> payment_submitted -> confirmed

The pipeline is not stored anywhere. Each stage is inferred from flags the
backend sets as side effects of earlier actions, so this module is pure: no
I/O, no hidden state, and the same snapshot always yields an equal result.

Stage walk:
- Lenient (default): every stage predicate is checked on its own and the
  current index is the highest stage whose predicate holds. This matches how
  existing records have always been displayed, including records where a later
  flag was written without an earlier one.
- Strict: the walk stops at the first stage whose predicate fails.
"""

from collections.abc import Iterable
from datetime import datetime

from lilycrest_shared.models.enums import (
    ActionKind,
    ProgressStep,
    ReservationStatus,
    StepClick,
    StepStatus,
    ViewingType,
)
from lilycrest_shared.models.progress import (
    STEP_ORDER,
    DerivedProgress,
    NextAction,
    StepView,
)
from lilycrest_shared.models.reservation import Reservation
from lilycrest_shared.utils.logging import get_logger

logger = get_logger(__name__)

NEXT_ACTIONS: dict[ProgressStep | None, NextAction] = {
    None: NextAction(
        title="Start Your Reservation",
        description="Browse the available rooms in Gil Puyat and Guadalupe to get started.",
        button_text="Browse Rooms",
        target_step=ProgressStep.ROOM_SELECTED,
        kind=ActionKind.BROWSE_ROOMS,
    ),
    ProgressStep.ROOM_SELECTED: NextAction(
        title="Schedule a Visit",
        description="Agree to our policies and pick an in-person or virtual viewing.",
        button_text="Schedule Visit",
        target_step=ProgressStep.VISIT_SCHEDULED,
        kind=ActionKind.OPEN_STEP,
    ),
    ProgressStep.VISIT_SCHEDULED: NextAction(
        title="Complete Your Visit",
        description=(
            "Your viewing schedule is with our team. Once it is approved, attend "
            "the visit and we will mark it complete."
        ),
        button_text="View Visit Status",
        target_step=ProgressStep.VISIT_COMPLETED,
        kind=ActionKind.NOTICE,
    ),
    ProgressStep.VISIT_COMPLETED: NextAction(
        title="Submit Your Application",
        description="Fill in your personal details, emergency contact and address.",
        button_text="Fill Application",
        target_step=ProgressStep.APPLICATION_SUBMITTED,
        kind=ActionKind.OPEN_STEP,
    ),
    ProgressStep.APPLICATION_SUBMITTED: NextAction(
        title="Upload Proof of Payment",
        description="Pay the reservation fee and upload your receipt to secure the room.",
        button_text="Submit Payment",
        target_step=ProgressStep.PAYMENT_SUBMITTED,
        kind=ActionKind.OPEN_STEP,
    ),
    ProgressStep.PAYMENT_SUBMITTED: NextAction(
        title="Payment Under Review",
        description="We are verifying your payment. You will be notified once it is confirmed.",
        button_text="View Payment Status",
        target_step=ProgressStep.CONFIRMED,
        kind=ActionKind.NOTICE,
    ),
    ProgressStep.CONFIRMED: NextAction(
        title="Reservation Confirmed!",
        description="Your room is reserved. See you on move-in day.",
        button_text="View Details",
        target_step=ProgressStep.CONFIRMED,
        kind=ActionKind.VIEW_DETAILS,
    ),
}

RESCHEDULE_ACTION = NextAction(
    title="Reschedule Your Visit",
    description="Your viewing schedule was declined. Pick a new schedule to continue.",
    button_text="Reschedule Visit",
    target_step=ProgressStep.VISIT_SCHEDULED,
    kind=ActionKind.OPEN_STEP,
)


class ReservationProgressModel:
    """Builds tracker views from reservation snapshots."""

    TERMINAL_STATUSES = frozenset(
        {ReservationStatus.COMPLETED, ReservationStatus.CANCELLED}
    )
    SCHEDULED_VIEWING_TYPES = frozenset({ViewingType.IN_PERSON, ViewingType.VIRTUAL})
    DEFAULT_REJECTION_REASON = "No reason provided"

    def __init__(self, strict: bool = False) -> None:
        self.strict = strict

    # Selection

    def select_active_reservations(
        self, reservations: Iterable[Reservation]
    ) -> list[Reservation]:
        """Reservations still worth tracking, in input order."""
        return [
            r for r in reservations if r.coarse_status not in self.TERMINAL_STATUSES
        ]

    def resolve_tracked_reservation(
        self,
        active: list[Reservation],
        selected_id: str | None = None,
    ) -> Reservation | None:
        """Pick the reservation to track.

        Falls back to the first active reservation when `selected_id` is unset
        or no longer active (for example after a cancellation).
        """
        if selected_id:
            for reservation in active:
                if reservation.id == selected_id:
                    return reservation
        return active[0] if active else None

    # Stage predicates

    def _stage_done(self, r: Reservation) -> tuple[bool, ...]:
        return (
            r.room is not None,
            r.agreed_to_privacy is True
            and r.viewing_type in self.SCHEDULED_VIEWING_TYPES
            and r.schedule_rejected is not True,
            r.visit_approved is True,
            r.has_submitted_application,
            r.has_submitted_payment,
            r.is_confirmed,
        )

    def current_step_index(self, r: Reservation | None) -> int:
        if r is None:
            return -1
        index = -1
        for i, done in enumerate(self._stage_done(r)):
            if done:
                index = i
            elif self.strict:
                break
        return index

    # Progress

    def compute_progress(self, r: Reservation | None) -> DerivedProgress:
        index = self.current_step_index(r)
        progress = DerivedProgress(
            current_step_index=index,
            steps=tuple(self._step_views(r, index)),
            has_reservation=r is not None,
        )
        logger.debug(
            "progress_computed",
            extra={
                "reservation_id": r.id if r else None,
                "current_step_index": index,
                "strict": self.strict,
            },
        )
        return progress

    def _step_views(self, r: Reservation | None, index: int) -> list[StepView]:
        rejected = bool(r and r.schedule_rejected is True)
        schedule_approved = bool(r and r.schedule_approved is True)
        paid_in = bool(r and r.has_submitted_payment)
        confirmed = bool(r and r.is_confirmed)

        # room_selected
        room_status = StepStatus.COMPLETED if index >= 0 else StepStatus.CURRENT

        # visit_scheduled
        if rejected:
            visit_scheduled = StepStatus.REJECTED
        elif index >= 1 and schedule_approved:
            visit_scheduled = StepStatus.COMPLETED
        elif index >= 1:
            visit_scheduled = StepStatus.PENDING_APPROVAL
        elif index == 0:
            visit_scheduled = StepStatus.CURRENT
        else:
            visit_scheduled = StepStatus.LOCKED

        # visit_completed
        if index >= 2:
            visit_completed = StepStatus.COMPLETED
        elif index == 1 and schedule_approved:
            visit_completed = StepStatus.PENDING_APPROVAL
        else:
            visit_completed = StepStatus.LOCKED

        # application_submitted
        if index >= 3:
            application = StepStatus.COMPLETED
        elif index == 2:
            application = StepStatus.CURRENT
        else:
            application = StepStatus.LOCKED
        application_editable = index >= 3 and not paid_in and not confirmed

        # payment_submitted
        if paid_in and not confirmed:
            payment = StepStatus.PENDING_APPROVAL
        elif index >= 4 and confirmed:
            payment = StepStatus.COMPLETED
        elif index == 3:
            payment = StepStatus.CURRENT
        else:
            payment = StepStatus.LOCKED

        # confirmed
        if index >= 5:
            confirmation = StepStatus.COMPLETED
        elif paid_in and not confirmed:
            confirmation = StepStatus.PENDING_APPROVAL
        else:
            confirmation = StepStatus.LOCKED

        statuses = (
            room_status,
            visit_scheduled,
            visit_completed,
            application,
            payment,
            confirmation,
        )
        completed_dates = self._completed_dates(r)
        views = []
        for step, status in zip(STEP_ORDER, statuses):
            views.append(
                StepView(
                    step=step,
                    status=status,
                    editable=(
                        step == ProgressStep.APPLICATION_SUBMITTED
                        and application_editable
                    ),
                    rejection_reason=(
                        (r.schedule_rejection_reason or self.DEFAULT_REJECTION_REASON)
                        if r is not None and status == StepStatus.REJECTED
                        else None
                    ),
                    completed_date=(
                        completed_dates.get(step)
                        if status == StepStatus.COMPLETED
                        else None
                    ),
                )
            )
        return views

    @staticmethod
    def _completed_dates(r: Reservation | None) -> dict[ProgressStep, datetime | None]:
        if r is None:
            return {}
        return {
            ProgressStep.ROOM_SELECTED: r.created_at,
            ProgressStep.VISIT_COMPLETED: r.visit_completed_at,
            ProgressStep.PAYMENT_SUBMITTED: r.payment_date,
            ProgressStep.CONFIRMED: r.approved_date,
        }

    # Actions

    def next_action(self, r: Reservation | None) -> NextAction:
        """The one action the tenant should take next."""
        index = self.current_step_index(r)
        if r is not None and r.schedule_rejected is True and index < 2:
            return RESCHEDULE_ACTION
        current = STEP_ORDER[index] if index >= 0 else None
        return NEXT_ACTIONS[current]

    @staticmethod
    def is_step_clickable(step: StepView, has_reservation: bool) -> bool:
        """Whether clicking the step may navigate anywhere.

        Finalised stages stay closed unless explicitly editable, and stages
        waiting on an admin only ever show a notice.
        """
        if not has_reservation:
            return step.step == ProgressStep.ROOM_SELECTED and step.status != StepStatus.LOCKED
        if step.status == StepStatus.LOCKED:
            return False
        if step.status == StepStatus.COMPLETED:
            return step.editable is True
        return step.status in (StepStatus.CURRENT, StepStatus.REJECTED)

    def resolve_step_click(self, step: StepView, has_reservation: bool) -> StepClick:
        if step.step == ProgressStep.ROOM_SELECTED and not has_reservation:
            return StepClick.BROWSE_ROOMS
        if step.status == StepStatus.PENDING_APPROVAL:
            return StepClick.NOTICE
        if self.is_step_clickable(step, has_reservation):
            return StepClick.NAVIGATE
        return StepClick.IGNORED
