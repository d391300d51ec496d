"""Validated writes that move a reservation through the pipeline.

The progress tracker never writes; it reads the flags set here:

- approve_schedule  -> schedule_approved
- reject_schedule   -> schedule_rejected (+ reason, timestamp)
- complete_visit    -> visit_approved (+ visit_completed_at)
- verify_payment    -> payment_status=paid, status=confirmed
- reject_payment    -> payment_status=pending, proof cleared

Tenants create reservations and fill in each stage through
update_reservation; each field is accepted only while its stage is open.

Admins act only on reservations whose room belongs to their branch, and an
admin without a branch acts on none; super admins act on every branch.
Tenants may delete their own reservations.
"""

from datetime import UTC, datetime
from typing import Any, NoReturn

from lilycrest_shared.models.enums import (
    PaymentStatus,
    ProgressStep,
    ReservationStatus,
    StepStatus,
    ViewingType,
)
from lilycrest_shared.models.errors import BookingError, ErrorCode
from lilycrest_shared.models.reservation import (
    Reservation,
    ReservationChanges,
    ReservationDraft,
    SelectedBed,
)
from lilycrest_shared.models.room import Room
from lilycrest_shared.models.session import Session
from lilycrest_shared.services.progress import ReservationProgressModel
from lilycrest_shared.services.reservations import ReservationRepository
from lilycrest_shared.utils.logging import get_logger, log_reservation_transition

logger = get_logger(__name__)

DEFAULT_REJECTION_REASON = "No reason provided"

_CLOSED_STATUSES = (ReservationStatus.CANCELLED, ReservationStatus.COMPLETED)

_VISIT_FIELDS = frozenset(
    {"agreed_to_privacy", "viewing_type", "is_out_of_town", "current_location"}
)
_APPLICATION_FIELDS = frozenset(
    {"first_name", "last_name", "mobile_number", "emergency_contact", "address"}
)
_PAYMENT_FIELDS = frozenset({"proof_of_payment_url", "payment_method"})


class ReservationWorkflow:
    """Validated writes for tenants and for the admin visit and payment queues."""

    def __init__(
        self,
        reservations: ReservationRepository,
        progress: ReservationProgressModel | None = None,
    ) -> None:
        self.reservations = reservations
        self.progress = progress or ReservationProgressModel()

    # Access checks

    def _check_branch(self, reservation: Reservation, session: Session) -> None:
        branch = session.branch_filter
        if branch is None:
            return
        if reservation.room is None or reservation.room.branch != branch:
            raise BookingError(
                code=ErrorCode.BRANCH_ACCESS_DENIED,
                details={"branch": branch.value},
            )

    def _load_for_admin(self, reservation_id: str, session: Session) -> Reservation:
        if not session.is_admin:
            raise BookingError(code=ErrorCode.ADMIN_REQUIRED)

        reservation = self.reservations.get(reservation_id)
        if reservation is None:
            raise BookingError(
                code=ErrorCode.RESERVATION_NOT_FOUND,
                details={"reservation_id": reservation_id},
            )
        self._check_branch(reservation, session)

        if reservation.coarse_status in _CLOSED_STATUSES:
            self._refuse(
                "load",
                reservation,
                session,
                f"reservation is {reservation.coarse_status.value}",
            )
        return reservation

    def _refuse(
        self,
        transition: str,
        reservation: Reservation,
        session: Session,
        reason: str,
    ) -> NoReturn:
        log_reservation_transition(
            logger,
            transition,
            reservation_id=reservation.id or "unknown",
            actor_id=session.user_id,
            error=reason,
        )
        raise BookingError(
            code=ErrorCode.INVALID_TRANSITION,
            details={"transition": transition, "reason": reason},
        )

    def _apply(
        self,
        transition: str,
        reservation: Reservation,
        session: Session,
        fields: dict[str, Any],
        reason: str | None = None,
    ) -> Reservation:
        reservation_id = reservation.id or ""
        updated = self.reservations.update_fields(reservation_id, fields)
        if updated is None:
            raise BookingError(
                code=ErrorCode.RESERVATION_NOT_FOUND,
                details={"reservation_id": reservation_id},
            )
        log_reservation_transition(
            logger,
            transition,
            reservation_id=reservation_id,
            actor_id=session.user_id,
            branch=reservation.room.branch.value
            if reservation.room and reservation.room.branch
            else None,
            reason=reason,
        )
        return updated

    # Visit schedule

    def approve_schedule(self, reservation_id: str, session: Session) -> Reservation:
        reservation = self._load_for_admin(reservation_id, session)
        if reservation.agreed_to_privacy is not True or reservation.viewing_type not in (
            ViewingType.IN_PERSON,
            ViewingType.VIRTUAL,
        ):
            self._refuse(
                "approve_schedule", reservation, session, "no visit has been scheduled"
            )

        return self._apply(
            "approve_schedule",
            reservation,
            session,
            {
                "schedule_approved": True,
                "schedule_rejected": False,
                "schedule_rejection_reason": None,
                "schedule_rejected_at": None,
            },
        )

    def reject_schedule(
        self,
        reservation_id: str,
        session: Session,
        reason: str | None = None,
    ) -> Reservation:
        reservation = self._load_for_admin(reservation_id, session)
        if reservation.visit_approved is True:
            self._refuse(
                "reject_schedule", reservation, session, "visit is already completed"
            )

        reason = (reason or "").strip() or DEFAULT_REJECTION_REASON
        return self._apply(
            "reject_schedule",
            reservation,
            session,
            {
                "schedule_rejected": True,
                "schedule_rejection_reason": reason,
                "schedule_rejected_at": datetime.now(UTC).isoformat(),
                "schedule_approved": False,
                "viewing_type": None,
            },
            reason=reason,
        )

    def complete_visit(self, reservation_id: str, session: Session) -> Reservation:
        reservation = self._load_for_admin(reservation_id, session)
        if reservation.schedule_approved is not True or reservation.schedule_rejected is True:
            self._refuse(
                "complete_visit", reservation, session, "visit schedule is not approved"
            )

        return self._apply(
            "complete_visit",
            reservation,
            session,
            {
                "visit_approved": True,
                "visit_completed_at": datetime.now(UTC).isoformat(),
            },
        )

    # Payment

    def verify_payment(self, reservation_id: str, session: Session) -> Reservation:
        reservation = self._load_for_admin(reservation_id, session)
        if not reservation.has_submitted_payment:
            self._refuse(
                "verify_payment", reservation, session, "no proof of payment uploaded"
            )

        return self._apply(
            "verify_payment",
            reservation,
            session,
            {
                "payment_status": PaymentStatus.PAID.value,
                "status": ReservationStatus.CONFIRMED.value,
                "approved_date": datetime.now(UTC).isoformat(),
            },
        )

    def reject_payment(
        self,
        reservation_id: str,
        session: Session,
        reason: str | None = None,
    ) -> Reservation:
        reservation = self._load_for_admin(reservation_id, session)
        if not reservation.has_submitted_payment:
            self._refuse(
                "reject_payment", reservation, session, "no proof of payment uploaded"
            )
        if reservation.payment_status == PaymentStatus.PAID:
            self._refuse("reject_payment", reservation, session, "payment already verified")

        reason = (reason or "").strip() or DEFAULT_REJECTION_REASON
        return self._apply(
            "reject_payment",
            reservation,
            session,
            {
                "payment_status": PaymentStatus.PENDING.value,
                "proof_of_payment_url": None,
                "notes": f"Payment rejected: {reason}",
            },
            reason=reason,
        )

    # Tenant writes

    @staticmethod
    def _check_bed(room: Room, bed: SelectedBed | None) -> None:
        if bed is None or not room.beds:
            return
        match = next((b for b in room.beds if b.id == bed.id), None)
        if match is None or not match.available:
            raise BookingError(
                code=ErrorCode.ROOM_NOT_AVAILABLE,
                details={"room_id": room.id or "", "bed_id": bed.id or ""},
            )

    def create_reservation(self, session: Session, draft: ReservationDraft) -> Reservation:
        """Reserve a room for the signed-in tenant.

        The room must exist, be open for booking and have a free bed; a
        selected bed must be one of the room's free beds.
        """
        room = self.reservations.rooms.get(draft.room_id)
        if room is None or room.is_archived:
            raise BookingError(
                code=ErrorCode.ROOM_NOT_FOUND, details={"room_id": draft.room_id}
            )
        if not room.available or (room.total_beds > 0 and room.is_full):
            raise BookingError(
                code=ErrorCode.ROOM_NOT_AVAILABLE, details={"room_id": draft.room_id}
            )
        self._check_bed(room, draft.selected_bed)

        fields = draft.model_dump(mode="json", exclude_none=True)
        fields.update(
            user_id=session.user_id,
            status=ReservationStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
        )
        price = room.monthly_price if room.monthly_price is not None else room.price
        if price is not None:
            fields["total_price"] = price

        reservation = self.reservations.create(fields)
        log_reservation_transition(
            logger,
            "create",
            reservation_id=reservation.id or "unknown",
            actor_id=session.user_id,
            branch=room.branch.value if room.branch else None,
        )
        return reservation

    def update_reservation(
        self,
        reservation_id: str,
        session: Session,
        changes: ReservationChanges,
    ) -> Reservation:
        """Apply a tenant's changes to their own reservation.

        Field groups open and close with the tracker stages:

        - visit fields until the visit is completed; picking a new viewing
          type clears a rejection and asks for approval again
        - application fields while the application step is current or
          still editable (no proof of payment yet)
        - payment fields while the payment step is current

        Payment status is admin-only; a tenant may only send "pending",
        which is ignored.
        """
        reservation = self.reservations.get(reservation_id)
        if reservation is None:
            raise BookingError(
                code=ErrorCode.RESERVATION_NOT_FOUND,
                details={"reservation_id": reservation_id},
            )
        if reservation.user_id != session.user_id:
            raise BookingError(code=ErrorCode.RESERVATION_ACCESS_DENIED)
        if changes.payment_status not in (None, PaymentStatus.PENDING):
            raise BookingError(code=ErrorCode.PAYMENT_STATUS_ADMIN_ONLY)
        if reservation.coarse_status in _CLOSED_STATUSES:
            self._refuse(
                "update",
                reservation,
                session,
                f"reservation is {reservation.coarse_status.value}",
            )

        fields = changes.sent_fields()
        fields.pop("payment_status", None)
        if not fields:
            return reservation

        steps = {
            view.step: view for view in self.progress.compute_progress(reservation).steps
        }

        if _VISIT_FIELDS & fields.keys():
            if reservation.visit_approved is True:
                self._refuse(
                    "update_visit", reservation, session, "visit is already completed"
                )
            current_type = reservation.viewing_type.value if reservation.viewing_type else None
            if "viewing_type" in fields and (
                reservation.schedule_rejected is True
                or fields["viewing_type"] != current_type
            ):
                fields.update(
                    schedule_rejected=False,
                    schedule_approved=False,
                    schedule_rejection_reason=None,
                    schedule_rejected_at=None,
                )

        if _APPLICATION_FIELDS & fields.keys():
            application = steps[ProgressStep.APPLICATION_SUBMITTED]
            if application.status != StepStatus.CURRENT and not application.editable:
                self._refuse(
                    "update_application",
                    reservation,
                    session,
                    "application is not open for changes",
                )

        if _PAYMENT_FIELDS & fields.keys():
            if steps[ProgressStep.PAYMENT_SUBMITTED].status != StepStatus.CURRENT:
                self._refuse(
                    "submit_payment", reservation, session, "payment is not open"
                )
            if fields.get("proof_of_payment_url"):
                fields.update(
                    payment_date=datetime.now(UTC).isoformat(),
                    payment_status=PaymentStatus.PENDING.value,
                )

        if (
            "selected_bed" in fields
            and reservation.room is not None
            and changes.selected_bed != reservation.selected_bed
        ):
            self._check_bed(reservation.room, changes.selected_bed)

        return self._apply("update", reservation, session, fields)

    # Removal

    def delete_reservation(self, reservation_id: str, session: Session) -> None:
        """Delete a reservation as its owner or as an admin of its branch."""
        reservation = self.reservations.get(reservation_id)
        if reservation is None:
            raise BookingError(
                code=ErrorCode.RESERVATION_NOT_FOUND,
                details={"reservation_id": reservation_id},
            )

        if session.is_admin:
            self._check_branch(reservation, session)
        elif reservation.user_id != session.user_id:
            raise BookingError(code=ErrorCode.RESERVATION_ACCESS_DENIED)

        if not self.reservations.delete(reservation_id):
            raise BookingError(
                code=ErrorCode.RESERVATION_NOT_FOUND,
                details={"reservation_id": reservation_id},
            )
        log_reservation_transition(
            logger,
            "delete",
            reservation_id=reservation_id,
            actor_id=session.user_id,
        )
