"""Back-office endpoints for the visit and payment queues.

Admins see and act on reservations in their own branch; super admins see
every branch and may narrow the listing with ?branch=.
"""

from fastapi import APIRouter, Body, Depends, Query

from lilycrest_api.dependencies import get_reservation_repository, get_reservation_workflow
from lilycrest_api.models.reservations import RejectionRequest, ReservationListResponse
from lilycrest_api.routes.reservations import validate_reservation_id
from lilycrest_api.security import require_admin
from lilycrest_shared.models.enums import Branch
from lilycrest_shared.models.reservation import Reservation
from lilycrest_shared.models.session import Session
from lilycrest_shared.services.reservation_workflow import ReservationWorkflow
from lilycrest_shared.services.reservations import ReservationRepository

router = APIRouter(prefix="/admin/reservations", tags=["admin"])

_TRANSITION_RESPONSES = {
    400: {"description": "Malformed reservation ID"},
    403: {"description": "Not an admin, a different branch, or no branch assigned"},
    404: {"description": "Reservation not found"},
    409: {"description": "Not allowed at the reservation's current stage"},
}


@router.get(
    "",
    summary="List reservations (admin)",
    response_model=ReservationListResponse,
    responses={403: {"description": "Not an admin, or no branch assigned"}},
)
async def list_reservations(
    branch: Branch | None = Query(default=None, description="Super admins only"),
    session: Session = Depends(require_admin),
    repository: ReservationRepository = Depends(get_reservation_repository),
) -> ReservationListResponse:
    scope = branch if session.is_super_admin else session.branch_filter
    return ReservationListResponse.of(repository.get_all(branch=scope))


@router.post(
    "/{reservation_id}/schedule/approve",
    summary="Approve visit schedule",
    response_model=Reservation,
    responses=_TRANSITION_RESPONSES,
)
async def approve_schedule(
    reservation_id: str = Depends(validate_reservation_id),
    session: Session = Depends(require_admin),
    workflow: ReservationWorkflow = Depends(get_reservation_workflow),
) -> Reservation:
    return workflow.approve_schedule(reservation_id, session)


@router.post(
    "/{reservation_id}/schedule/reject",
    summary="Reject visit schedule",
    description="The tenant is asked to pick a new schedule; the reason is shown to them.",
    response_model=Reservation,
    responses=_TRANSITION_RESPONSES,
)
async def reject_schedule(
    reservation_id: str = Depends(validate_reservation_id),
    body: RejectionRequest | None = Body(default=None),
    session: Session = Depends(require_admin),
    workflow: ReservationWorkflow = Depends(get_reservation_workflow),
) -> Reservation:
    return workflow.reject_schedule(reservation_id, session, body.reason if body else None)


@router.post(
    "/{reservation_id}/visit/complete",
    summary="Mark visit completed",
    response_model=Reservation,
    responses=_TRANSITION_RESPONSES,
)
async def complete_visit(
    reservation_id: str = Depends(validate_reservation_id),
    session: Session = Depends(require_admin),
    workflow: ReservationWorkflow = Depends(get_reservation_workflow),
) -> Reservation:
    return workflow.complete_visit(reservation_id, session)


@router.post(
    "/{reservation_id}/payment/verify",
    summary="Verify payment",
    description="Marks the payment as paid and confirms the reservation.",
    response_model=Reservation,
    responses=_TRANSITION_RESPONSES,
)
async def verify_payment(
    reservation_id: str = Depends(validate_reservation_id),
    session: Session = Depends(require_admin),
    workflow: ReservationWorkflow = Depends(get_reservation_workflow),
) -> Reservation:
    return workflow.verify_payment(reservation_id, session)


@router.post(
    "/{reservation_id}/payment/reject",
    summary="Reject payment",
    description="Clears the uploaded proof so the tenant can submit a new one.",
    response_model=Reservation,
    responses=_TRANSITION_RESPONSES,
)
async def reject_payment(
    reservation_id: str = Depends(validate_reservation_id),
    body: RejectionRequest | None = Body(default=None),
    session: Session = Depends(require_admin),
    workflow: ReservationWorkflow = Depends(get_reservation_workflow),
) -> Reservation:
    return workflow.reject_payment(reservation_id, session, body.reason if body else None)
