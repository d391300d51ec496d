"""Tenant reservation endpoints.

Provides REST endpoints for:
- Listing the signed-in tenant's reservations (all, or only active ones)
- Creating a reservation and filling in its stages
- The progress tracker view for one active reservation
- Deleting a reservation (owner, or an admin of the room's branch)

All endpoints require a signed-in user; see lilycrest_api.security.
"""

import re

from botocore.exceptions import ClientError
from fastapi import APIRouter, Depends, Query

from lilycrest_api.dependencies import (
    get_progress_model,
    get_reservation_repository,
    get_reservation_workflow,
)
from lilycrest_api.models.common import SuccessMessage
from lilycrest_api.models.reservations import ReservationListResponse, TrackerResponse
from lilycrest_api.security import get_session
from lilycrest_shared.models.errors import BookingError, ErrorCode
from lilycrest_shared.models.reservation import (
    Reservation,
    ReservationChanges,
    ReservationDraft,
    ReservationSummary,
)
from lilycrest_shared.models.session import Session
from lilycrest_shared.services.progress import ReservationProgressModel
from lilycrest_shared.services.reservation_workflow import ReservationWorkflow
from lilycrest_shared.services.dynamodb import UnprocessedKeysError
from lilycrest_shared.services.reservations import ReservationRepository
from lilycrest_shared.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["reservations"])

_RESERVATION_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def validate_reservation_id(reservation_id: str) -> str:
    if not _RESERVATION_ID_PATTERN.match(reservation_id):
        raise BookingError(code=ErrorCode.INVALID_RESERVATION_ID)
    return reservation_id


@router.get(
    "/reservations",
    summary="List my reservations",
    description="All of the signed-in tenant's reservations, newest first.",
    response_model=ReservationListResponse,
    responses={
        401: {"description": "Not signed in"},
        404: {"description": "User record not found"},
    },
)
async def list_my_reservations(
    session: Session = Depends(get_session),
    repository: ReservationRepository = Depends(get_reservation_repository),
) -> ReservationListResponse:
    return ReservationListResponse.of(repository.get_all_for_user(session.user_id))


@router.get(
    "/reservations/active",
    summary="List my active reservations",
    description="Reservations that are neither completed nor cancelled, newest first.",
    response_model=ReservationListResponse,
)
async def list_my_active_reservations(
    session: Session = Depends(get_session),
    repository: ReservationRepository = Depends(get_reservation_repository),
    model: ReservationProgressModel = Depends(get_progress_model),
) -> ReservationListResponse:
    active = model.select_active_reservations(
        repository.get_all_for_user(session.user_id)
    )
    return ReservationListResponse.of(active)


@router.post(
    "/reservations",
    status_code=201,
    summary="Reserve a room",
    description="""
Create a reservation for the signed-in tenant.

The room must be open for booking with a free bed; when the room lists
beds, `selectedBed` must be one of the free ones. Status and payment status
always start as `pending`.
""",
    response_model=Reservation,
    responses={
        401: {"description": "Not signed in"},
        404: {"description": "Room not found"},
        409: {"description": "Room or bed not available"},
    },
)
async def create_reservation(
    draft: ReservationDraft,
    session: Session = Depends(get_session),
    workflow: ReservationWorkflow = Depends(get_reservation_workflow),
) -> Reservation:
    return workflow.create_reservation(session, draft)


@router.patch(
    "/reservations/{reservation_id}",
    summary="Update my reservation",
    description="""
Fill in the tracker stages of the tenant's own reservation.

- Visit fields (`agreedToPrivacy`, `viewingType`, ...) until the visit is
  completed. Choosing a new viewing type clears a rejected schedule and
  sends it back for approval.
- Application fields while the application step is current or editable.
- `proofOfPaymentUrl` while the payment step is current.

`paymentStatus` can only be set by an admin.
""",
    response_model=Reservation,
    responses={
        400: {"description": "Malformed reservation ID"},
        403: {"description": "Not the owner, or payment status sent"},
        404: {"description": "Reservation not found"},
        409: {"description": "Stage not open for these fields"},
    },
)
async def update_reservation(
    changes: ReservationChanges,
    reservation_id: str = Depends(validate_reservation_id),
    session: Session = Depends(get_session),
    workflow: ReservationWorkflow = Depends(get_reservation_workflow),
) -> Reservation:
    return workflow.update_reservation(reservation_id, session, changes)


@router.get(
    "/reservations/progress",
    summary="Reservation progress tracker",
    description="""
The six-stage tracker for one of the tenant's active reservations.

**Selection:** `reservation_id` picks the tracked reservation. When it is
missing or no longer active (for example after a cancellation), the newest
active reservation is tracked instead.

**Empty state:** with no active reservations, `progress.has_reservation` is
false and the next action is to browse rooms. Storage failures render the
same empty state rather than an error.
""",
    response_model=TrackerResponse,
)
async def get_progress(
    reservation_id: str | None = Query(
        default=None, description="Reservation the tenant selected"
    ),
    session: Session = Depends(get_session),
    repository: ReservationRepository = Depends(get_reservation_repository),
    model: ReservationProgressModel = Depends(get_progress_model),
) -> TrackerResponse:
    reservations: list[Reservation]
    try:
        reservations = repository.get_all_for_user(session.user_id)
    except ClientError as e:
        logger.warning(
            "tracker_fetch_failed",
            extra={
                "user_id": session.user_id,
                "error_code": e.response.get("Error", {}).get("Code"),
            },
        )
        reservations = []
    except UnprocessedKeysError as e:
        logger.warning(
            "tracker_fetch_failed",
            extra={"user_id": session.user_id, "unprocessed_keys": e.remaining},
        )
        reservations = []

    active = model.select_active_reservations(reservations)
    tracked = model.resolve_tracked_reservation(active, reservation_id)
    progress = model.compute_progress(tracked)

    return TrackerResponse(
        active_reservations=[ReservationSummary.from_reservation(r) for r in active],
        tracked_reservation_id=tracked.id if tracked else None,
        reservation=tracked,
        progress=progress,
        next_action=model.next_action(tracked),
        step_clicks={
            view.step: model.resolve_step_click(view, progress.has_reservation)
            for view in progress.steps
        },
    )


@router.delete(
    "/reservations/{reservation_id}",
    summary="Delete reservation",
    description="Delete a reservation. Tenants may delete their own; admins those in their branch.",
    response_model=SuccessMessage,
    responses={
        400: {"description": "Malformed reservation ID"},
        403: {"description": "Not the owner, or a different branch"},
        404: {"description": "Reservation not found"},
    },
)
async def delete_reservation(
    reservation_id: str = Depends(validate_reservation_id),
    session: Session = Depends(get_session),
    workflow: ReservationWorkflow = Depends(get_reservation_workflow),
) -> SuccessMessage:
    workflow.delete_reservation(reservation_id, session)
    return SuccessMessage(message="Reservation deleted")
