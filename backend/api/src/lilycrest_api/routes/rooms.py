"""Room listing endpoint.

Public: the room browser is shown before sign-in.
"""

from fastapi import APIRouter, Depends, Query

from lilycrest_api.dependencies import get_room_repository
from lilycrest_api.models.rooms import RoomListing, RoomListResponse
from lilycrest_shared.models.enums import Branch
from lilycrest_shared.services.rooms import RoomRepository
from lilycrest_shared.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["rooms"])


@router.get(
    "/rooms",
    summary="List rooms",
    description="""
List non-archived rooms, optionally for one branch.

Each listing carries bed counts derived from the room's beds (or its
capacity/occupancy counters when it has none). Rooms with more occupied beds
than total beds are still returned, flagged with `is_overbooked` and a
`warning` message.
""",
    response_model=RoomListResponse,
    responses={422: {"description": "Unknown branch"}},
)
async def list_rooms(
    branch: Branch | None = Query(default=None, description="Branch slug"),
    rooms: RoomRepository = Depends(get_room_repository),
) -> RoomListResponse:
    listings = [RoomListing.from_room(room) for room in rooms.get_all(branch=branch)]
    for listing in listings:
        if listing.warning:
            logger.warning(
                "room_overbooked",
                extra={"room_id": listing.id, "warning": listing.warning},
            )
    return RoomListResponse(rooms=listings, total=len(listings))
