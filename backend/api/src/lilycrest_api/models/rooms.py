"""Room listing responses."""

from pydantic import BaseModel, Field

from lilycrest_shared.models import Bed, Branch, Room, RoomType


class RoomListing(BaseModel):
    """A room with its derived occupancy figures.

    `warning` is set when more beds are occupied than the room holds; the
    listing still renders so admins can fix the data.
    """

    id: str | None
    name: str | None
    room_number: str | None
    branch: Branch | None
    type: RoomType | None
    price: float | None
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    beds: list[Bed] = Field(default_factory=list)
    total_beds: int
    occupied_beds: int
    available_slots: int
    is_full: bool
    is_overbooked: bool
    requires_bed_selection: bool
    warning: str | None = None

    @classmethod
    def from_room(cls, room: Room) -> "RoomListing":
        return cls(
            id=room.id,
            name=room.name,
            room_number=room.room_number,
            branch=room.branch,
            type=room.type,
            price=room.price,
            amenities=room.amenities,
            images=room.images,
            beds=room.beds,
            total_beds=room.total_beds,
            occupied_beds=room.occupied_beds,
            available_slots=room.available_slots,
            is_full=room.is_full,
            is_overbooked=room.is_overbooked,
            requires_bed_selection=room.requires_bed_selection,
            warning=room.occupancy_warning(),
        )


class RoomListResponse(BaseModel):
    rooms: list[RoomListing] = Field(default_factory=list)
    total: int = 0
