"""Room model with bed-level occupancy checks."""

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

from .enums import Branch, RoomType


class Bed(BaseModel):
    """A single bed inside a shared room."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    id: str | None = None
    position: str | None = None
    available: bool = True


class Room(BaseModel):
    """A dormitory room listing.

    Accepts both the camelCase records served by the web API and the
    snake_case items stored in DynamoDB.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("id", "_id", "room_id", "roomId"),
    )
    name: str | None = None
    room_number: str | None = None
    description: str = ""
    branch: Branch | None = None
    type: RoomType | None = None
    price: float | None = Field(default=None, ge=0)
    monthly_price: float | None = None
    deposit: float | None = None
    capacity: int = Field(default=0, ge=0)
    current_occupancy: int = Field(default=0, ge=0)
    amenities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    beds: list[Bed] = Field(default_factory=list)
    available: bool = True
    is_archived: bool = False

    @field_validator("branch", "type", mode="before")
    @classmethod
    def _unknown_choice_to_none(cls, value: Any, info: ValidationInfo) -> Any:
        enum_cls = Branch if info.field_name == "branch" else RoomType
        if value is None or isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            return None

    @field_validator("room_number", mode="before")
    @classmethod
    def _room_number_as_str(cls, value: Any) -> Any:
        if value is None:
            return None
        return str(value)

    @property
    def total_beds(self) -> int:
        """Number of beds, falling back to capacity when no beds are listed."""
        return len(self.beds) if self.beds else self.capacity

    @property
    def occupied_beds(self) -> int:
        """Number of taken beds, falling back to current occupancy."""
        if self.beds:
            return sum(1 for bed in self.beds if not bed.available)
        return self.current_occupancy

    @property
    def available_slots(self) -> int:
        return max(0, self.total_beds - self.occupied_beds)

    @property
    def is_full(self) -> bool:
        return self.occupied_beds >= self.total_beds

    @property
    def is_overbooked(self) -> bool:
        """True when more beds are occupied than the room holds.

        This is a validation signal only; nothing corrects the counts.
        """
        return self.occupied_beds > self.total_beds

    @property
    def requires_bed_selection(self) -> bool:
        return len(self.beds) > 1

    def occupancy_warning(self) -> str | None:
        """Warning text for admin listings, or None when counts are sane."""
        if not self.is_overbooked:
            return None
        return (
            f"Room {self.name or self.room_number or self.id or 'N/A'} is overbooked: "
            f"{self.occupied_beds} occupied of {self.total_beds} beds"
        )
