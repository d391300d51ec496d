"""Reservation record as read by the tenant portal and the progress tracker.

Records arrive from two places: the DynamoDB reservations table (snake_case
items, room joined in by the repository) and JSON payloads in the web API's
camelCase shape with `roomId`/`userId` populated. Both are normalised here so
the view logic never has to guess at shapes.
"""

import re
from datetime import datetime
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from lilycrest_shared.utils.display import (
    display_branch,
    display_move_in_date,
    display_room_name,
    display_value,
)

from .enums import PaymentStatus, ReservationStatus, ViewingType
from .room import Room

_ENUM_FIELDS: dict[str, type] = {
    "status": ReservationStatus,
    "reservation_status": ReservationStatus,
    "payment_status": PaymentStatus,
    "viewing_type": ViewingType,
}


def generate_reservation_code(reservation_id: str | None) -> str:
    """Build a short display code from a reservation id.

    >>> generate_reservation_code("65a1f0c2e4b0a1b2c3d4e5f6")
    'RES-65AE5F6'
    """
    if not reservation_id:
        return "N/A"
    normalized = re.sub(r"[^a-zA-Z0-9]", "", str(reservation_id))
    return f"RES-{normalized[:3].upper()}{normalized[-4:].upper()}"


def _parse_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class _RecordModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class SelectedBed(_RecordModel):
    """Bed picked during room selection when the room requires it."""

    id: str | None = None
    position: str | None = None


class Address(_RecordModel):
    unit_house_no: str | None = None
    street: str | None = None
    barangay: str | None = None
    city: str | None = None
    province: str | None = None


class EmergencyContact(_RecordModel):
    name: str | None = None
    relationship: str | None = None
    contact_number: str | None = None


class Reservation(_RecordModel):
    """A tenant's reservation snapshot.

    Lifecycle flags are written by the backend as side effects of earlier
    actions (schedule approval, visit completion, payment verification).
    This model only reads them.
    """

    id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("id", "_id", "reservation_id", "reservationId"),
    )
    user_id: str | None = None
    room_id: str | None = None
    room: Room | None = None
    selected_bed: SelectedBed | None = None

    # Coarse lifecycle
    status: ReservationStatus | None = None
    reservation_status: ReservationStatus | None = None

    # Visit stage
    agreed_to_privacy: bool | None = None
    viewing_type: ViewingType | None = None
    is_out_of_town: bool | None = None
    current_location: str | None = None
    schedule_approved: bool | None = None
    schedule_rejected: bool | None = None
    schedule_rejection_reason: str | None = None
    schedule_rejected_at: datetime | None = None
    visit_approved: bool | None = None
    visit_completed_at: datetime | None = None

    # Application stage
    first_name: str | None = None
    last_name: str | None = None
    mobile_number: str | None = None
    emergency_contact: EmergencyContact | None = None
    address: Address | None = None

    # Payment stage
    proof_of_payment_url: str | None = None
    payment_method: str | None = None
    payment_date: datetime | None = None
    payment_status: PaymentStatus | None = None

    # Dates and bookkeeping
    target_move_in_date: datetime | None = None
    final_move_in_date: datetime | None = None
    reservation_code: str | None = None
    total_price: float | None = None
    notes: str | None = None
    is_archived: bool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    approved_date: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _unpack_populated_refs(cls, data: Any) -> Any:
        """Split populated `roomId`/`userId` references into ids and objects."""
        if not isinstance(data, dict):
            return data
        data = dict(data)

        room_ref = data.pop("roomId", None)
        if isinstance(room_ref, dict):
            data.setdefault("room", room_ref)
            room_ref = room_ref.get("_id") or room_ref.get("id")
        if room_ref is not None:
            data.setdefault("room_id", str(room_ref))

        user_ref = data.pop("userId", None)
        if isinstance(user_ref, dict):
            user_ref = user_ref.get("_id") or user_ref.get("id")
        if user_ref is not None:
            data.setdefault("user_id", str(user_ref))

        room = data.get("room")
        if room is not None and not isinstance(room, (dict, Room)):
            data["room"] = None
        return data

    @field_validator(
        "status", "reservation_status", "payment_status", "viewing_type", mode="before"
    )
    @classmethod
    def _unknown_choice_to_none(cls, value: Any, info: ValidationInfo) -> Any:
        enum_cls = _ENUM_FIELDS[info.field_name]
        if value is None or isinstance(value, enum_cls):
            return value
        try:
            return enum_cls(value)
        except ValueError:
            return None

    @field_validator(
        "schedule_rejected_at",
        "visit_completed_at",
        "payment_date",
        "target_move_in_date",
        "final_move_in_date",
        "created_at",
        "updated_at",
        "approved_date",
        mode="before",
    )
    @classmethod
    def _lenient_datetime(cls, value: Any) -> datetime | None:
        return _parse_datetime(value)

    @field_validator("selected_bed", "emergency_contact", "address", mode="before")
    @classmethod
    def _drop_malformed_nested(cls, value: Any) -> Any:
        if value is None or isinstance(value, (dict, BaseModel)):
            return value
        return None

    @property
    def coarse_status(self) -> ReservationStatus | None:
        """Authoritative lifecycle label, preferring `reservation_status`."""
        return self.reservation_status or self.status

    @property
    def display_code(self) -> str:
        return self.reservation_code or generate_reservation_code(self.id)

    @property
    def has_submitted_application(self) -> bool:
        return bool(self.first_name) and bool(self.last_name)

    @property
    def has_submitted_payment(self) -> bool:
        return bool(self.proof_of_payment_url)

    @property
    def is_confirmed(self) -> bool:
        return (
            self.coarse_status == ReservationStatus.CONFIRMED
            or self.payment_status == PaymentStatus.PAID
        )


class ReservationSummary(BaseModel):
    """Compact reservation listing for the tenant portal."""

    model_config = ConfigDict(strict=True)

    reservation_id: str | None
    reservation_code: str
    room_name: str
    branch: str
    status: str
    move_in_date: str

    @classmethod
    def from_reservation(cls, reservation: Reservation) -> "ReservationSummary":
        status = reservation.coarse_status
        return cls(
            reservation_id=reservation.id,
            reservation_code=reservation.display_code,
            room_name=display_room_name(reservation),
            branch=display_branch(reservation),
            status=display_value(status.value if status else None),
            move_in_date=display_move_in_date(reservation),
        )


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ReservationDraft(_RequestModel):
    """What a tenant submits when reserving a room.

    Lifecycle fields (status, payment status, approvals) are never taken
    from the tenant; the backend sets them.
    """

    room_id: str = Field(..., min_length=1, max_length=64)
    selected_bed: SelectedBed | None = None
    target_move_in_date: datetime | None = None
    viewing_type: ViewingType | None = None
    is_out_of_town: bool | None = None
    current_location: str | None = Field(default=None, max_length=200)
    agreed_to_privacy: bool = False
    notes: str | None = Field(default=None, max_length=1000)


class ReservationChanges(_RequestModel):
    """Partial update sent by a tenant while moving through the stages.

    Only the fields present in the request are applied; see
    `ReservationWorkflow.update_reservation` for which stage each field
    belongs to.
    """

    # Any open stage
    selected_bed: SelectedBed | None = None
    target_move_in_date: datetime | None = None
    notes: str | None = Field(default=None, max_length=1000)

    # Visit stage
    agreed_to_privacy: bool | None = None
    viewing_type: ViewingType | None = None
    is_out_of_town: bool | None = None
    current_location: str | None = Field(default=None, max_length=200)

    # Application stage
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    mobile_number: str | None = Field(default=None, max_length=20)
    emergency_contact: EmergencyContact | None = None
    address: Address | None = None

    # Payment stage
    proof_of_payment_url: str | None = Field(default=None, max_length=2048)
    payment_method: str | None = Field(default=None, max_length=50)
    payment_status: PaymentStatus | None = None

    def sent_fields(self) -> dict[str, Any]:
        """Fields the client actually sent, in storage (snake_case) form."""
        return self.model_dump(mode="json", include=self.model_fields_set)
