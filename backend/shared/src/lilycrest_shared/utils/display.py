"""Placeholder-safe accessors for rendering partial reservation records.

Every helper here returns a string. Missing or malformed values degrade to a
placeholder ("N/A" by default, "TBD" for dates not yet decided) instead of
raising.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from lilycrest_shared.models.reservation import Reservation

NOT_AVAILABLE = "N/A"
TO_BE_DETERMINED = "TBD"


def display_value(value: Any, placeholder: str = NOT_AVAILABLE) -> str:
    """Render any scalar, falling back to the placeholder for empty values."""
    if value is None:
        return placeholder
    if hasattr(value, "value"):
        value = value.value
    text = str(value).strip()
    return text or placeholder


def display_date(
    value: Any,
    placeholder: str = NOT_AVAILABLE,
    fmt: str = "%b %d, %Y",
) -> str:
    """Format a date or ISO string, e.g. "Mar 05, 2026"."""
    if isinstance(value, (datetime, date)):
        return value.strftime(fmt)
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime(fmt)
        except ValueError:
            return placeholder
    return placeholder


def display_currency(amount: Any, placeholder: str = NOT_AVAILABLE) -> str:
    """Format an amount in Philippine pesos, e.g. "₱5,400.00"."""
    try:
        return f"₱{float(amount):,.2f}"
    except (TypeError, ValueError):
        return placeholder


def display_room_name(reservation: "Reservation | None") -> str:
    room = reservation.room if reservation else None
    if room is None:
        return NOT_AVAILABLE
    return display_value(room.name or room.room_number)


def display_branch(reservation: "Reservation | None") -> str:
    room = reservation.room if reservation else None
    if room is None or room.branch is None:
        return NOT_AVAILABLE
    return room.branch.display_name


def display_bed(reservation: "Reservation | None") -> str:
    bed = reservation.selected_bed if reservation else None
    if bed is None:
        return NOT_AVAILABLE
    return display_value(bed.position or bed.id)


def display_move_in_date(reservation: "Reservation | None") -> str:
    if reservation is None:
        return TO_BE_DETERMINED
    return display_date(
        reservation.final_move_in_date or reservation.target_move_in_date,
        placeholder=TO_BE_DETERMINED,
    )
