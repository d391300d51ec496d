"""Reservation repository backed by the reservations table.

Reservations are stored with a `room_id` reference. Reads join the room
record back in so callers always receive populated snapshots, the same shape
the tenant portal renders.

Items that fail validation are logged and skipped here, at the boundary,
rather than surfacing as errors in the view logic.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from lilycrest_shared.models.enums import Branch
from lilycrest_shared.models.reservation import Reservation
from lilycrest_shared.services.dynamodb import DynamoDBService
from lilycrest_shared.services.rooms import RoomRepository
from lilycrest_shared.utils.logging import get_logger

logger = get_logger(__name__)


class ReservationRepository:
    """Create/read/update/delete access to reservation records."""

    TABLE = "reservations"

    def __init__(self, db: DynamoDBService, rooms: RoomRepository) -> None:
        self.db = db
        self.rooms = rooms

    def _hydrate(self, items: list[dict[str, Any]]) -> list[Reservation]:
        room_ids = [item["room_id"] for item in items if item.get("room_id")]
        rooms = self.rooms.get_many(room_ids) if room_ids else {}

        reservations = []
        for item in items:
            room = rooms.get(item.get("room_id", ""))
            try:
                reservations.append(Reservation.model_validate({**item, "room": room}))
            except ValidationError as e:
                logger.warning(
                    "reservation_record_skipped",
                    extra={
                        "reservation_id": item.get("reservation_id"),
                        "errors": e.error_count(),
                    },
                )
        return reservations

    @staticmethod
    def _newest_first(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
        visible = [item for item in items if not item.get("is_archived")]
        return sorted(visible, key=lambda item: str(item.get("created_at") or ""), reverse=True)

    def get_all_for_user(self, user_id: str) -> list[Reservation]:
        """All non-archived reservations belonging to a tenant, newest first."""
        items = self.db.query_by_gsi(
            table=self.TABLE,
            index_name="user_id-index",
            partition_key_name="user_id",
            partition_key_value=user_id,
        )
        return self._hydrate(self._newest_first(items))

    def get_all(self, branch: Branch | None = None) -> list[Reservation]:
        """All non-archived reservations, optionally limited to one branch."""
        reservations = self._hydrate(self._newest_first(self.db.scan(self.TABLE)))
        if branch is None:
            return reservations
        return [r for r in reservations if r.room is not None and r.room.branch == branch]

    def get(self, reservation_id: str) -> Reservation | None:
        item = self.db.get_item(self.TABLE, {"reservation_id": reservation_id})
        if not item:
            return None
        hydrated = self._hydrate([item])
        return hydrated[0] if hydrated else None

    def create(self, fields: dict[str, Any]) -> Reservation:
        """Store a new reservation under a fresh id and return it populated.

        Raises:
            RuntimeError: The generated id already exists.
        """
        now = datetime.now(UTC).isoformat()
        reservation_id = uuid.uuid4().hex[:24]
        item = {
            **fields,
            "reservation_id": reservation_id,
            "created_at": now,
            "updated_at": now,
        }
        created = self.db.put_item(
            self.TABLE,
            item,
            condition_expression="attribute_not_exists(reservation_id)",
        )
        if not created:
            raise RuntimeError(f"Reservation id collision: {reservation_id}")

        logger.info(
            "reservation_created",
            extra={"reservation_id": reservation_id, "room_id": item.get("room_id")},
        )
        return self._hydrate([item])[0]

    def update_fields(
        self, reservation_id: str, fields: dict[str, Any]
    ) -> Reservation | None:
        """Set (or remove, for None values) fields on an existing reservation.

        Always bumps `updated_at`. Returns None if the reservation does not exist.
        """
        fields = {**fields, "updated_at": datetime.now(UTC).isoformat()}
        set_parts: list[str] = []
        remove_parts: list[str] = []
        names: dict[str, str] = {}
        values: dict[str, Any] = {}

        for i, (name, value) in enumerate(fields.items()):
            names[f"#f{i}"] = name
            if value is None:
                remove_parts.append(f"#f{i}")
            else:
                set_parts.append(f"#f{i} = :v{i}")
                values[f":v{i}"] = value

        expression = "SET " + ", ".join(set_parts)
        if remove_parts:
            expression += " REMOVE " + ", ".join(remove_parts)

        attrs = self.db.update_item(
            table=self.TABLE,
            key={"reservation_id": reservation_id},
            update_expression=expression,
            expression_attribute_values=values,
            expression_attribute_names=names,
            condition_expression="attribute_exists(reservation_id)",
        )
        if attrs is None:
            return None
        hydrated = self._hydrate([attrs])
        return hydrated[0] if hydrated else None

    def delete(self, reservation_id: str) -> bool:
        """Remove a reservation. Returns False if it did not exist."""
        deleted = self.db.delete_item(
            self.TABLE,
            {"reservation_id": reservation_id},
            condition_expression="attribute_exists(reservation_id)",
        )
        if deleted:
            logger.info("reservation_deleted", extra={"reservation_id": reservation_id})
        return deleted
