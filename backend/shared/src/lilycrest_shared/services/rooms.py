"""Room repository backed by the rooms table."""

import uuid
from datetime import UTC, datetime

from boto3.dynamodb.conditions import Attr
from pydantic import ValidationError

from lilycrest_shared.models.enums import Branch
from lilycrest_shared.models.room import Room
from lilycrest_shared.services.dynamodb import DynamoDBService
from lilycrest_shared.utils.logging import get_logger

logger = get_logger(__name__)


class RoomRepository:
    """CRUD over room listings.

    Items are keyed by `room_id` with a `branch-index` GSI for branch listings.
    Archived rooms are hidden unless explicitly requested.
    """

    TABLE = "rooms"

    def __init__(self, db: DynamoDBService) -> None:
        self.db = db

    def _to_room(self, item: dict) -> Room | None:
        try:
            return Room.model_validate(item)
        except ValidationError as e:
            logger.warning(
                "room_record_skipped",
                extra={"room_id": item.get("room_id"), "errors": e.error_count()},
            )
            return None

    def get_all(
        self,
        branch: Branch | None = None,
        include_archived: bool = False,
    ) -> list[Room]:
        if branch is not None:
            items = self.db.query_by_gsi(
                table=self.TABLE,
                index_name="branch-index",
                partition_key_name="branch",
                partition_key_value=branch.value,
            )
        else:
            items = self.db.scan(self.TABLE)

        rooms = [room for room in map(self._to_room, items) if room is not None]
        if not include_archived:
            rooms = [room for room in rooms if not room.is_archived]
        return sorted(rooms, key=lambda room: room.room_number or room.name or "")

    def get(self, room_id: str) -> Room | None:
        item = self.db.get_item(self.TABLE, {"room_id": room_id})
        return self._to_room(item) if item else None

    def get_many(self, room_ids: list[str]) -> dict[str, Room]:
        """Fetch rooms by id in one batch, keyed by id."""
        items = self.db.batch_get(self.TABLE, [{"room_id": rid} for rid in room_ids])
        rooms = {}
        for item in items:
            room = self._to_room(item)
            if room is not None and room.id:
                rooms[room.id] = room
        return rooms

    def find_by_number(self, room_number: str) -> Room | None:
        items = self.db.scan(self.TABLE, Attr("room_number").eq(str(room_number)))
        return self._to_room(items[0]) if items else None

    def put(self, room: Room) -> Room:
        """Create or replace a room, assigning an id when it has none."""
        if not room.id:
            room = room.model_copy(update={"id": uuid.uuid4().hex})
        item = room.model_dump(mode="json", exclude_none=True, exclude={"id"})
        item["room_id"] = room.id
        self.db.put_item(self.TABLE, item)
        logger.info("room_saved", extra={"room_id": room.id})
        return room

    def archive(self, room_id: str) -> bool:
        """Soft delete: hide the room from listings and stop new bookings."""
        attrs = self.db.update_item(
            table=self.TABLE,
            key={"room_id": room_id},
            update_expression="SET is_archived = :t, available = :f, archived_at = :at",
            expression_attribute_values={
                ":t": True,
                ":f": False,
                ":at": datetime.now(UTC).isoformat(),
            },
            condition_expression="attribute_exists(room_id)",
        )
        return attrs is not None

    def delete(self, room_id: str) -> bool:
        """Permanently remove a room. Returns False if it did not exist."""
        deleted = self.db.delete_item(
            self.TABLE,
            {"room_id": room_id},
            condition_expression="attribute_exists(room_id)",
        )
        if deleted:
            logger.info("room_deleted", extra={"room_id": room_id})
        return deleted
