"""Repository tests against moto-mocked DynamoDB tables."""

from decimal import Decimal
from typing import Any
from unittest.mock import MagicMock

import pytest

from lilycrest_shared.models import Branch, Room


def _put_reservation(db: Any, **item: Any) -> None:
    db.put_item("reservations", item)


class TestDecimalConversion:
    def test_round_trip_numbers(self) -> None:
        from lilycrest_shared.services.dynamodb import from_dynamodb, to_dynamodb

        stored = to_dynamodb({"price": 5400.5, "beds": [{"n": 1.25}], "ok": True})

        assert stored["price"] == Decimal("5400.5")
        assert stored["ok"] is True
        assert from_dynamodb({"a": Decimal("4"), "b": Decimal("4.5")}) == {"a": 4, "b": 4.5}

    def test_table_prefix_from_env(self, dynamodb_service: Any) -> None:
        assert dynamodb_service._table_name("rooms") == "test-lilycrest-rooms"


class TestRoomRepository:
    def test_put_and_get(self, room_repository: Any, sample_room_item: dict[str, Any]) -> None:
        room = room_repository.put(Room.model_validate(sample_room_item))

        fetched = room_repository.get(room.id)
        assert fetched is not None
        assert fetched.price == 5400.0
        assert fetched.occupied_beds == 1

    def test_put_assigns_id(self, room_repository: Any) -> None:
        room = room_repository.put(Room(name="New room", branch=Branch.GUADALUPE))

        assert room.id
        assert room_repository.get(room.id).name == "New room"

    def test_get_all_by_branch(self, room_repository: Any) -> None:
        room_repository.put(Room(id="a", room_number="2", branch=Branch.GIL_PUYAT))
        room_repository.put(Room(id="b", room_number="1", branch=Branch.GIL_PUYAT))
        room_repository.put(Room(id="c", room_number="3", branch=Branch.GUADALUPE))

        rooms = room_repository.get_all(branch=Branch.GIL_PUYAT)

        assert [r.id for r in rooms] == ["b", "a"]
        assert len(room_repository.get_all()) == 3

    def test_archived_hidden(self, room_repository: Any) -> None:
        room_repository.put(Room(id="a", room_number="1", branch=Branch.GIL_PUYAT))
        assert room_repository.archive("a") is True

        assert room_repository.get_all() == []
        archived = room_repository.get_all(include_archived=True)
        assert archived[0].is_archived is True
        assert archived[0].available is False

    def test_archive_missing(self, room_repository: Any) -> None:
        assert room_repository.archive("nope") is False

    def test_find_by_number(self, room_repository: Any) -> None:
        room_repository.put(Room(id="a", room_number="101"))

        assert room_repository.find_by_number("101").id == "a"
        assert room_repository.find_by_number("999") is None

    def test_delete(self, room_repository: Any) -> None:
        room_repository.put(Room(id="a"))

        assert room_repository.delete("a") is True
        assert room_repository.delete("a") is False
        assert room_repository.get("a") is None

    def test_malformed_item_skipped(self, room_repository: Any, dynamodb_service: Any) -> None:
        dynamodb_service.put_item("rooms", {"room_id": "bad", "price": Decimal("-5")})
        room_repository.put(Room(id="good"))

        assert [r.id for r in room_repository.get_all()] == ["good"]


class TestReservationRepository:
    @pytest.fixture(autouse=True)
    def _room(self, room_repository: Any, sample_room_item: dict[str, Any]) -> None:
        room_repository.put(Room.model_validate(sample_room_item))

    def test_get_joins_room(
        self,
        reservation_repository: Any,
        dynamodb_service: Any,
        sample_reservation_item: dict[str, Any],
    ) -> None:
        _put_reservation(dynamodb_service, **sample_reservation_item)

        r = reservation_repository.get(sample_reservation_item["reservation_id"])

        assert r is not None
        assert r.room is not None
        assert r.room.name == "Room 101"
        assert r.agreed_to_privacy is True

    def test_get_missing(self, reservation_repository: Any) -> None:
        assert reservation_repository.get("nope") is None

    def test_dangling_room_reference(
        self, reservation_repository: Any, dynamodb_service: Any
    ) -> None:
        _put_reservation(dynamodb_service, reservation_id="r1", user_id="u1", room_id="gone")

        r = reservation_repository.get("r1")
        assert r.room is None
        assert r.room_id == "gone"

    def test_get_all_for_user_newest_first(
        self, reservation_repository: Any, dynamodb_service: Any
    ) -> None:
        _put_reservation(
            dynamodb_service, reservation_id="old", user_id="u1", created_at="2026-01-01T00:00:00Z"
        )
        _put_reservation(
            dynamodb_service, reservation_id="new", user_id="u1", created_at="2026-02-01T00:00:00Z"
        )
        _put_reservation(
            dynamodb_service, reservation_id="hidden", user_id="u1", is_archived=True
        )
        _put_reservation(dynamodb_service, reservation_id="other", user_id="u2")

        ids = [r.id for r in reservation_repository.get_all_for_user("u1")]
        assert ids == ["new", "old"]

    def test_get_all_by_branch(
        self, reservation_repository: Any, dynamodb_service: Any
    ) -> None:
        _put_reservation(dynamodb_service, reservation_id="a", user_id="u1", room_id="room-101")
        _put_reservation(dynamodb_service, reservation_id="b", user_id="u2")

        assert [r.id for r in reservation_repository.get_all(branch=Branch.GIL_PUYAT)] == ["a"]
        assert reservation_repository.get_all(branch=Branch.GUADALUPE) == []
        assert len(reservation_repository.get_all()) == 2

    def test_update_fields_sets_and_removes(
        self,
        reservation_repository: Any,
        dynamodb_service: Any,
        sample_reservation_item: dict[str, Any],
    ) -> None:
        _put_reservation(dynamodb_service, **sample_reservation_item)
        reservation_id = sample_reservation_item["reservation_id"]

        updated = reservation_repository.update_fields(
            reservation_id, {"schedule_rejected": True, "viewing_type": None}
        )

        assert updated.schedule_rejected is True
        assert updated.viewing_type is None
        assert updated.updated_at is not None
        assert updated.room is not None
        raw = dynamodb_service.get_item("reservations", {"reservation_id": reservation_id})
        assert "viewing_type" not in raw

    def test_update_missing(self, reservation_repository: Any) -> None:
        assert reservation_repository.update_fields("nope", {"visit_approved": True}) is None

    def test_create(self, reservation_repository: Any, dynamodb_service: Any) -> None:
        created = reservation_repository.create(
            {"user_id": "u1", "room_id": "room-101", "status": "pending"}
        )

        assert created.id
        assert created.created_at is not None
        assert created.room is not None
        assert created.room.branch == Branch.GIL_PUYAT
        raw = dynamodb_service.get_item("reservations", {"reservation_id": created.id})
        assert raw["status"] == "pending"
        assert [r.id for r in reservation_repository.get_all_for_user("u1")] == [created.id]

    def test_delete(
        self,
        reservation_repository: Any,
        dynamodb_service: Any,
        sample_reservation_item: dict[str, Any],
    ) -> None:
        _put_reservation(dynamodb_service, **sample_reservation_item)
        reservation_id = sample_reservation_item["reservation_id"]

        assert reservation_repository.delete(reservation_id) is True
        assert reservation_repository.delete(reservation_id) is False


class TestUserRepository:
    def test_get_by_firebase_uid(self, user_repository: Any, dynamodb_service: Any) -> None:
        dynamodb_service.put_item(
            "users",
            {"user_id": "u1", "firebase_uid": "fb-1", "role": "admin", "branch": "guadalupe"},
        )

        user = user_repository.get_by_firebase_uid("fb-1")

        assert user.user_id == "u1"
        assert user.branch == Branch.GUADALUPE
        assert user_repository.get_by_firebase_uid("fb-2") is None

    def test_unknown_role_defaults_to_user(
        self, user_repository: Any, dynamodb_service: Any
    ) -> None:
        from lilycrest_shared.models import UserRole

        dynamodb_service.put_item(
            "users", {"user_id": "u1", "firebase_uid": "fb-1", "role": "owner"}
        )

        assert user_repository.get("u1").role == UserRole.USER


class TestDynamoDBPaging:
    """Batch reads and queries that span more than one DynamoDB response."""

    @pytest.fixture
    def resource(self, dynamodb_service: Any, monkeypatch: pytest.MonkeyPatch) -> MagicMock:
        resource = MagicMock()
        monkeypatch.setattr(dynamodb_service, "_dynamodb", resource)
        monkeypatch.setattr("lilycrest_shared.services.dynamodb.time.sleep", lambda _: None)
        return resource

    def test_batch_get_retries_unprocessed_keys(
        self, dynamodb_service: Any, resource: MagicMock
    ) -> None:
        table = "test-lilycrest-rooms"
        resource.batch_get_item.side_effect = [
            {
                "Responses": {table: [{"room_id": "a"}]},
                "UnprocessedKeys": {table: {"Keys": [{"room_id": "b"}]}},
            },
            {"Responses": {table: [{"room_id": "b"}]}, "UnprocessedKeys": {}},
        ]

        items = dynamodb_service.batch_get("rooms", [{"room_id": "a"}, {"room_id": "b"}])

        assert sorted(i["room_id"] for i in items) == ["a", "b"]
        assert resource.batch_get_item.call_count == 2
        retry = resource.batch_get_item.call_args_list[1].kwargs["RequestItems"]
        assert retry == {table: {"Keys": [{"room_id": "b"}]}}

    def test_batch_get_gives_up(self, dynamodb_service: Any, resource: MagicMock) -> None:
        from lilycrest_shared.services.dynamodb import (
            MAX_BATCH_GET_ATTEMPTS,
            UnprocessedKeysError,
        )

        table = "test-lilycrest-rooms"
        resource.batch_get_item.return_value = {
            "Responses": {table: []},
            "UnprocessedKeys": {table: {"Keys": [{"room_id": "a"}]}},
        }

        with pytest.raises(UnprocessedKeysError) as exc_info:
            dynamodb_service.batch_get("rooms", [{"room_id": "a"}])

        assert exc_info.value.remaining == 1
        assert resource.batch_get_item.call_count == MAX_BATCH_GET_ATTEMPTS

    def test_query_follows_last_evaluated_key(
        self, dynamodb_service: Any, resource: MagicMock
    ) -> None:
        query = resource.Table.return_value.query
        query.side_effect = [
            {"Items": [{"reservation_id": "a"}], "LastEvaluatedKey": {"reservation_id": "a"}},
            {"Items": [{"reservation_id": "b"}]},
        ]

        items = dynamodb_service.query("reservations", "condition")

        assert [i["reservation_id"] for i in items] == ["a", "b"]
        assert query.call_args_list[1].kwargs["ExclusiveStartKey"] == {"reservation_id": "a"}

    def test_query_stops_at_limit(self, dynamodb_service: Any, resource: MagicMock) -> None:
        query = resource.Table.return_value.query
        query.return_value = {
            "Items": [{"reservation_id": "a"}, {"reservation_id": "b"}],
            "LastEvaluatedKey": {"reservation_id": "b"},
        }

        items = dynamodb_service.query("reservations", "condition", limit=2)

        assert len(items) == 2
        query.assert_called_once()
