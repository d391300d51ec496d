"""Pytest configuration and fixtures for the Lilycrest booking backend tests.

This module provides reusable fixtures for testing:
- DynamoDB mocking with moto
- Repositories wired to the mocked tables
- Sample rooms, reservations and sessions
"""

import os
from typing import Any, Callable, Generator

import boto3
import pytest
from moto import mock_aws

# === Environment Setup ===

# Set before any lilycrest import reads them
os.environ.setdefault("AWS_DEFAULT_REGION", "ap-southeast-1")
os.environ.setdefault("DYNAMODB_TABLE_PREFIX", "test-lilycrest")
os.environ.setdefault("ENVIRONMENT", "test")

if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

TABLE_PREFIX = os.environ["DYNAMODB_TABLE_PREFIX"]
REGION = os.environ["AWS_DEFAULT_REGION"]


# === Singleton reset ===


@pytest.fixture(autouse=True)
def reset_services_state() -> Generator[None, None, None]:
    """Give every test fresh service singletons.

    Tests using mock_aws need a DynamoDBService created inside the mock
    context rather than one cached by an earlier test.
    """
    from lilycrest_api.dependencies import reset_services

    reset_services()
    yield
    reset_services()


# === DynamoDB Fixtures ===


@pytest.fixture
def aws_credentials() -> None:
    """Mocked AWS credentials for moto."""
    if not os.environ.get("AWS_PROFILE"):
        os.environ["AWS_ACCESS_KEY_ID"] = "testing"
        os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
        os.environ["AWS_SECURITY_TOKEN"] = "testing"
        os.environ["AWS_SESSION_TOKEN"] = "testing"


@pytest.fixture
def dynamodb_client(aws_credentials: None) -> Generator[Any, None, None]:
    with mock_aws():
        yield boto3.client("dynamodb", region_name=REGION)


def _table(name: str, key: str, gsi_key: str, index_name: str) -> dict[str, Any]:
    return {
        "TableName": f"{TABLE_PREFIX}-{name}",
        "KeySchema": [{"AttributeName": key, "KeyType": "HASH"}],
        "AttributeDefinitions": [
            {"AttributeName": key, "AttributeType": "S"},
            {"AttributeName": gsi_key, "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": index_name,
                "KeySchema": [{"AttributeName": gsi_key, "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }


@pytest.fixture
def create_tables(dynamodb_client: Any) -> None:
    """Create the reservations, rooms and users tables."""
    for table in (
        _table("reservations", "reservation_id", "user_id", "user_id-index"),
        _table("rooms", "room_id", "branch", "branch-index"),
        _table("users", "user_id", "firebase_uid", "firebase_uid-index"),
    ):
        dynamodb_client.create_table(**table)


@pytest.fixture
def dynamodb_service(create_tables: None) -> Any:
    from lilycrest_shared.services.dynamodb import get_dynamodb_service

    return get_dynamodb_service()


@pytest.fixture
def room_repository(dynamodb_service: Any) -> Any:
    from lilycrest_shared.services.rooms import RoomRepository

    return RoomRepository(dynamodb_service)


@pytest.fixture
def reservation_repository(dynamodb_service: Any, room_repository: Any) -> Any:
    from lilycrest_shared.services.reservations import ReservationRepository

    return ReservationRepository(dynamodb_service, room_repository)


@pytest.fixture
def user_repository(dynamodb_service: Any) -> Any:
    from lilycrest_shared.services.users import UserRepository

    return UserRepository(dynamodb_service)


# === Sample Data ===


@pytest.fixture
def sample_room_item() -> dict[str, Any]:
    """A quadruple-sharing room as stored in DynamoDB."""
    return {
        "room_id": "room-101",
        "name": "Room 101",
        "room_number": "101",
        "branch": "gil-puyat",
        "type": "quadruple-sharing",
        "price": 5400.0,
        "capacity": 4,
        "current_occupancy": 1,
        "beds": [
            {"id": "b1", "position": "upper-left", "available": False},
            {"id": "b2", "position": "lower-left", "available": True},
            {"id": "b3", "position": "upper-right", "available": True},
            {"id": "b4", "position": "lower-right", "available": True},
        ],
        "available": True,
        "is_archived": False,
    }


@pytest.fixture
def sample_reservation_item() -> dict[str, Any]:
    """A reservation at the visit-scheduled stage, as stored in DynamoDB."""
    return {
        "reservation_id": "65a1f0c2e4b0a1b2c3d4e5f6",
        "user_id": "user-1",
        "room_id": "room-101",
        "status": "pending",
        "agreed_to_privacy": True,
        "viewing_type": "inperson",
        "created_at": "2026-03-01T09:00:00+00:00",
    }


@pytest.fixture
def make_reservation() -> Callable[..., Any]:
    """Build a Reservation with a room attached, overriding any field."""
    from lilycrest_shared.models.reservation import Reservation

    def _make(**fields: Any) -> Reservation:
        data: dict[str, Any] = {
            "id": "res-1",
            "user_id": "user-1",
            "room": {"id": "room-101", "name": "Room 101", "branch": "gil-puyat"},
            "status": "pending",
            "created_at": "2026-03-01T09:00:00Z",
        }
        data.update(fields)
        return Reservation.model_validate(data)

    return _make


@pytest.fixture
def tenant_session() -> Any:
    from lilycrest_shared.models import Session, UserRole

    return Session(user_id="user-1", firebase_uid="fb-tenant", role=UserRole.USER)


@pytest.fixture
def admin_session() -> Any:
    from lilycrest_shared.models import Branch, Session, UserRole

    return Session(
        user_id="admin-1",
        firebase_uid="fb-admin",
        role=UserRole.ADMIN,
        branch=Branch.GIL_PUYAT,
    )


@pytest.fixture
def super_admin_session() -> Any:
    from lilycrest_shared.models import Branch, Session, UserRole

    return Session(
        user_id="super-1",
        firebase_uid="fb-super",
        role=UserRole.SUPER_ADMIN,
        branch=Branch.GUADALUPE,
    )
