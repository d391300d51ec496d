"""Backend services for the Lilycrest booking backend."""

from .dynamodb import (
    DynamoDBService,
    UnprocessedKeysError,
    get_dynamodb_service,
    reset_dynamodb_service,
)
from .progress import ReservationProgressModel
from .reservation_workflow import ReservationWorkflow
from .reservations import ReservationRepository
from .rooms import RoomRepository
from .users import UserRepository

__all__ = [
    "DynamoDBService",
    "get_dynamodb_service",
    "reset_dynamodb_service",
    "UnprocessedKeysError",
    "ReservationProgressModel",
    "ReservationRepository",
    "ReservationWorkflow",
    "RoomRepository",
    "UserRepository",
]
