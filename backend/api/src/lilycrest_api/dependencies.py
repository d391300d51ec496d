"""FastAPI dependency providers for shared services.

Providers are cached with @lru_cache so each service is built once per
process (one Lambda container, one uvicorn worker).

Service dependency graph:
    DynamoDBService (singleton via get_dynamodb_service)
        ├── RoomRepository
        │       └── ReservationRepository
        │               └── ReservationWorkflow (+ ReservationProgressModel)
        └── UserRepository
    ReservationProgressModel (stateless)

Testing:
    Use reset_services() to clear cached instances between tests, or
    app.dependency_overrides to swap in doubles.
"""

from functools import lru_cache

from lilycrest_shared.services.dynamodb import get_dynamodb_service
from lilycrest_shared.services.progress import ReservationProgressModel
from lilycrest_shared.services.reservation_workflow import ReservationWorkflow
from lilycrest_shared.services.reservations import ReservationRepository
from lilycrest_shared.services.rooms import RoomRepository
from lilycrest_shared.services.users import UserRepository


@lru_cache
def get_room_repository() -> RoomRepository:
    return RoomRepository(db=get_dynamodb_service())


@lru_cache
def get_reservation_repository() -> ReservationRepository:
    return ReservationRepository(db=get_dynamodb_service(), rooms=get_room_repository())


@lru_cache
def get_user_repository() -> UserRepository:
    return UserRepository(db=get_dynamodb_service())


@lru_cache
def get_reservation_workflow() -> ReservationWorkflow:
    return ReservationWorkflow(
        reservations=get_reservation_repository(), progress=get_progress_model()
    )


@lru_cache
def get_progress_model() -> ReservationProgressModel:
    """Tracker model in lenient mode: the highest satisfied stage wins."""
    return ReservationProgressModel(strict=False)


def reset_services() -> None:
    """Clear all cached service instances and the DynamoDB singleton."""
    from lilycrest_shared.services.dynamodb import reset_dynamodb_service

    get_room_repository.cache_clear()
    get_reservation_repository.cache_clear()
    get_user_repository.cache_clear()
    get_reservation_workflow.cache_clear()
    get_progress_model.cache_clear()

    reset_dynamodb_service()
