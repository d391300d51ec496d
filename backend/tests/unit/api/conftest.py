"""Fixtures for API router tests.

Routers are exercised through TestClient with dependency overrides, so no
DynamoDB access happens here.
"""

from typing import Any, Generator
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


@pytest.fixture
def app() -> Generator[FastAPI, None, None]:
    from lilycrest_api.main import app

    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def sign_in(app: FastAPI) -> Any:
    """Make requests run as the given Session."""
    from lilycrest_api.security import get_session

    def _sign_in(session: Any) -> None:
        app.dependency_overrides[get_session] = lambda: session

    return _sign_in


@pytest.fixture
def reservation_repository_mock(app: FastAPI) -> MagicMock:
    from lilycrest_api.dependencies import get_reservation_repository

    repo = MagicMock()
    repo.get_all_for_user.return_value = []
    app.dependency_overrides[get_reservation_repository] = lambda: repo
    return repo


@pytest.fixture
def workflow_mock(app: FastAPI) -> MagicMock:
    from lilycrest_api.dependencies import get_reservation_workflow

    workflow = MagicMock()
    app.dependency_overrides[get_reservation_workflow] = lambda: workflow
    return workflow
