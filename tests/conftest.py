"""Shared test configuration and fixtures for all tests."""

import asyncio
from collections.abc import Generator
import os

# Environment for testing, set before the application settings are loaded
os.environ["TASKBOARD_SESSION_SECRET"] = "test-secret-123"
os.environ["TASKBOARD_ADMIN_USERNAME"] = "admin"
os.environ["TASKBOARD_ADMIN_PASSWORD"] = "s3cret-pass"
os.environ["TASKBOARD_COOKIE_SECURE"] = "false"
os.environ["TASKBOARD_LOG_LEVEL"] = "WARNING"

from fastapi.testclient import TestClient
import pytest

from taskboard.config import settings
from taskboard.core.board_store import BoardStore, initialize_store, reset_store
from taskboard.core.models import Board, Task
from taskboard.main import app


@pytest.fixture(autouse=True)
def store() -> Generator[BoardStore, None, None]:
    """Fresh global store for each test."""
    yield initialize_store()
    reset_store()


@pytest.fixture
def client() -> TestClient:
    """Anonymous test client."""
    return TestClient(app)


@pytest.fixture
def auth_client(client: TestClient) -> TestClient:
    """Test client holding a valid session cookie."""
    response = client.post(
        "/login",
        data={"username": settings.admin_username, "password": settings.admin_password},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return client


@pytest.fixture
def board(store: BoardStore) -> Board:
    return asyncio.run(store.create_board("Chores", "Around the house"))


@pytest.fixture
def task(store: BoardStore, board: Board) -> Task:
    created = asyncio.run(store.create_task(board.id, "Water plants"))
    assert created is not None
    return created
