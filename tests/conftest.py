"""Shared fixtures for the container API tests."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from rolloff_api.app.main import create_app
from rolloff_api.app.services.container_service import ContainerService
from rolloff_api.app.services.container_store import MemoryContainerStore, SqliteContainerStore


class TickingClock:
    """Clock that advances one second every time it is read."""

    def __init__(self, start: datetime = datetime(2025, 6, 25, 8, 0, tzinfo=timezone.utc)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    if request.param == "memory":
        backend = MemoryContainerStore()
    else:
        backend = SqliteContainerStore(str(tmp_path / "containers.db"))
    backend.initialise()
    return backend


@pytest.fixture
def service(store):
    return ContainerService(store, updated_by="System", clock=TickingClock())


@pytest.fixture
def client(store):
    with TestClient(create_app(store=store, seed=True)) as test_client:
        yield test_client
