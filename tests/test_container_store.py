"""Tests for the storage backends and database helpers."""

import os
import sqlite3
from datetime import datetime, timezone

import pytest

from rolloff_api.app.core.db import get_database_path, init_db
from rolloff_api.app.core.exceptions import DuplicateContainerError, StorageError
from rolloff_api.app.schemas.container import ContainerRead
from rolloff_api.app.services.container_store import (
    MemoryContainerStore,
    SqliteContainerStore,
    build_store,
)


def _container(container_id="CNT-001", **fields):
    data = {
        "id": container_id,
        "status": "In Use",
        "location": "1234 Main St, Dallas, TX",
        "last_updated": datetime(2025, 6, 25, 9, 30, tzinfo=timezone.utc),
        "updated_by": "System",
    }
    data.update(fields)
    return ContainerRead(**data)


def test_replace_missing_record_returns_false(store):
    assert store.replace(_container("CNT-404")) is False
    assert store.count() == 0


def test_insert_duplicate_raises(store):
    store.insert(_container())
    with pytest.raises(DuplicateContainerError):
        store.insert(_container(location="Somewhere else"))
    assert store.get("CNT-001").location == "1234 Main St, Dallas, TX"


def test_delete_missing_record_returns_none(store):
    assert store.delete("CNT-404") is None


def test_memory_store_returns_copies():
    store = MemoryContainerStore()
    store.insert(_container())

    fetched = store.get("CNT-001")
    fetched.status = "Dumped"

    assert store.get("CNT-001").status == "In Use"


def test_sqlite_store_uses_column_names(tmp_path):
    db_path = str(tmp_path / "containers.db")
    store = SqliteContainerStore(db_path)
    store.initialise()
    store.insert(_container(assigned_to="Johnson Construction", weight=4.5))

    conn = sqlite3.connect(db_path)
    try:
        row = conn.execute("SELECT assigned_to, weight, updated_by FROM containers").fetchone()
    finally:
        conn.close()

    assert row == ("Johnson Construction", 4.5, "System")


def test_sqlite_store_reports_backend_failures(tmp_path):
    store = SqliteContainerStore(str(tmp_path / "missing-dir" / "containers.db"))

    with pytest.raises(StorageError) as excinfo:
        store.list_all()

    assert isinstance(excinfo.value.__cause__, sqlite3.Error)
    assert str(excinfo.value) == "Database error"


def test_sqlite_store_without_table_reports_storage_error(tmp_path):
    store = SqliteContainerStore(str(tmp_path / "containers.db"))

    with pytest.raises(StorageError):
        store.get("CNT-001")


def test_init_db_is_idempotent(tmp_path):
    db_path = str(tmp_path / "containers.db")
    init_db(db_path)
    init_db(db_path)

    conn = sqlite3.connect(db_path)
    try:
        tables = conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'").fetchall()
    finally:
        conn.close()
    assert ("containers",) in tables


def test_get_database_path_accepts_urls_and_paths(tmp_path):
    absolute = str(tmp_path / "rolloff.db")

    assert get_database_path(absolute) == absolute
    assert get_database_path("sqlite:///" + absolute) == absolute
    relative = get_database_path("data.db")
    assert os.path.isabs(relative)
    assert relative.endswith(os.path.join("rolloff_api", "data.db"))


def test_build_store_selects_backend(tmp_path):
    assert isinstance(build_store("memory"), MemoryContainerStore)
    sqlite_store = build_store("sqlite", str(tmp_path / "x.db"))
    assert isinstance(sqlite_store, SqliteContainerStore)
    assert sqlite_store.db_path == str(tmp_path / "x.db")
    with pytest.raises(ValueError):
        build_store("postgres")
