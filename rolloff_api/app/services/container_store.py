"""
Storage backends for container records.

``ContainerStore`` is the contract the service layer talks to.  Two
implementations are provided:

* ``MemoryContainerStore`` keeps records in a process-wide list that is
  lost on restart.  It is handy for demos and tests.
* ``SqliteContainerStore`` keeps records in the ``containers`` table.
  Every call opens its own connection, and any ``sqlite3.Error`` is
  logged and re-raised as ``StorageError``.

Both backends return records ordered by ``last_updated`` descending,
then by ``id``.  Stores do not stamp ``last_updated``/``updated_by``;
that is the service's job.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from rolloff_api.app.core.db import get_connection, get_database_path, init_db
from rolloff_api.app.core.exceptions import DuplicateContainerError, StorageError
from rolloff_api.app.schemas.container import ContainerRead, ContainerSearch


logger = logging.getLogger(__name__)


def _newest_first(containers: Iterable[ContainerRead]) -> List[ContainerRead]:
    # Two stable sorts: id ascending, then last_updated descending.
    ordered = sorted(containers, key=lambda c: c.id)
    return sorted(ordered, key=lambda c: c.last_updated, reverse=True)


class ContainerStore(ABC):
    """Abstract storage backend for containers."""

    @abstractmethod
    def initialise(self) -> None:
        """Prepare the backend (create tables, open files ...)."""

    @abstractmethod
    def count(self) -> int:
        pass

    @abstractmethod
    def list_all(self) -> List[ContainerRead]:
        pass

    @abstractmethod
    def list_by_status(self, status: str) -> List[ContainerRead]:
        pass

    @abstractmethod
    def get(self, container_id: str) -> Optional[ContainerRead]:
        pass

    @abstractmethod
    def insert(self, container: ContainerRead) -> None:
        """Add a new record.

        Raises ``DuplicateContainerError`` when a record with the same
        id already exists; the existing record is left untouched.
        """

    @abstractmethod
    def replace(self, container: ContainerRead) -> bool:
        """Overwrite the record with ``container.id``.

        Returns ``False`` if no such record exists; nothing is created
        in that case.
        """

    @abstractmethod
    def delete(self, container_id: str) -> Optional[ContainerRead]:
        """Remove a record and return it, or ``None`` if it was absent."""

    @abstractmethod
    def search(self, filters: ContainerSearch) -> List[ContainerRead]:
        pass


class MemoryContainerStore(ContainerStore):
    """Keep containers in a list for the lifetime of the process."""

    def __init__(self, containers: Optional[Iterable[ContainerRead]] = None) -> None:
        self._containers: List[ContainerRead] = list(containers or [])
        # Requests may be served from worker threads.
        self._lock = threading.Lock()

    def initialise(self) -> None:
        logger.info("Using in-memory container store")

    def count(self) -> int:
        with self._lock:
            return len(self._containers)

    def _index_of(self, container_id: str) -> int:
        for index, container in enumerate(self._containers):
            if container.id == container_id:
                return index
        return -1

    def _snapshot(self) -> List[ContainerRead]:
        with self._lock:
            return [c.model_copy() for c in self._containers]

    def list_all(self) -> List[ContainerRead]:
        return _newest_first(self._snapshot())

    def list_by_status(self, status: str) -> List[ContainerRead]:
        return _newest_first(c for c in self._snapshot() if c.status == status)

    def get(self, container_id: str) -> Optional[ContainerRead]:
        with self._lock:
            index = self._index_of(container_id)
            return self._containers[index].model_copy() if index >= 0 else None

    def insert(self, container: ContainerRead) -> None:
        with self._lock:
            if self._index_of(container.id) >= 0:
                raise DuplicateContainerError(container.id)
            self._containers.append(container.model_copy())

    def replace(self, container: ContainerRead) -> bool:
        with self._lock:
            index = self._index_of(container.id)
            if index < 0:
                return False
            self._containers[index] = container.model_copy()
            return True

    def delete(self, container_id: str) -> Optional[ContainerRead]:
        with self._lock:
            index = self._index_of(container_id)
            if index < 0:
                return None
            return self._containers.pop(index)

    def search(self, filters: ContainerSearch) -> List[ContainerRead]:
        return _newest_first(c for c in self._snapshot() if filters.matches(c))


class SqliteContainerStore(ContainerStore):
    """Keep containers in the ``containers`` table of a SQLite database.

    All queries use parameterized statements.  Duplicate ids are caught
    by the primary key constraint at insert time instead of a separate
    existence check, so two concurrent creates cannot both succeed.
    """

    COLUMNS = (
        "id, status, location, contents, assigned_to, date_dropped, "
        "date_dumped, weight, last_updated, updated_by"
    )
    ORDER_BY = " ORDER BY last_updated DESC, id ASC"

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        try:
            return get_connection(self.db_path)
        except sqlite3.Error as exc:
            logger.exception("Could not open database %s", self.db_path)
            raise StorageError() from exc

    def _fetch(self, query: str, params: tuple = ()) -> List[ContainerRead]:
        conn = self._connect()
        try:
            rows = conn.execute(query, params).fetchall()
            return [self._row_to_container(row) for row in rows]
        except sqlite3.Error as exc:
            logger.exception("Container query failed")
            raise StorageError() from exc
        finally:
            conn.close()

    def initialise(self) -> None:
        try:
            init_db(self.db_path)
        except sqlite3.Error as exc:
            logger.exception("Could not initialise database %s", self.db_path)
            raise StorageError() from exc
        logger.info("Using SQLite container store at %s", self.db_path)

    def count(self) -> int:
        conn = self._connect()
        try:
            row = conn.execute("SELECT COUNT(*) AS total FROM containers").fetchone()
            return row["total"]
        except sqlite3.Error as exc:
            logger.exception("Counting containers failed")
            raise StorageError() from exc
        finally:
            conn.close()

    def list_all(self) -> List[ContainerRead]:
        return self._fetch(f"SELECT {self.COLUMNS} FROM containers" + self.ORDER_BY)

    def list_by_status(self, status: str) -> List[ContainerRead]:
        return self._fetch(
            f"SELECT {self.COLUMNS} FROM containers WHERE status = ?" + self.ORDER_BY,
            (status,),
        )

    def get(self, container_id: str) -> Optional[ContainerRead]:
        rows = self._fetch(f"SELECT {self.COLUMNS} FROM containers WHERE id = ?", (container_id,))
        return rows[0] if rows else None

    def insert(self, container: ContainerRead) -> None:
        conn = self._connect()
        try:
            conn.execute(
                f"INSERT INTO containers ({self.COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                self._container_to_params(container),
            )
            conn.commit()
        except sqlite3.IntegrityError as exc:
            if "containers.id" in str(exc):
                raise DuplicateContainerError(container.id) from exc
            logger.exception("Inserting container %s failed", container.id)
            raise StorageError() from exc
        except sqlite3.Error as exc:
            logger.exception("Inserting container %s failed", container.id)
            raise StorageError() from exc
        finally:
            conn.close()

    def replace(self, container: ContainerRead) -> bool:
        params = self._container_to_params(container)
        conn = self._connect()
        try:
            cursor = conn.execute(
                """
                UPDATE containers
                SET status = ?, location = ?, contents = ?, assigned_to = ?, date_dropped = ?,
                    date_dumped = ?, weight = ?, last_updated = ?, updated_by = ?
                WHERE id = ?
                """,
                params[1:] + params[:1],
            )
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error as exc:
            logger.exception("Updating container %s failed", container.id)
            raise StorageError() from exc
        finally:
            conn.close()

    def delete(self, container_id: str) -> Optional[ContainerRead]:
        conn = self._connect()
        try:
            row = conn.execute(
                f"SELECT {self.COLUMNS} FROM containers WHERE id = ?", (container_id,)
            ).fetchone()
            if not row:
                return None
            cursor = conn.execute("DELETE FROM containers WHERE id = ?", (container_id,))
            conn.commit()
            return self._row_to_container(row) if cursor.rowcount else None
        except sqlite3.Error as exc:
            logger.exception("Deleting container %s failed", container_id)
            raise StorageError() from exc
        finally:
            conn.close()

    def search(self, filters: ContainerSearch) -> List[ContainerRead]:
        query = f"SELECT {self.COLUMNS} FROM containers"
        params: list = []
        where_clauses: list[str] = []
        if filters.q:
            where_clauses.append(
                "(instr(py_lower(id), py_lower(?)) > 0"
                " OR instr(py_lower(coalesce(contents, '')), py_lower(?)) > 0"
                " OR instr(py_lower(location), py_lower(?)) > 0)"
            )
            params.extend([filters.q] * 3)
        status_filter = filters.status_filter
        if status_filter is not None:
            where_clauses.append("status = ?")
            params.append(status_filter)
        if filters.location:
            where_clauses.append("instr(py_lower(location), py_lower(?)) > 0")
            params.append(filters.location)
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        return self._fetch(query + self.ORDER_BY, tuple(params))

    @staticmethod
    def _container_to_params(container: ContainerRead) -> tuple:
        return (
            container.id,
            container.status,
            container.location,
            container.contents,
            container.assigned_to,
            container.date_dropped.isoformat() if container.date_dropped else None,
            container.date_dumped.isoformat() if container.date_dumped else None,
            container.weight,
            container.last_updated.isoformat(timespec="microseconds"),
            container.updated_by,
        )

    @staticmethod
    def _row_to_container(row: sqlite3.Row) -> ContainerRead:
        """Convert a database row to a ContainerRead schema instance."""
        return ContainerRead(
            id=row["id"],
            status=row["status"],
            location=row["location"],
            contents=row["contents"],
            assigned_to=row["assigned_to"],
            date_dropped=row["date_dropped"],
            date_dumped=row["date_dumped"],
            weight=row["weight"],
            last_updated=row["last_updated"],
            updated_by=row["updated_by"] or "",
        )


def build_store(backend: str, database_url: Optional[str] = None) -> ContainerStore:
    """Return the store named by ``backend`` (``"sqlite"`` or ``"memory"``)."""
    if backend == "memory":
        return MemoryContainerStore()
    if backend == "sqlite":
        return SqliteContainerStore(get_database_path(database_url))
    raise ValueError(f"Unknown storage backend: {backend!r}")
