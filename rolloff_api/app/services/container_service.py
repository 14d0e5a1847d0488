"""
Business logic for roll-off containers.

``ContainerService`` implements the registry rules on top of any
``ContainerStore``: duplicate ids are rejected, updates merge the
supplied fields onto the stored record, and every write stamps
``last_updated`` and ``updated_by``.  A container whose status is
``"Dumped"`` counts as archived; there is no other archival mechanism.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from rolloff_api.app.core.exceptions import ContainerNotFoundError
from rolloff_api.app.schemas.container import (
    ARCHIVED_STATUS,
    ContainerCreate,
    ContainerRead,
    ContainerSearch,
    ContainerUpdate,
)
from rolloff_api.app.services.container_store import ContainerStore


logger = logging.getLogger(__name__)


SAMPLE_CONTAINER = ContainerCreate(
    id="CNT-001",
    status="In Use",
    location="1234 Main St, Dallas, TX",
    contents="Construction debris",
    assigned_to="Johnson Construction",
    date_dropped="2025-06-25",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ContainerService:
    """Service for managing container records.

    The storage backend is injected so the in-memory and SQLite stores
    can be swapped without touching the API handlers.
    """

    def __init__(
        self,
        store: ContainerStore,
        updated_by: str = "System",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.updated_by = updated_by
        self.clock = clock

    def _timestamp(self, previous: Optional[datetime] = None) -> datetime:
        """Return the current time, strictly later than ``previous``."""
        now = self.clock()
        if previous is not None:
            if previous.tzinfo is None:
                previous = previous.replace(tzinfo=timezone.utc)
            if now <= previous:
                now = previous + timedelta(microseconds=1)
        return now

    async def initialise(self, seed: bool = False) -> None:
        """Prepare the store and optionally seed the sample container."""
        self.store.initialise()
        if seed and self.store.count() == 0:
            await self.create_container(SAMPLE_CONTAINER)
            logger.info("Seeded sample container %s", SAMPLE_CONTAINER.id)

    async def list_containers(self) -> List[ContainerRead]:
        """Return every container, most recently updated first."""
        return self.store.list_all()

    async def list_archived(self) -> List[ContainerRead]:
        return self.store.list_by_status(ARCHIVED_STATUS)

    async def get_container(self, container_id: str) -> ContainerRead:
        """Retrieve a single container by ID.

        Raises ``ContainerNotFoundError`` if no container has that ID.
        """
        container = self.store.get(container_id)
        if container is None:
            raise ContainerNotFoundError(container_id)
        return container

    async def create_container(self, data: ContainerCreate) -> ContainerRead:
        """Register a new container and return it.

        Raises ``DuplicateContainerError`` if the ID is already taken.
        """
        container = ContainerRead(
            **data.model_dump(),
            last_updated=self._timestamp(),
            updated_by=self.updated_by,
        )
        self.store.insert(container)
        logger.info("Created container %s", container.id)
        return container

    async def update_container(self, container_id: str, data: ContainerUpdate) -> ContainerRead:
        """Merge the supplied fields onto an existing container.

        Fields that were not sent keep their stored values; optional
        fields sent as ``null`` are cleared.  Raises
        ``ContainerNotFoundError`` if the container does not exist, in
        which case nothing is created.
        """
        current = await self.get_container(container_id)
        changes = data.model_dump(exclude_unset=True)
        updated = current.model_copy(
            update={
                **changes,
                "last_updated": self._timestamp(current.last_updated),
                "updated_by": self.updated_by,
            }
        )
        if not self.store.replace(updated):
            # Deleted between the read and the write.
            raise ContainerNotFoundError(container_id)
        logger.info("Updated container %s (%s)", container_id, ", ".join(sorted(changes)) or "no fields")
        return updated

    async def delete_container(self, container_id: str) -> ContainerRead:
        """Permanently remove a container and return its last state."""
        deleted = self.store.delete(container_id)
        if deleted is None:
            raise ContainerNotFoundError(container_id)
        logger.info("Deleted container %s", container_id)
        return deleted

    async def search_containers(self, filters: ContainerSearch) -> List[ContainerRead]:
        """Return containers matching ``filters``, most recently updated first."""
        return self.store.search(filters)
