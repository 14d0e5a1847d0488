"""
Container endpoints.

These routes expose CRUD and search operations over roll-off
containers.  The literal paths ``/archived`` and ``/search`` are
declared before ``/{container_id}`` so they are not swallowed by the id
lookup.  Duplicate ids map to HTTP 400 and unknown ids to HTTP 404;
storage failures are turned into HTTP 500 by the application-level
handler registered in ``main.py``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from rolloff_api.app.core.exceptions import ContainerNotFoundError, ContainerValidationError
from rolloff_api.app.schemas.container import (
    ContainerCreate,
    ContainerDeleted,
    ContainerRead,
    ContainerSearch,
    ContainerUpdate,
)
from rolloff_api.app.services.container_service import ContainerService

router = APIRouter()


def get_container_service(request: Request) -> ContainerService:
    """Return the service instance configured by ``create_app``."""
    return request.app.state.container_service


@router.get("", response_model=List[ContainerRead])
async def list_containers(
    service: ContainerService = Depends(get_container_service),
) -> List[ContainerRead]:
    """Return all containers, most recently updated first."""
    return await service.list_containers()


@router.get("/archived", response_model=List[ContainerRead])
async def list_archived_containers(
    service: ContainerService = Depends(get_container_service),
) -> List[ContainerRead]:
    """Return containers whose status is ``Dumped``."""
    return await service.list_archived()


@router.get("/search", response_model=List[ContainerRead])
async def search_containers(
    q: Optional[str] = Query(None, description="Text matched against id, contents and location"),
    status_filter: Optional[str] = Query(None, alias="status", description="Exact status; 'All' disables the filter"),
    location: Optional[str] = Query(None, description="Substring of the location"),
    service: ContainerService = Depends(get_container_service),
) -> List[ContainerRead]:
    """Search containers.

    - **q** — case-insensitive substring of `id`, `contents` or `location`.
    - **status** — exact status match; `All` or omitted means any status.
    - **location** — case-insensitive substring of `location`.

    All supplied filters must match.
    """
    filters = ContainerSearch(q=q, status=status_filter, location=location)
    return await service.search_containers(filters)


@router.get("/{container_id}", response_model=ContainerRead)
async def get_container(
    container_id: str,
    service: ContainerService = Depends(get_container_service),
) -> ContainerRead:
    """Retrieve a single container by its ID; 404 if it does not exist."""
    try:
        return await service.get_container(container_id)
    except ContainerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("", response_model=ContainerRead, status_code=status.HTTP_201_CREATED)
async def create_container(
    container: ContainerCreate,
    service: ContainerService = Depends(get_container_service),
) -> ContainerRead:
    """Register a new container.

    The caller chooses the container ``id``.  ``lastUpdated`` and
    ``updatedBy`` are assigned by the server.  Returns 400 if the ID is
    already in use.
    """
    try:
        return await service.create_container(container)
    except ContainerValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


@router.put("/{container_id}", response_model=ContainerRead)
async def update_container(
    container_id: str,
    updates: ContainerUpdate,
    service: ContainerService = Depends(get_container_service),
) -> ContainerRead:
    """Update an existing container.

    Partial updates are supported; any unspecified fields remain
    unchanged.  The ID itself cannot be changed.
    """
    try:
        return await service.update_container(container_id, updates)
    except ContainerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{container_id}", response_model=ContainerDeleted)
async def delete_container(
    container_id: str,
    service: ContainerService = Depends(get_container_service),
) -> ContainerDeleted:
    """Delete a container and return the removed record."""
    try:
        deleted = await service.delete_container(container_id)
    except ContainerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return ContainerDeleted(container=deleted)
