"""
Pydantic models for container data.

JSON payloads use camelCase names (``assignedTo``, ``dateDropped``,
``lastUpdated`` ...) while Python code uses snake_case attributes;
every model accepts either form on input.  ``ContainerRead`` is what
the API returns.  ``lastUpdated`` and ``updatedBy`` only appear on
``ContainerRead``: they are always assigned by the service, so any
values a client sends are ignored.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


ARCHIVED_STATUS = "Dumped"
ALL_STATUSES = "All"


def round_weight(value: Optional[float]) -> Optional[float]:
    """Weights are kept to hundredths, matching the NUMERIC(10, 2) column."""
    return round(value, 2) if value is not None else None


class ContainerBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str = Field(..., examples=["In Use"])
    location: str = Field(..., examples=["1234 Main St, Dallas, TX"])
    contents: Optional[str] = Field(None, examples=["Construction debris"])
    assigned_to: Optional[str] = Field(None, examples=["Johnson Construction"])
    date_dropped: Optional[date] = Field(None, examples=["2025-06-25"])
    date_dumped: Optional[date] = None
    weight: Optional[float] = Field(None, ge=0, examples=[2.5])

    @field_validator("weight")
    @classmethod
    def weight_to_hundredths(cls, v):
        return round_weight(v)


class ContainerCreate(ContainerBase):
    """Schema for registering a new container; the caller picks the ``id``."""

    id: str = Field(..., min_length=1, examples=["CNT-001"])


class ContainerUpdate(BaseModel):
    """Schema for updating a container.

    All fields are optional; only the fields present in the request are
    applied.  ``status`` and ``location`` are required on the record and
    therefore cannot be cleared with ``null``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: Optional[str] = None
    location: Optional[str] = None
    contents: Optional[str] = None
    assigned_to: Optional[str] = None
    date_dropped: Optional[date] = None
    date_dumped: Optional[date] = None
    weight: Optional[float] = Field(None, ge=0)

    @field_validator("weight")
    @classmethod
    def weight_to_hundredths(cls, v):
        return round_weight(v)

    @field_validator("status", "location")
    @classmethod
    def required_on_record(cls, v):
        if v is None:
            raise ValueError("field cannot be cleared")
        return v


class ContainerRead(ContainerBase):
    """Schema for reading a container from the API."""

    id: str
    last_updated: datetime
    updated_by: str


class ContainerDeleted(BaseModel):
    """Response body of a successful delete."""

    message: str = "Container deleted"
    container: ContainerRead


class ContainerSearch(BaseModel):
    """Filters accepted by the search endpoint.

    ``q`` is matched against ``id``, ``contents`` and ``location``;
    ``status`` must match exactly unless it is ``"All"``; ``location``
    is a separate substring filter.  Matching is case-insensitive and
    all supplied filters must hold.
    """

    q: Optional[str] = None
    status: Optional[str] = None
    location: Optional[str] = None

    @property
    def status_filter(self) -> Optional[str]:
        if not self.status or self.status == ALL_STATUSES:
            return None
        return self.status

    def matches(self, container: ContainerRead) -> bool:
        if self.q:
            needle = self.q.lower()
            haystacks: List[Optional[str]] = [container.id, container.contents, container.location]
            if not any(h is not None and needle in h.lower() for h in haystacks):
                return False
        status_filter = self.status_filter
        if status_filter is not None and container.status != status_filter:
            return False
        if self.location and self.location.lower() not in container.location.lower():
            return False
        return True
