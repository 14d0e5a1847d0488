"""
Domain errors raised by the container service and its stores.

Endpoints translate ``ContainerValidationError`` into HTTP 400 and
``ContainerNotFoundError`` into HTTP 404.  ``StorageError`` covers
every backend failure and is reported to clients as a generic 500
"Database error"; the original exception is kept as ``__cause__`` for
the server log.
"""


class ContainerError(Exception):
    """Base class for container registry errors."""


class ContainerValidationError(ContainerError):
    """The request is well formed but violates a registry rule."""


class DuplicateContainerError(ContainerValidationError):
    def __init__(self, container_id: str) -> None:
        super().__init__("Container number already exists")
        self.container_id = container_id


class ContainerNotFoundError(ContainerError):
    def __init__(self, container_id: str) -> None:
        super().__init__("Container not found")
        self.container_id = container_id


class StorageError(ContainerError):
    """The storage backend failed to complete an operation."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message)
