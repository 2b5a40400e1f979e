"""Error taxonomy shared by the gateway, repositories, service and HTTP layer."""


class DirectoryError(Exception):
    """Base class for directory errors; carries a human-readable message."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class ValidationError(DirectoryError):
    """Malformed identity or request body. Client error, never retried."""


class NotFoundError(DirectoryError):
    """The requested user or role does not exist."""


class StorageError(DirectoryError):
    """The storage engine failed; already logged where it happened."""


class ConstraintViolationError(StorageError):
    """Duplicate key or foreign-key violation reported by the engine."""


class StorageConnectionError(StorageError):
    """The storage engine could not be reached."""
