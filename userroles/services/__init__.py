"""Service layer composing repository calls into request-level operations."""

from userroles.services.directory import DirectoryService

__all__ = ["DirectoryService"]
