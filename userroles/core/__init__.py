"""Core app configuration, storage gateway and error taxonomy."""

from userroles.core.config import get_settings, settings
from userroles.core.database import StorageGateway

__all__ = ["get_settings", "settings", "StorageGateway"]
