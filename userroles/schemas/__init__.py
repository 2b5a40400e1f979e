"""Pydantic request/response schemas."""

from userroles.schemas.common import CamelModel, Timestamp, format_timestamp
from userroles.schemas.health import HealthResponse
from userroles.schemas.role import RoleRequest, RoleResponse
from userroles.schemas.user import RoleReference, UserProfile, UserRequest, UserResponse

__all__ = [
    "CamelModel",
    "HealthResponse",
    "RoleReference",
    "RoleRequest",
    "RoleResponse",
    "Timestamp",
    "UserProfile",
    "UserRequest",
    "UserResponse",
    "format_timestamp",
]
