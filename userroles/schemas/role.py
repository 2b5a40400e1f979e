"""Request/response schemas for roles."""

from pydantic import Field

from userroles.schemas.common import CamelModel, Timestamp


class RoleRequest(CamelModel):
    """Body of POST /roles and PUT /roles/{roleId}. Identity and timestamps are ignored."""

    role_name: str = Field(..., min_length=1, max_length=100, description="Role name, e.g. ADMIN")
    description: str | None = Field(default=None, max_length=255)


class RoleResponse(CamelModel):
    """A role as stored."""

    role_id: int
    role_name: str
    description: str | None = None
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None
