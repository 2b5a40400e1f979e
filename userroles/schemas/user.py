"""Request/response schemas for users."""

from pydantic import Field

from userroles.schemas.common import MAX_IDENTITY, CamelModel, Timestamp
from userroles.schemas.role import RoleResponse


class RoleReference(CamelModel):
    """A role listed in a user body; only roleId is read, other role fields are ignored."""

    role_id: int = Field(..., ge=0, le=MAX_IDENTITY)


class UserRequest(CamelModel):
    """
    Body of POST /users and PUT /users/{userId}.

    roles: omitted or null leaves assignments untouched on update; a list (even
    empty) replaces them.
    """

    username: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=1, max_length=255)
    password_hash: str = Field(..., min_length=1, max_length=255, description="Stored verbatim")
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    active: bool = True
    roles: list[RoleReference] | None = None

    @property
    def role_ids(self) -> list[int] | None:
        """Requested role ids in request order, duplicates dropped; None when roles was not given."""
        if self.roles is None:
            return None
        return list(dict.fromkeys(r.role_id for r in self.roles))


class UserProfile(CamelModel):
    """Base attributes of a user, without the assigned roles."""

    user_id: int
    username: str
    email: str
    password_hash: str
    first_name: str | None = None
    last_name: str | None = None
    active: bool = True
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None


class UserResponse(UserProfile):
    """A user with the roles currently assigned to it."""

    roles: list[RoleResponse] = Field(default_factory=list)
