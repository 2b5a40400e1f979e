"""Row-to-entity mapping shared by the user and role repositories."""

from collections.abc import Callable, Iterable
from typing import Any

from userroles.schemas.role import RoleResponse
from userroles.schemas.user import UserProfile, UserResponse

# How a column value is read from a result row: getattr for ORM instances and
# Core rows, operator.getitem for mappings such as Row._mapping.
RowAccessor = Callable[[Any, str], Any]


def role_from_row(row: Any, get: RowAccessor = getattr) -> RoleResponse:
    return RoleResponse(
        role_id=get(row, "role_id"),
        role_name=get(row, "role_name"),
        description=get(row, "description"),
        created_at=get(row, "created_at"),
        updated_at=get(row, "updated_at"),
    )


def _user_fields(row: Any, get: RowAccessor) -> dict[str, Any]:
    return {
        "user_id": get(row, "user_id"),
        "username": get(row, "username"),
        "email": get(row, "email"),
        "password_hash": get(row, "password_hash"),
        "first_name": get(row, "first_name"),
        "last_name": get(row, "last_name"),
        "active": bool(get(row, "active")),
        "created_at": get(row, "created_at"),
        "updated_at": get(row, "updated_at"),
    }


def user_profile_from_row(row: Any, get: RowAccessor = getattr) -> UserProfile:
    """Base attributes only; used where the role set is intentionally not loaded."""
    return UserProfile(**_user_fields(row, get))


def user_from_row(
    row: Any,
    roles: Iterable[RoleResponse],
    get: RowAccessor = getattr,
) -> UserResponse:
    """Base attributes plus the roles loaded by a follow-up relationship query."""
    return UserResponse(**_user_fields(row, get), roles=list(roles))
