"""Directory service: the façade the HTTP layer calls for users, roles and assignments."""

import logging

from userroles.core.errors import NotFoundError, StorageError
from userroles.repositories.roles import RoleRepository
from userroles.repositories.users import UserRepository
from userroles.schemas.role import RoleRequest, RoleResponse
from userroles.schemas.user import UserProfile, UserRequest, UserResponse

logger = logging.getLogger(__name__)


class DirectoryService:
    """
    The only component allowed to call more than one repository operation for
    a single request. Stateless apart from the repositories' shared gateway.

    Missing entities raise NotFoundError; storage failures propagate as the
    StorageError the repositories raised.
    """

    def __init__(self, users: UserRepository, roles: RoleRepository) -> None:
        self._users = users
        self._roles = roles

    # Users

    def list_users(self) -> list[UserResponse]:
        return self._users.get_all()

    def get_user(self, user_id: int) -> UserResponse:
        user = self._users.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"User not found with id: {user_id}")
        return user

    def get_user_by_username(self, username: str) -> UserResponse:
        user = self._users.get_by_username(username)
        if user is None:
            raise NotFoundError(f"User not found with username: {username}")
        return user

    def create_user(self, body: UserRequest) -> UserResponse:
        created = self._users.create(body)
        if created is None:
            raise StorageError(f"User {body.username!r} was not created")
        return created

    def update_user(self, user_id: int, body: UserRequest) -> UserResponse:
        """Check existence, replace the user's attributes (and roles if given), return the stored result."""
        self.get_user(user_id)
        if not self._users.update(user_id, body):
            raise StorageError(f"Could not update user with id: {user_id}")
        return self.get_user(user_id)

    def delete_user(self, user_id: int) -> bool:
        """NotFoundError when the user is missing; False when the delete removed nothing."""
        self.get_user(user_id)
        return self._users.delete(user_id)

    # Roles

    def list_roles(self) -> list[RoleResponse]:
        return self._roles.get_all()

    def get_role(self, role_id: int) -> RoleResponse:
        role = self._roles.get_by_id(role_id)
        if role is None:
            raise NotFoundError(f"Role not found with id: {role_id}")
        return role

    def get_role_by_name(self, role_name: str) -> RoleResponse:
        role = self._roles.get_by_name(role_name)
        if role is None:
            raise NotFoundError(f"Role not found with name: {role_name}")
        return role

    def create_role(self, body: RoleRequest) -> RoleResponse:
        created = self._roles.create(body)
        if created is None:
            raise StorageError(f"Role {body.role_name!r} was not created")
        return created

    def update_role(self, role_id: int, body: RoleRequest) -> RoleResponse:
        self.get_role(role_id)
        if not self._roles.update(role_id, body):
            raise StorageError(f"Could not update role with id: {role_id}")
        return self.get_role(role_id)

    def delete_role(self, role_id: int) -> bool:
        """Assignments of the role go with it in the same transaction."""
        self.get_role(role_id)
        return self._roles.delete(role_id)

    def list_users_for_role(self, role_id: int) -> list[UserProfile]:
        self.get_role(role_id)
        return self._roles.get_users_by_role_id(role_id)

    # Assignments

    def assign_role_to_user(self, user_id: int, role_id: int) -> bool:
        """No existence pre-check: a missing user or role fails as a constraint violation."""
        assigned = self._users.assign_role(user_id, role_id)
        logger.info("Assigned role id=%s to user id=%s", role_id, user_id)
        return assigned

    def unassign_role_from_user(self, user_id: int, role_id: int) -> bool:
        """False means the assignment did not exist."""
        return self._users.remove_role(user_id, role_id)
