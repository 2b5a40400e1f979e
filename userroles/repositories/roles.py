"""Role repository: CRUD for roles and the users holding them."""

import logging

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from userroles.core.database import StorageGateway
from userroles.models import Role, User, UserRole
from userroles.repositories.mapping import role_from_row, user_profile_from_row
from userroles.schemas.role import RoleRequest, RoleResponse
from userroles.schemas.user import UserProfile

logger = logging.getLogger(__name__)


class RoleRepository:
    """Statements against roles and user_roles. Reads that find nothing return None."""

    def __init__(self, gateway: StorageGateway) -> None:
        self._gateway = gateway

    def get_all(self) -> list[RoleResponse]:
        with self._gateway.transaction("Error fetching all roles") as session:
            rows = session.scalars(select(Role).order_by(Role.role_id))
            return [role_from_row(row) for row in rows]

    def get_by_id(self, role_id: int) -> RoleResponse | None:
        with self._gateway.transaction(f"Error fetching role by id={role_id}") as session:
            row = session.scalars(select(Role).where(Role.role_id == role_id)).first()
            return role_from_row(row) if row is not None else None

    def get_by_name(self, role_name: str) -> RoleResponse | None:
        """
        Role names are unique by convention only. With duplicates, the first
        match in storage order (lowest role_id) is returned.
        """
        with self._gateway.transaction(f"Error fetching role by name={role_name!r}") as session:
            row = session.scalars(
                select(Role).where(Role.role_name == role_name).order_by(Role.role_id)
            ).first()
            return role_from_row(row) if row is not None else None

    def create(self, role: RoleRequest) -> RoleResponse | None:
        """Insert the role and return it with generated id and timestamps; None if no key came back."""
        with self._gateway.transaction(
            f"Error creating role name={role.role_name!r}"
        ) as session:
            row = Role(role_name=role.role_name, description=role.description)
            session.add(row)
            session.flush()
            if row.role_id is None:
                logger.error("Insert returned no generated key: role_name=%s", role.role_name)
                return None
            session.refresh(row)
            logger.info("Created role id=%s name=%s", row.role_id, row.role_name)
            return role_from_row(row)

    def update(self, role_id: int, role: RoleRequest) -> bool:
        with self._gateway.transaction(f"Error updating role id={role_id}") as session:
            result = session.execute(
                update(Role)
                .where(Role.role_id == role_id)
                .values(
                    role_name=role.role_name,
                    description=role.description,
                    updated_at=func.now(),
                )
            )
            return result.rowcount > 0

    def delete(self, role_id: int) -> bool:
        """
        Remove every assignment of the role and then the role row, atomically.

        If removing the row fails, the assignment cleanup is rolled back with
        it and the error propagates. Returns whether the role row was removed.
        """
        with self._gateway.transaction(f"Error deleting role id={role_id}") as session:
            self._delete_assignments(session, role_id)
            deleted = self._delete_row(session, role_id)
            if deleted:
                logger.info("Deleted role id=%s", role_id)
            return deleted

    def get_users_by_role_id(self, role_id: int) -> list[UserProfile]:
        """Users holding the role, ascending by user_id. Their own role sets are not loaded."""
        with self._gateway.transaction(f"Error fetching users for role id={role_id}") as session:
            rows = session.scalars(
                select(User)
                .join(UserRole, UserRole.user_id == User.user_id)
                .where(UserRole.role_id == role_id)
                .order_by(User.user_id)
            )
            return [user_profile_from_row(row) for row in rows]

    @staticmethod
    def _delete_assignments(session: Session, role_id: int) -> int:
        result = session.execute(delete(UserRole).where(UserRole.role_id == role_id))
        return result.rowcount

    @staticmethod
    def _delete_row(session: Session, role_id: int) -> bool:
        result = session.execute(delete(Role).where(Role.role_id == role_id))
        return result.rowcount > 0
