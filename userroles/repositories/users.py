"""User repository: CRUD for users and their role assignments."""

import logging

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.orm import Session

from userroles.core.database import StorageGateway
from userroles.models import Role, User, UserRole
from userroles.repositories.mapping import role_from_row, user_from_row
from userroles.schemas.role import RoleResponse
from userroles.schemas.user import UserRequest, UserResponse

logger = logging.getLogger(__name__)


class UserRepository:
    """
    Statements against users and user_roles.

    Every public method runs as one gateway unit of work, so a failure in a
    later step (e.g. assigning a missing role while creating a user) rolls back
    the earlier steps too. Engine failures surface as StorageError; reads that
    find nothing return None.
    """

    def __init__(self, gateway: StorageGateway) -> None:
        self._gateway = gateway

    def get_all(self) -> list[UserResponse]:
        """All users ascending by user_id, each with its roles attached."""
        with self._gateway.transaction("Error fetching all users") as session:
            rows = session.scalars(select(User).order_by(User.user_id)).all()
            return [user_from_row(row, self._roles_for(session, row.user_id)) for row in rows]

    def get_by_id(self, user_id: int) -> UserResponse | None:
        with self._gateway.transaction(f"Error fetching user by id={user_id}") as session:
            row = session.scalars(select(User).where(User.user_id == user_id)).first()
            if row is None:
                return None
            return user_from_row(row, self._roles_for(session, row.user_id))

    def get_by_username(self, username: str) -> UserResponse | None:
        """Usernames are not unique in storage; the lowest user_id wins."""
        with self._gateway.transaction(f"Error fetching user by username={username!r}") as session:
            row = session.scalars(
                select(User).where(User.username == username).order_by(User.user_id)
            ).first()
            if row is None:
                return None
            return user_from_row(row, self._roles_for(session, row.user_id))

    def get_roles(self, user_id: int) -> list[RoleResponse]:
        with self._gateway.transaction(f"Error fetching roles of user id={user_id}") as session:
            return self._roles_for(session, user_id)

    def create(self, user: UserRequest) -> UserResponse | None:
        """
        Insert the user, read back its generated id and timestamps, assign the
        requested roles and return the user with roles reloaded from storage.

        Returns None if the insert produced no generated key.
        """
        with self._gateway.transaction(
            f"Error creating user username={user.username!r}"
        ) as session:
            row = User(
                username=user.username,
                email=user.email,
                password_hash=user.password_hash,
                first_name=user.first_name,
                last_name=user.last_name,
                active=user.active,
            )
            session.add(row)
            session.flush()
            if row.user_id is None:
                logger.error("Insert returned no generated key: username=%s", user.username)
                return None
            session.refresh(row)

            for role_id in user.role_ids or []:
                self._insert_assignment(session, row.user_id, role_id)

            logger.info("Created user id=%s username=%s", row.user_id, row.username)
            return user_from_row(row, self._roles_for(session, row.user_id))

    def update(self, user_id: int, user: UserRequest) -> bool:
        """
        Replace every mutable attribute of the user.

        When the request carries a role list and the row was updated, the
        user's assignments are replaced by exactly that list (not merged).
        Returns whether the base row was updated.
        """
        with self._gateway.transaction(f"Error updating user id={user_id}") as session:
            result = session.execute(
                update(User)
                .where(User.user_id == user_id)
                .values(
                    username=user.username,
                    email=user.email,
                    password_hash=user.password_hash,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    active=user.active,
                    updated_at=func.now(),
                )
            )
            updated = result.rowcount > 0
            role_ids = user.role_ids
            if updated and role_ids is not None:
                self._delete_assignments(session, user_id)
                for role_id in role_ids:
                    self._insert_assignment(session, user_id, role_id)
            return updated

    def delete(self, user_id: int) -> bool:
        """
        Remove the user's assignments, then the user row.

        The assignment cleanup runs whether or not the user exists. Returns
        whether the user row was removed.
        """
        with self._gateway.transaction(f"Error deleting user id={user_id}") as session:
            self._delete_assignments(session, user_id)
            result = session.execute(delete(User).where(User.user_id == user_id))
            deleted = result.rowcount > 0
            if deleted:
                logger.info("Deleted user id=%s", user_id)
            return deleted

    def assign_role(self, user_id: int, role_id: int) -> bool:
        """
        Insert one assignment.

        Raises ConstraintViolationError if the pair already exists or either id
        does not reference an existing row.
        """
        with self._gateway.transaction(
            f"Error assigning role id={role_id} to user id={user_id}"
        ) as session:
            self._insert_assignment(session, user_id, role_id)
            return True

    def remove_role(self, user_id: int, role_id: int) -> bool:
        """False means there was no such assignment."""
        with self._gateway.transaction(
            f"Error removing role id={role_id} from user id={user_id}"
        ) as session:
            result = session.execute(
                delete(UserRole).where(
                    UserRole.user_id == user_id,
                    UserRole.role_id == role_id,
                )
            )
            return result.rowcount > 0

    @staticmethod
    def _insert_assignment(session: Session, user_id: int, role_id: int) -> None:
        session.execute(insert(UserRole).values(user_id=user_id, role_id=role_id))

    @staticmethod
    def _delete_assignments(session: Session, user_id: int) -> None:
        session.execute(delete(UserRole).where(UserRole.user_id == user_id))

    @staticmethod
    def _roles_for(session: Session, user_id: int) -> list[RoleResponse]:
        rows = session.scalars(
            select(Role)
            .join(UserRole, UserRole.role_id == Role.role_id)
            .where(UserRole.user_id == user_id)
            .order_by(Role.role_id)
        )
        return [role_from_row(row) for row in rows]
