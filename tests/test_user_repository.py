"""Tests for userroles.repositories.users against an in-memory SQLite gateway."""

import unittest
from concurrent.futures import ThreadPoolExecutor

from sqlalchemy import func, select

from userroles.core.database import StorageGateway
from userroles.core.errors import ConstraintViolationError
from userroles.models import User, UserRole
from userroles.repositories.users import UserRepository
from userroles.schemas.user import UserRequest


def _request(username: str = "jdoe", roles: list[int] | None = None, **kwargs: object) -> UserRequest:
    """Build a minimal UserRequest for tests."""
    defaults = {
        "email": f"{username}@example.com",
        "password_hash": "secret-hash",
        "first_name": "John",
        "last_name": "Doe",
    }
    defaults.update(kwargs)
    return UserRequest(
        username=username,
        roles=None if roles is None else [{"roleId": r} for r in roles],
        **defaults,
    )


class UserRepositoryTestCase(unittest.TestCase):
    """Seeded gateway: admin(1)->ADMIN(1), user1(2)->USER(2), manager(3)->MANAGER(3)."""

    def setUp(self) -> None:
        self.gateway = StorageGateway("sqlite://")
        self.addCleanup(self.gateway.close)
        self.repo = UserRepository(self.gateway)

    def _role_ids(self, user_id: int) -> list[int]:
        return [r.role_id for r in self.repo.get_roles(user_id)]

    def _assignment_count(self, user_id: int) -> int:
        with self.gateway.transaction("count") as session:
            return session.scalar(
                select(func.count()).select_from(UserRole).where(UserRole.user_id == user_id)
            )


class TestReads(UserRepositoryTestCase):
    def test_get_all_ordered_with_roles(self) -> None:
        users = self.repo.get_all()
        self.assertEqual([u.user_id for u in users], [1, 2, 3])
        self.assertEqual([u.username for u in users], ["admin", "user1", "manager"])
        self.assertEqual([[r.role_name for r in u.roles] for u in users], [["ADMIN"], ["USER"], ["MANAGER"]])

    def test_get_by_id(self) -> None:
        user = self.repo.get_by_id(1)
        self.assertIsNotNone(user)
        self.assertEqual(user.username, "admin")
        self.assertEqual(user.email, "admin@example.com")
        self.assertEqual(user.first_name, "Admin")
        self.assertTrue(user.active)
        self.assertEqual([r.role_id for r in user.roles], [1])

    def test_get_by_id_missing_returns_none(self) -> None:
        self.assertIsNone(self.repo.get_by_id(999))

    def test_get_by_username(self) -> None:
        user = self.repo.get_by_username("manager")
        self.assertEqual(user.user_id, 3)
        self.assertEqual([r.role_name for r in user.roles], ["MANAGER"])
        self.assertIsNone(self.repo.get_by_username("nobody"))

    def test_get_by_username_duplicates_picks_lowest_id(self) -> None:
        self.repo.create(_request("admin", email="second-admin@example.com"))
        user = self.repo.get_by_username("admin")
        self.assertEqual(user.user_id, 1)


class TestCreate(UserRepositoryTestCase):
    def test_round_trip(self) -> None:
        created = self.repo.create(_request("alice", roles=[1, 2], first_name="Alice", active=False))
        self.assertIsNotNone(created)
        self.assertGreater(created.user_id, 3)
        self.assertIsNotNone(created.created_at)
        self.assertIsNotNone(created.updated_at)

        fetched = self.repo.get_by_id(created.user_id)
        self.assertEqual(fetched.username, "alice")
        self.assertEqual(fetched.email, "alice@example.com")
        self.assertEqual(fetched.password_hash, "secret-hash")
        self.assertEqual(fetched.first_name, "Alice")
        self.assertEqual(fetched.last_name, "Doe")
        self.assertFalse(fetched.active)
        self.assertEqual([r.role_id for r in fetched.roles], [1, 2])
        self.assertEqual(fetched.roles, created.roles)

    def test_roles_reloaded_from_storage(self) -> None:
        created = self.repo.create(_request("bob", roles=[3]))
        self.assertEqual([r.role_name for r in created.roles], ["MANAGER"])
        self.assertEqual(created.roles[0].description, "Manager with department access")

    def test_nullable_names(self) -> None:
        created = self.repo.create(_request("carol", first_name=None, last_name=None))
        self.assertIsNone(created.first_name)
        self.assertIsNone(created.last_name)
        self.assertEqual(created.roles, [])

    def test_missing_role_rolls_back_whole_create(self) -> None:
        with self.assertRaises(ConstraintViolationError):
            self.repo.create(_request("dave", roles=[1, 999]))
        self.assertIsNone(self.repo.get_by_username("dave"))
        with self.gateway.transaction("count") as session:
            self.assertEqual(session.scalar(select(func.count()).select_from(User)), 3)

    def test_ids_not_reused_after_delete(self) -> None:
        first = self.repo.create(_request("erin"))
        self.repo.delete(first.user_id)
        second = self.repo.create(_request("erin"))
        self.assertGreater(second.user_id, first.user_id)


class TestConcurrentCallers(UserRepositoryTestCase):
    """Worker threads share one gateway and therefore one session."""

    def test_parallel_creates_get_distinct_ids(self) -> None:
        total = 200

        def create(n: int) -> int:
            created = self.repo.create(_request(f"worker{n}", roles=[(n % 3) + 1]))
            return created.user_id

        with ThreadPoolExecutor(max_workers=16) as pool:
            ids = list(pool.map(create, range(total)))

        self.assertEqual(len(set(ids)), total)
        self.assertTrue(all(user_id > 3 for user_id in ids))
        with self.gateway.transaction("count") as session:
            self.assertEqual(session.scalar(select(func.count()).select_from(User)), total + 3)
            self.assertEqual(session.scalar(select(func.count()).select_from(UserRole)), total + 3)

    def test_parallel_reads_and_assignments(self) -> None:
        def assign_then_read(role_id: int) -> list[int]:
            self.repo.assign_role(2, role_id)
            return self._role_ids(2)

        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(assign_then_read, [1, 3]))

        self.assertEqual(self._role_ids(2), [1, 2, 3])


class TestUpdate(UserRepositoryTestCase):
    def test_replaces_attributes(self) -> None:
        updated = self.repo.update(
            2, _request("user1-renamed", email="new@example.com", first_name=None, active=False)
        )
        self.assertTrue(updated)
        user = self.repo.get_by_id(2)
        self.assertEqual(user.username, "user1-renamed")
        self.assertEqual(user.email, "new@example.com")
        self.assertIsNone(user.first_name)
        self.assertFalse(user.active)
        # Roles untouched when the request carries none.
        self.assertEqual([r.role_id for r in user.roles], [2])

    def test_roles_replaced_not_merged(self) -> None:
        self.assertTrue(self.repo.update(2, _request("user1", roles=[1, 2])))
        self.assertEqual(self._role_ids(2), [1, 2])
        self.assertTrue(self.repo.update(2, _request("user1", roles=[2, 3])))
        self.assertEqual(self._role_ids(2), [2, 3])

    def test_empty_role_list_clears_assignments(self) -> None:
        self.assertTrue(self.repo.update(1, _request("admin", roles=[])))
        self.assertEqual(self._role_ids(1), [])

    def test_duplicate_role_ids_in_request_assigned_once(self) -> None:
        self.assertTrue(self.repo.update(3, _request("manager", roles=[1, 1, 3])))
        self.assertEqual(self._role_ids(3), [1, 3])

    def test_missing_user_returns_false(self) -> None:
        self.assertFalse(self.repo.update(999, _request("ghost", roles=[1])))
        self.assertEqual(self._assignment_count(999), 0)

    def test_failed_role_replacement_keeps_previous_roles(self) -> None:
        with self.assertRaises(ConstraintViolationError):
            self.repo.update(2, _request("user1-changed", roles=[1, 999]))
        user = self.repo.get_by_id(2)
        self.assertEqual(user.username, "user1")
        self.assertEqual([r.role_id for r in user.roles], [2])


class TestDelete(UserRepositoryTestCase):
    def test_removes_assignments_then_row(self) -> None:
        self.assertTrue(self.repo.delete(1))
        self.assertIsNone(self.repo.get_by_id(1))
        self.assertEqual(self._assignment_count(1), 0)

    def test_missing_user_returns_false(self) -> None:
        self.assertFalse(self.repo.delete(999))

    def test_recreate_same_username_starts_without_roles(self) -> None:
        self.repo.delete(1)
        recreated = self.repo.create(_request("admin"))
        self.assertEqual(recreated.username, "admin")
        self.assertEqual(recreated.roles, [])
        self.assertEqual(self.repo.get_by_id(recreated.user_id).roles, [])


class TestAssignments(UserRepositoryTestCase):
    def test_assign_and_remove(self) -> None:
        self.assertTrue(self.repo.assign_role(1, 2))
        self.assertEqual(self._role_ids(1), [1, 2])
        self.assertTrue(self.repo.remove_role(1, 2))
        self.assertEqual(self._role_ids(1), [1])

    def test_assign_twice_violates_constraint(self) -> None:
        self.repo.assign_role(2, 3)
        with self.assertRaises(ConstraintViolationError):
            self.repo.assign_role(2, 3)
        self.assertEqual(self._role_ids(2), [2, 3])

    def test_assign_missing_role_violates_foreign_key(self) -> None:
        with self.assertRaises(ConstraintViolationError):
            self.repo.assign_role(1, 999)

    def test_assign_missing_user_violates_foreign_key(self) -> None:
        with self.assertRaises(ConstraintViolationError):
            self.repo.assign_role(999, 1)

    def test_remove_missing_pair_returns_false(self) -> None:
        self.assertFalse(self.repo.remove_role(1, 3))
        self.assertFalse(self.repo.remove_role(999, 999))


if __name__ == "__main__":
    unittest.main()
