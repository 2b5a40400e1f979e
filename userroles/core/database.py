"""Storage gateway: one shared SQLAlchemy session, schema bootstrap and units of work."""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event, func, insert, select, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from userroles.core.errors import (
    ConstraintViolationError,
    StorageConnectionError,
    StorageError,
)
from userroles.models import Base, Role, User, UserRole

logger = logging.getLogger(__name__)

DEMO_USERS: tuple[dict[str, str], ...] = (
    {
        "username": "admin",
        "email": "admin@example.com",
        "password_hash": "hashed_password",
        "first_name": "Admin",
        "last_name": "User",
    },
    {
        "username": "user1",
        "email": "user1@example.com",
        "password_hash": "hashed_password",
        "first_name": "Regular",
        "last_name": "User",
    },
    {
        "username": "manager",
        "email": "manager@example.com",
        "password_hash": "hashed_password",
        "first_name": "Manager",
        "last_name": "User",
    },
)

DEMO_ROLES: tuple[tuple[str, str], ...] = (
    ("ADMIN", "Administrator role with full access"),
    ("USER", "Regular user with limited access"),
    ("MANAGER", "Manager with department access"),
)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    """SQLite ignores FOREIGN KEY clauses unless the pragma is set per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class StorageGateway:
    """
    Owns the single logical connection/session to the relational store.

    Constructed once at process start and passed by reference to every
    repository. The engine and session are created lazily on first use, torn
    down by close() (called from the application shutdown hook), and recreated
    transparently by the next open(), which also re-runs schema initialization.

    Concurrent callers contend for the one session through a re-entrant lock.
    """

    def __init__(
        self,
        database_url: str,
        *,
        seed_demo_data: bool = True,
        echo: bool = False,
    ) -> None:
        self._database_url = database_url
        self._seed_demo_data = seed_demo_data
        self._echo = echo
        self._lock = threading.RLock()
        self._engine: Engine | None = None
        self._session: Session | None = None

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._session is not None

    def _create_engine(self) -> Engine:
        url = make_url(self._database_url)
        kwargs: dict[str, Any] = {"echo": self._echo}
        is_sqlite = url.get_backend_name() == "sqlite"
        if is_sqlite:
            kwargs["connect_args"] = {"check_same_thread": False}
            if url.database in (None, "", ":memory:"):
                # One connection for the process lifetime, or the in-memory database vanishes.
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True
        engine = create_engine(url, **kwargs)
        if is_sqlite:
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    def open(self) -> Session:
        """
        Return the ready-to-use session, creating engine, session and schema if needed.

        Raises StorageConnectionError if the engine cannot be reached.
        """
        with self._lock:
            if self._session is None:
                self._session = self._connect()
            return self._session

    def _connect(self) -> Session:
        safe_url = make_url(self._database_url).render_as_string(hide_password=True)
        logger.info("Opening storage session: url=%s", safe_url)
        engine = self._create_engine()
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            engine.dispose()
            logger.exception("Could not connect to the database: url=%s", safe_url)
            raise StorageConnectionError(
                f"Could not connect to the database: {e}", cause=e
            ) from e

        self._engine = engine
        session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
        self._session = session
        try:
            self.initialize_schema()
        except StorageError:
            self.close()
            raise
        return session

    def initialize_schema(self) -> None:
        """
        Create users, roles and user_roles, then seed the demo rows.

        Table creation checks for existing tables first. Seeding only happens
        when enabled and both parent tables are empty.
        """
        engine = self._engine
        if engine is None:
            raise StorageConnectionError("Storage gateway is not open")
        logger.info("Initializing database schema")
        try:
            Base.metadata.create_all(engine)
        except SQLAlchemyError as e:
            logger.exception("Error initializing database schema")
            raise StorageError(f"Error initializing database schema: {e}", cause=e) from e

        if self._seed_demo_data:
            self._seed()
        logger.info("Database schema initialized")

    def _seed(self) -> None:
        with self.transaction("Error seeding demo data") as session:
            user_count = session.scalar(select(func.count()).select_from(User))
            role_count = session.scalar(select(func.count()).select_from(Role))
            if user_count or role_count:
                logger.info(
                    "Skipping demo data: users=%s, roles=%s already present",
                    user_count,
                    role_count,
                )
                return
            users = [User(**row) for row in DEMO_USERS]
            roles = [Role(role_name=name, description=description) for name, description in DEMO_ROLES]
            session.add_all(users)
            session.flush()
            session.add_all(roles)
            session.flush()
            session.execute(
                insert(UserRole),
                [{"user_id": u.user_id, "role_id": r.role_id} for u, r in zip(users, roles)],
            )
            logger.info(
                "Inserted demo data: users=%s, roles=%s, assignments=%s",
                len(users),
                len(roles),
                len(users),
            )

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Exclusive use of the shared session for the duration of the block."""
        with self._lock:
            yield self.open()

    @contextmanager
    def transaction(self, description: str) -> Iterator[Session]:
        """
        Unit of work: every statement issued in the block commits or rolls back together.

        Engine errors are logged with `description` as context, the session is
        rolled back, and the error is re-raised as StorageError
        (ConstraintViolationError for integrity failures). Other exceptions
        roll back and propagate unchanged.
        """
        with self.session() as session:
            try:
                yield session
                session.commit()
            except IntegrityError as e:
                session.rollback()
                logger.exception("%s (constraint violation)", description)
                raise ConstraintViolationError(f"{description}: {e.orig}", cause=e) from e
            except SQLAlchemyError as e:
                session.rollback()
                logger.exception(description)
                raise StorageError(f"{description}: {e}", cause=e) from e
            except Exception:
                session.rollback()
                raise

    def is_connected(self) -> bool:
        """Run a trivial query to verify the database is reachable."""
        try:
            with self.transaction("Database connectivity check failed") as session:
                session.execute(text("SELECT 1"))
            return True
        except StorageError:
            return False

    def close(self) -> None:
        """Close the session and dispose the engine. A later open() starts over."""
        with self._lock:
            if self._session is not None:
                self._session.close()
                self._session = None
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
                logger.info("Storage session closed")
