"""ORM model for directory users."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, func, true

from userroles.models.base import Base


class User(Base):
    """
    User account row.

    Assigned roles are not stored here; they live in user_roles and are
    reconstructed on every read.
    """

    __tablename__ = "users"
    # Generated ids are never reused after a delete.
    __table_args__ = {"sqlite_autoincrement": True}

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), nullable=False, index=True)
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    active = Column(Boolean, nullable=False, server_default=true())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
