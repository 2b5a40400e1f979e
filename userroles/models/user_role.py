"""ORM model for the user/role assignment table."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, func

from userroles.models.base import Base


class UserRole(Base):
    """One assignment of a role to a user; at most one row per (user_id, role_id)."""

    __tablename__ = "user_roles"

    user_id = Column(Integer, ForeignKey("users.user_id"), primary_key=True)
    role_id = Column(Integer, ForeignKey("roles.role_id"), primary_key=True, index=True)
    assigned_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
