"""SQLAlchemy ORM models."""

from userroles.models.base import Base
from userroles.models.role import Role
from userroles.models.user import User
from userroles.models.user_role import UserRole

__all__ = ["Base", "Role", "User", "UserRole"]
