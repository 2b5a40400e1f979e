"""ORM model for directory roles."""

from sqlalchemy import Column, DateTime, Integer, String, func

from userroles.models.base import Base


class Role(Base):
    """Named role. role_name is unique by convention only; no constraint enforces it."""

    __tablename__ = "roles"
    __table_args__ = {"sqlite_autoincrement": True}

    role_id = Column(Integer, primary_key=True, autoincrement=True)
    role_name = Column(String(100), nullable=False, index=True)
    description = Column(String(255), nullable=True)
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
