"""ORM model for application users (auth and RBAC)."""

import enum

from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from storyrelay.models.base import Base


class UserRole(str, enum.Enum):
    """Role decided when the account is provisioned."""

    STANDARD = "standard"
    ADMIN = "admin"


class User(Base):
    """
    User account for cookie/JWT authentication and role-based access control.

    role: 'standard' or 'admin'. Admins may update and delete any user's content.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    nickname = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=UserRole.STANDARD.value)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    stories = relationship("Story", back_populates="author", passive_deletes=True)
