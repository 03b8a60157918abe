"""SQLAlchemy ORM models."""

from storyrelay.models.base import Base
from storyrelay.models.like import Like
from storyrelay.models.relay import Relay
from storyrelay.models.story import Story
from storyrelay.models.user import User, UserRole

__all__ = ["Base", "Like", "Relay", "Story", "User", "UserRole"]
