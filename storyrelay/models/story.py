"""ORM model for stories (the root post that relays continue)."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import relationship

from storyrelay.models.base import Base


class Story(Base):
    """
    A story started by one user and continued by relays.

    like_count mirrors the number of Like rows pointing at the story.
    """

    __tablename__ = "stories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    is_finished = Column(Boolean, nullable=False, default=False)
    like_count = Column(Integer, nullable=False, default=0)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    author = relationship("User", back_populates="stories")
    relays = relationship(
        "Relay",
        back_populates="story",
        cascade="all, delete-orphan",
        order_by="Relay.id",
    )
    likes = relationship("Like", back_populates="story", cascade="all, delete-orphan")
