"""ORM model for likes on stories and relays."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from storyrelay.models.base import Base


class Like(Base):
    """
    One user's like on exactly one target (a story or a relay).

    A user can like a given target at most once.
    """

    __tablename__ = "likes"
    __table_args__ = (
        CheckConstraint(
            "(story_id IS NULL) <> (relay_id IS NULL)",
            name="ck_likes_single_target",
        ),
        UniqueConstraint("user_id", "story_id", name="uq_likes_user_story"),
        UniqueConstraint("user_id", "relay_id", name="uq_likes_user_relay"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    story_id = Column(Integer, ForeignKey("stories.id", ondelete="CASCADE"), nullable=True)
    relay_id = Column(Integer, ForeignKey("relays.id", ondelete="CASCADE"), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    story = relationship("Story", back_populates="likes")
    relay = relationship("Relay", back_populates="likes")
