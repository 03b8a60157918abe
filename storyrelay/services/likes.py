"""Like toggling for stories and relays, keeping like_count in step with Like rows."""

import logging

from sqlalchemy.orm import Session, joinedload

from storyrelay.models import Like, Relay, Story

logger = logging.getLogger(__name__)


def _toggle(db: Session, target: Story | Relay, user_id: int, **target_filter: int) -> bool:
    """
    Add the caller's like if absent, remove it if present. Returns True when now liked.

    The like row and the counter change are committed together. The counter is
    moved in SQL (like_count = like_count + 1), never from the loaded value,
    so toggles from other sessions are not lost.
    """
    model = type(target)
    existing = (
        db.query(Like)
        .filter(Like.user_id == user_id)
        .filter_by(**target_filter)
        .first()
    )
    counter = db.query(model).filter(model.id == target.id)
    if existing is None:
        db.add(Like(user_id=user_id, **target_filter))
        counter.update({model.like_count: model.like_count + 1}, synchronize_session=False)
        liked = True
    else:
        db.delete(existing)
        counter.filter(model.like_count > 0).update(
            {model.like_count: model.like_count - 1}, synchronize_session=False
        )
        liked = False
    db.commit()
    db.refresh(target)
    logger.info(
        "Like toggled: user_id=%s target=%s liked=%s like_count=%s",
        user_id,
        target_filter,
        liked,
        target.like_count,
    )
    return liked


def toggle_story_like(db: Session, story: Story, user_id: int) -> bool:
    return _toggle(db, story, user_id, story_id=story.id)


def toggle_relay_like(db: Session, relay: Relay, user_id: int) -> bool:
    return _toggle(db, relay, user_id, relay_id=relay.id)


def liked_stories(db: Session, user_id: int) -> list[Story]:
    """Stories the user has liked, most recently liked first."""
    return (
        db.query(Story)
        .join(Like, Like.story_id == Story.id)
        .options(joinedload(Story.author))
        .filter(Like.user_id == user_id)
        .order_by(Like.created_at.desc(), Like.id.desc())
        .all()
    )
