"""Like endpoints: toggle likes on stories and relays, list liked stories."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storyrelay.api.v1.auth import get_current_user
from storyrelay.core.database import get_db
from storyrelay.schemas.auth import CurrentUser
from storyrelay.schemas.stories import LikeToggleResponse, StoriesResponse
from storyrelay.services.likes import liked_stories, toggle_relay_like, toggle_story_like
from storyrelay.services.ownership import ResourceNotFoundError
from storyrelay.services.stories import get_relay, get_story, story_summary

logger = logging.getLogger(__name__)
router = APIRouter()


def _like_failure(db: Session) -> HTTPException:
    db.rollback()
    logger.exception("Like toggle failed")
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Failed to update the like.",
    )


@router.put("/stories/{story_id}/likes", response_model=LikeToggleResponse)
def like_story(
    story_id: int,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> LikeToggleResponse:
    """Like the story, or remove the caller's like if already present."""
    try:
        story = get_story(db, story_id)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except SQLAlchemyError as e:
        raise _like_failure(db) from e
    try:
        liked = toggle_story_like(db, story, user.id)
    except SQLAlchemyError as e:
        raise _like_failure(db) from e
    return LikeToggleResponse(
        message="Liked the story." if liked else "Removed the like from the story.",
        liked=liked,
        like_count=story.like_count,
    )


@router.put("/stories/{story_id}/relays/{relay_id}/likes", response_model=LikeToggleResponse)
def like_relay(
    story_id: int,
    relay_id: int,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> LikeToggleResponse:
    """Like the relay, or remove the caller's like if already present."""
    try:
        get_story(db, story_id)
        relay = get_relay(db, story_id, relay_id)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except SQLAlchemyError as e:
        raise _like_failure(db) from e
    try:
        liked = toggle_relay_like(db, relay, user.id)
    except SQLAlchemyError as e:
        raise _like_failure(db) from e
    return LikeToggleResponse(
        message="Liked the relay." if liked else "Removed the like from the relay.",
        liked=liked,
        like_count=relay.like_count,
    )


@router.get("/likes/stories", response_model=StoriesResponse)
def get_liked_stories(
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> StoriesResponse:
    """Stories the caller has liked, most recently liked first."""
    try:
        stories = liked_stories(db, user.id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Liked stories lookup failed for user_id=%s", user.id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to load liked stories.",
        ) from e
    return StoriesResponse(stories=[story_summary(s) for s in stories])
