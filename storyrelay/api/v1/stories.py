"""Story endpoints: list, create, detail, update and delete."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storyrelay.api.v1.auth import get_current_user
from storyrelay.core.database import get_db
from storyrelay.models import Story
from storyrelay.schemas.auth import CurrentUser, MessageResponse
from storyrelay.schemas.stories import (
    StoriesResponse,
    StoryCreate,
    StoryResponse,
    StoryUpdate,
)
from storyrelay.services.ownership import (
    PermissionDeniedError,
    ResourceNotFoundError,
    load_for_update,
)
from storyrelay.services.stories import (
    STORY_NOT_FOUND,
    get_story,
    list_stories,
    story_detail,
    story_summary,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _persistence_failure(db: Session, action: str) -> HTTPException:
    db.rollback()
    logger.exception("Story %s failed", action)
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Failed to {action} the story.",
    )


@router.get("", response_model=StoriesResponse)
def get_stories(db: Annotated[Session, Depends(get_db)]) -> StoriesResponse:
    """Return every story, newest first, with the author's nickname."""
    try:
        stories = list_stories(db)
    except SQLAlchemyError as e:
        raise _persistence_failure(db, "load") from e
    return StoriesResponse(stories=[story_summary(s) for s in stories])


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_story(
    body: StoryCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Start a new story owned by the caller."""
    try:
        story = Story(user_id=user.id, title=body.title, content=body.content, like_count=0)
        db.add(story)
        db.commit()
    except SQLAlchemyError as e:
        raise _persistence_failure(db, "create") from e
    logger.info("Story created: story_id=%s user_id=%s", story.id, user.id)
    return MessageResponse(message="Story created.")


@router.get("/{story_id}", response_model=StoryResponse)
def get_story_detail(
    story_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> StoryResponse:
    """Return one story with its author and relays."""
    try:
        story = get_story(db, story_id, with_relays=True)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except SQLAlchemyError as e:
        raise _persistence_failure(db, "load") from e
    return StoryResponse(story=story_detail(story))


@router.put("/{story_id}", response_model=MessageResponse)
def update_story(
    story_id: int,
    body: StoryUpdate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Update title, content or finished flag. Allowed for the author and admins."""
    try:
        story = load_for_update(
            db,
            Story,
            story_id,
            user,
            not_found=STORY_NOT_FOUND,
            forbidden="You do not have permission to edit this story.",
        )
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message) from e

    try:
        for field, value in body.model_dump(exclude_none=True).items():
            setattr(story, field, value)
        db.commit()
    except SQLAlchemyError as e:
        raise _persistence_failure(db, "update") from e
    logger.info("Story updated: story_id=%s by user_id=%s", story_id, user.id)
    return MessageResponse(message="Story updated.")


@router.delete("/{story_id}", response_model=MessageResponse)
def delete_story(
    story_id: int,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Delete a story with its relays and likes. Allowed for the author and admins."""
    try:
        story = load_for_update(
            db,
            Story,
            story_id,
            user,
            not_found=STORY_NOT_FOUND,
            forbidden="You do not have permission to delete this story.",
        )
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message) from e

    try:
        db.delete(story)
        db.commit()
    except SQLAlchemyError as e:
        raise _persistence_failure(db, "delete") from e
    logger.info("Story deleted: story_id=%s by user_id=%s", story_id, user.id)
    return MessageResponse(message="Story deleted.")
