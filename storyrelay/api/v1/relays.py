"""Relay endpoints: continuations appended to a story."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storyrelay.api.v1.auth import get_current_user
from storyrelay.core.database import get_db
from storyrelay.models import Relay
from storyrelay.schemas.auth import CurrentUser, MessageResponse
from storyrelay.schemas.stories import RelayCreate, RelaysResponse
from storyrelay.services.ownership import (
    PermissionDeniedError,
    ResourceNotFoundError,
    load_for_update,
)
from storyrelay.services.stories import (
    RELAY_NOT_FOUND,
    StoryFinishedError,
    ensure_open_for_relays,
    get_story,
    relay_item,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _load_relay_for_update(
    db: Session, story_id: int, relay_id: int, user: CurrentUser, action: str
) -> Relay:
    """Story must exist, then the relay within it, then the caller must own it (or be admin)."""
    try:
        get_story(db, story_id)
        return load_for_update(
            db,
            Relay,
            relay_id,
            user,
            not_found=RELAY_NOT_FOUND,
            forbidden=f"You do not have permission to {action} this relay.",
            story_id=story_id,
        )
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message) from e


@router.get("/{story_id}/relays", response_model=RelaysResponse)
def get_relays(
    story_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> RelaysResponse:
    """Return the relays of a story, oldest first."""
    try:
        story = get_story(db, story_id, with_relays=True)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Relay list failed for story_id=%s", story_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to load the relays.",
        ) from e
    return RelaysResponse(relays=[relay_item(r) for r in story.relays])


@router.post(
    "/{story_id}/relays",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_relay(
    story_id: int,
    body: RelayCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Append a relay to an unfinished story. Any signed-in user may relay."""
    try:
        story = get_story(db, story_id)
        ensure_open_for_relays(story)
    except ResourceNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except StoryFinishedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e

    try:
        relay = Relay(story_id=story.id, user_id=user.id, content=body.content, like_count=0)
        db.add(relay)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Relay create failed for story_id=%s", story_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to create the relay.",
        ) from e
    logger.info("Relay created: relay_id=%s story_id=%s user_id=%s", relay.id, story_id, user.id)
    return MessageResponse(message="Relay created.")


@router.put("/{story_id}/relays/{relay_id}", response_model=MessageResponse)
def update_relay(
    story_id: int,
    relay_id: int,
    body: RelayCreate,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Edit a relay's content. Allowed for its author and admins."""
    relay = _load_relay_for_update(db, story_id, relay_id, user, "edit")
    try:
        relay.content = body.content
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Relay update failed for relay_id=%s", relay_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to update the relay.",
        ) from e
    logger.info("Relay updated: relay_id=%s by user_id=%s", relay_id, user.id)
    return MessageResponse(message="Relay updated.")


@router.delete("/{story_id}/relays/{relay_id}", response_model=MessageResponse)
def delete_relay(
    story_id: int,
    relay_id: int,
    db: Annotated[Session, Depends(get_db)],
    user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    """Delete a relay and its likes. Allowed for its author and admins."""
    relay = _load_relay_for_update(db, story_id, relay_id, user, "delete")
    try:
        db.delete(relay)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Relay delete failed for relay_id=%s", relay_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to delete the relay.",
        ) from e
    logger.info("Relay deleted: relay_id=%s by user_id=%s", relay_id, user.id)
    return MessageResponse(message="Relay deleted.")
