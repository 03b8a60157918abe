"""Story and relay lookups plus conversion of ORM rows into response schemas."""

from sqlalchemy.orm import Session, joinedload, selectinload

from storyrelay.models import Relay, Story
from storyrelay.schemas.stories import RelayItem, StoryDetail, StorySummary
from storyrelay.services.ownership import ResourceNotFoundError

STORY_NOT_FOUND = "Story does not exist."
RELAY_NOT_FOUND = "Relay does not exist."


class StoryFinishedError(Exception):
    """Raised when a relay is appended to a story that has been marked finished."""

    def __init__(self, message: str = "Story is finished and accepts no more relays.") -> None:
        self.message = message
        super().__init__(message)


def list_stories(db: Session) -> list[Story]:
    """All stories, newest first, with authors loaded."""
    return (
        db.query(Story)
        .options(joinedload(Story.author))
        .order_by(Story.created_at.desc(), Story.id.desc())
        .all()
    )


def get_story(db: Session, story_id: int, *, with_relays: bool = False) -> Story:
    """Load a story or raise ResourceNotFoundError."""
    query = db.query(Story).options(joinedload(Story.author))
    if with_relays:
        query = query.options(selectinload(Story.relays).joinedload(Relay.author))
    story = query.filter(Story.id == story_id).first()
    if story is None:
        raise ResourceNotFoundError(STORY_NOT_FOUND)
    return story


def get_relay(db: Session, story_id: int, relay_id: int) -> Relay:
    """Load a relay that belongs to story_id or raise ResourceNotFoundError."""
    relay = (
        db.query(Relay)
        .filter(Relay.id == relay_id, Relay.story_id == story_id)
        .first()
    )
    if relay is None:
        raise ResourceNotFoundError(RELAY_NOT_FOUND)
    return relay


def ensure_open_for_relays(story: Story) -> None:
    if story.is_finished:
        raise StoryFinishedError()


def relay_item(relay: Relay) -> RelayItem:
    return RelayItem(
        relay_id=relay.id,
        nickname=relay.author.nickname,
        content=relay.content,
        like_count=relay.like_count,
        created_at=relay.created_at,
        updated_at=relay.updated_at,
    )


def story_summary(story: Story) -> StorySummary:
    return StorySummary(
        story_id=story.id,
        nickname=story.author.nickname,
        title=story.title,
        content=story.content,
        is_finished=story.is_finished,
        like_count=story.like_count,
        created_at=story.created_at,
        updated_at=story.updated_at,
    )


def story_detail(story: Story) -> StoryDetail:
    return StoryDetail(
        **story_summary(story).model_dump(),
        relays=[relay_item(r) for r in story.relays],
    )
