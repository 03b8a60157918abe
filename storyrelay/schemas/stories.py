"""Pydantic schemas for stories, relays and likes."""

from datetime import datetime

from pydantic import BaseModel, Field

TITLE_MAX_LENGTH = 255
CONTENT_MAX_LENGTH = 20_000


class StoryCreate(BaseModel):
    """Body for POST /stories."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(..., min_length=1, max_length=CONTENT_MAX_LENGTH)


class StoryUpdate(BaseModel):
    """Body for PUT /stories/{story_id}; omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(default=None, min_length=1, max_length=CONTENT_MAX_LENGTH)
    is_finished: bool | None = Field(
        default=None,
        description="Mark the story finished; finished stories accept no new relays.",
    )


class RelayCreate(BaseModel):
    """Body for POST and PUT on relays."""

    content: str = Field(..., min_length=1, max_length=CONTENT_MAX_LENGTH)


class RelayItem(BaseModel):
    """One relay as returned inside a story or relay list."""

    relay_id: int
    nickname: str
    content: str
    like_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StorySummary(BaseModel):
    """Story entry for list endpoints."""

    story_id: int
    nickname: str
    title: str
    content: str
    is_finished: bool
    like_count: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StoryDetail(StorySummary):
    """Story with its relays, oldest first."""

    relays: list[RelayItem]


class StoriesResponse(BaseModel):
    stories: list[StorySummary]


class StoryResponse(BaseModel):
    story: StoryDetail


class RelaysResponse(BaseModel):
    relays: list[RelayItem]


class LikeToggleResponse(BaseModel):
    """Result of toggling a like: whether the caller now likes the target, and the new count."""

    message: str
    liked: bool
    like_count: int
