"""Pydantic request/response schemas."""

from storyrelay.schemas.auth import (
    CurrentUser,
    MessageResponse,
    SigninRequest,
    SignupRequest,
    TokenResponse,
    UserListItem,
    UsersListResponse,
)
from storyrelay.schemas.health import HealthResponse
from storyrelay.schemas.stories import (
    LikeToggleResponse,
    RelayCreate,
    RelayItem,
    RelaysResponse,
    StoriesResponse,
    StoryCreate,
    StoryDetail,
    StoryResponse,
    StorySummary,
    StoryUpdate,
)

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LikeToggleResponse",
    "MessageResponse",
    "RelayCreate",
    "RelayItem",
    "RelaysResponse",
    "SigninRequest",
    "SignupRequest",
    "StoriesResponse",
    "StoryCreate",
    "StoryDetail",
    "StoryResponse",
    "StorySummary",
    "StoryUpdate",
    "TokenResponse",
    "UserListItem",
    "UsersListResponse",
]
