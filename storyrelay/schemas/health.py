"""Payload of GET /health: liveness of the Story Relay API and its story store."""

from typing import Literal

from pydantic import BaseModel, Field

StoreState = Literal["connected", "disconnected"]


class HealthResponse(BaseModel):
    """The API answers 200 while running; `database` says whether stories can be read."""

    status: Literal["ok"] = Field(default="ok", description="Always 'ok' when the API process responds")
    environment: str = Field(description="APP_ENV the service was started with")
    database: StoreState = Field(
        description="Result of SELECT 1 on the story database",
    )
