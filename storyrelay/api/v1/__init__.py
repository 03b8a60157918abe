"""API v1 routes."""

from fastapi import APIRouter

from storyrelay.api.v1 import auth, health, likes, relays, stories

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["users"])
router.include_router(stories.router, prefix="/stories", tags=["stories"])
router.include_router(relays.router, prefix="/stories", tags=["relays"])
router.include_router(likes.router, tags=["likes"])
