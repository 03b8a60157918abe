"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storyrelay.api.v1 import router as v1_router
from storyrelay.core.config import settings

app = FastAPI(
    title="Story Relay API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Credentialed CORS cannot use a wildcard origin, so dev allows any origin by regex.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_origin_regex=".*" if settings.APP_ENV == "dev" else None,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Story Relay API"}
