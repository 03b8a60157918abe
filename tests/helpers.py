"""Shared test base: a fresh in-memory SQLite database per test and a TestClient bound to it."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from storyrelay.core.config import settings
from storyrelay.core.database import get_db
from storyrelay.core.security import hash_password, issue_access_token
from storyrelay.main import app
from storyrelay.models import Base, Relay, Story, User, UserRole

API = settings.API_V1_PREFIX


class DatabaseTestCase(unittest.TestCase):
    """Creates all tables on a private SQLite engine; self.db is a session on it."""

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.SessionTest = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.db: Session = self.SessionTest()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def fetch(self, model: type, row_id: int):
        """Read a row through a fresh session so cached state never hides a change."""
        with self.SessionTest() as s:
            return s.get(model, row_id)

    def make_user(self, nickname: str, password: str = "pw-1234", role: UserRole = UserRole.STANDARD) -> User:
        user = User(nickname=nickname, password_hash=hash_password(password), role=role.value)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def make_story(self, owner: User, title: str = "Once upon a time", content: str = "There was a fox.") -> Story:
        story = Story(user_id=owner.id, title=title, content=content, like_count=0)
        self.db.add(story)
        self.db.commit()
        self.db.refresh(story)
        return story

    def make_relay(self, story: Story, owner: User, content: str = "The fox ran.") -> Relay:
        relay = Relay(story_id=story.id, user_id=owner.id, content=content, like_count=0)
        self.db.add(relay)
        self.db.commit()
        self.db.refresh(relay)
        return relay


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient whose get_db yields sessions on the test engine."""

    def setUp(self) -> None:
        super().setUp()

        def override_get_db():
            db = self.SessionTest()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        self.client.close()
        app.dependency_overrides.clear()
        super().tearDown()

    @staticmethod
    def auth_headers(user: User) -> dict[str, str]:
        """Cookie header carrying 'Bearer <token>' for the given user."""
        token = issue_access_token(user.id)
        return {"Cookie": f"{settings.AUTH_COOKIE_NAME}=Bearer {token}"}
