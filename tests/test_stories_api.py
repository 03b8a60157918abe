"""API tests for stories: listing, creation, detail, and owner/admin-guarded update and delete."""

import unittest
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from helpers import API, ApiTestCase
from storyrelay.models import Like, Relay, Story, UserRole


class StoriesTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.make_user("owner1")
        self.stranger = self.make_user("stranger1")
        self.admin = self.make_user("admin1", role=UserRole.ADMIN)


class TestCreateAndRead(StoriesTestCase):
    def test_create_story(self) -> None:
        r = self.client.post(
            f"{API}/stories",
            json={"title": "The fox", "content": "A fox lived in the woods."},
            headers=self.auth_headers(self.owner),
        )
        self.assertEqual(r.status_code, 201)
        story = self.db.query(Story).one()
        self.assertEqual(story.user_id, self.owner.id)
        self.assertEqual(story.like_count, 0)
        self.assertFalse(story.is_finished)

    def test_create_requires_title_and_content(self) -> None:
        r = self.client.post(
            f"{API}/stories",
            json={"title": ""},
            headers=self.auth_headers(self.owner),
        )
        self.assertEqual(r.status_code, 422)

    def test_list_is_public_and_newest_first(self) -> None:
        first = self.make_story(self.owner, title="first")
        second = self.make_story(self.stranger, title="second")
        r = self.client.get(f"{API}/stories")
        self.assertEqual(r.status_code, 200)
        stories = r.json()["stories"]
        self.assertEqual([s["story_id"] for s in stories], [second.id, first.id])
        self.assertEqual(stories[0]["nickname"], "stranger1")

    def test_detail_includes_relays(self) -> None:
        story = self.make_story(self.owner)
        self.make_relay(story, self.stranger, content="next part")
        r = self.client.get(f"{API}/stories/{story.id}")
        self.assertEqual(r.status_code, 200)
        body = r.json()["story"]
        self.assertEqual(body["nickname"], "owner1")
        self.assertEqual(len(body["relays"]), 1)
        self.assertEqual(body["relays"][0]["content"], "next part")
        self.assertEqual(body["relays"][0]["nickname"], "stranger1")

    def test_detail_missing_story_is_404(self) -> None:
        self.assertEqual(self.client.get(f"{API}/stories/9999").status_code, 404)

    def test_create_persistence_failure_returns_400(self) -> None:
        with patch("sqlalchemy.orm.Session.commit", side_effect=OperationalError("INSERT", {}, Exception("db down"))):
            r = self.client.post(
                f"{API}/stories",
                json={"title": "t", "content": "c"},
                headers=self.auth_headers(self.owner),
            )
        self.assertEqual(r.status_code, 400)
        self.assertEqual(self.db.query(Story).count(), 0)

    def test_list_read_failure_returns_400(self) -> None:
        self.make_story(self.owner)
        with patch("sqlalchemy.orm.Query.all", side_effect=OperationalError("SELECT", {}, Exception("db down"))):
            r = self.client.get(f"{API}/stories")
        self.assertEqual(r.status_code, 400)

    def test_detail_read_failure_returns_400(self) -> None:
        story = self.make_story(self.owner)
        url = f"{API}/stories/{story.id}"
        with patch("sqlalchemy.orm.Query.first", side_effect=OperationalError("SELECT", {}, Exception("db down"))):
            r = self.client.get(url)
        self.assertEqual(r.status_code, 400)


class TestUpdateStory(StoriesTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.story = self.make_story(self.owner, title="original", content="original body")

    def _put(self, user, story_id: int, body: dict):
        return self.client.put(f"{API}/stories/{story_id}", json=body, headers=self.auth_headers(user))

    def test_owner_can_update(self) -> None:
        r = self._put(self.owner, self.story.id, {"title": "new title"})
        self.assertEqual(r.status_code, 200)
        story = self.fetch(Story, self.story.id)
        self.assertEqual(story.title, "new title")
        self.assertEqual(story.content, "original body")

    def test_admin_can_update_any_story(self) -> None:
        r = self._put(self.admin, self.story.id, {"content": "moderated", "is_finished": True})
        self.assertEqual(r.status_code, 200)
        story = self.fetch(Story, self.story.id)
        self.assertEqual(story.content, "moderated")
        self.assertTrue(story.is_finished)

    def test_stranger_is_forbidden_and_story_unchanged(self) -> None:
        r = self._put(self.stranger, self.story.id, {"title": "hijacked"})
        self.assertEqual(r.status_code, 403)
        self.assertEqual(self.fetch(Story, self.story.id).title, "original")

    def test_missing_story_is_404_for_every_caller(self) -> None:
        for user in (self.owner, self.stranger, self.admin):
            with self.subTest(user=user.nickname):
                self.assertEqual(self._put(user, 9999, {"title": "x"}).status_code, 404)

    def test_unauthenticated_is_401(self) -> None:
        r = self.client.put(f"{API}/stories/{self.story.id}", json={"title": "x"})
        self.assertEqual(r.status_code, 401)


class TestDeleteStory(StoriesTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.story = self.make_story(self.owner)

    def _delete(self, user, story_id: int):
        return self.client.delete(f"{API}/stories/{story_id}", headers=self.auth_headers(user))

    def test_stranger_is_forbidden_and_story_kept(self) -> None:
        self.assertEqual(self._delete(self.stranger, self.story.id).status_code, 403)
        self.assertIsNotNone(self.fetch(Story, self.story.id))

    def test_owner_delete_removes_relays_and_likes(self) -> None:
        relay = self.make_relay(self.story, self.stranger)
        self.db.add(Like(user_id=self.stranger.id, story_id=self.story.id))
        self.db.add(Like(user_id=self.owner.id, relay_id=relay.id))
        self.db.commit()
        story_id, relay_id = self.story.id, relay.id

        self.assertEqual(self._delete(self.owner, story_id).status_code, 200)
        self.assertIsNone(self.fetch(Story, story_id))
        self.assertIsNone(self.fetch(Relay, relay_id))
        self.db.expire_all()
        self.assertEqual(self.db.query(Like).count(), 0)

    def test_admin_can_delete_any_story(self) -> None:
        story_id = self.story.id
        self.assertEqual(self._delete(self.admin, story_id).status_code, 200)
        self.assertIsNone(self.fetch(Story, story_id))

    def test_missing_story_is_404(self) -> None:
        self.assertEqual(self._delete(self.stranger, 9999).status_code, 404)


if __name__ == "__main__":
    unittest.main()
