"""API tests for relays: append, list, and owner/admin-guarded edit and delete."""

import unittest
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from helpers import API, ApiTestCase
from storyrelay.models import Relay, UserRole


class RelaysTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.author = self.make_user("author1")
        self.relayer = self.make_user("relayer1")
        self.stranger = self.make_user("stranger1")
        self.admin = self.make_user("admin1", role=UserRole.ADMIN)
        self.story = self.make_story(self.author)


class TestCreateRelay(RelaysTestCase):
    def test_any_signed_in_user_can_relay(self) -> None:
        r = self.client.post(
            f"{API}/stories/{self.story.id}/relays",
            json={"content": "And then it rained."},
            headers=self.auth_headers(self.relayer),
        )
        self.assertEqual(r.status_code, 201)
        relay = self.db.query(Relay).one()
        self.assertEqual(relay.story_id, self.story.id)
        self.assertEqual(relay.user_id, self.relayer.id)

    def test_relay_on_missing_story_is_404(self) -> None:
        r = self.client.post(
            f"{API}/stories/9999/relays",
            json={"content": "x"},
            headers=self.auth_headers(self.relayer),
        )
        self.assertEqual(r.status_code, 404)

    def test_finished_story_rejects_relays(self) -> None:
        self.story.is_finished = True
        self.db.commit()
        r = self.client.post(
            f"{API}/stories/{self.story.id}/relays",
            json={"content": "too late"},
            headers=self.auth_headers(self.relayer),
        )
        self.assertEqual(r.status_code, 409)
        self.assertEqual(self.db.query(Relay).count(), 0)

    def test_relay_requires_login(self) -> None:
        r = self.client.post(f"{API}/stories/{self.story.id}/relays", json={"content": "x"})
        self.assertEqual(r.status_code, 401)


class TestListRelays(RelaysTestCase):
    def test_oldest_first(self) -> None:
        first = self.make_relay(self.story, self.relayer, content="one")
        second = self.make_relay(self.story, self.stranger, content="two")
        r = self.client.get(f"{API}/stories/{self.story.id}/relays")
        self.assertEqual(r.status_code, 200)
        self.assertEqual([x["relay_id"] for x in r.json()["relays"]], [first.id, second.id])

    def test_missing_story_is_404(self) -> None:
        self.assertEqual(self.client.get(f"{API}/stories/9999/relays").status_code, 404)

    def test_read_failure_returns_400(self) -> None:
        url = f"{API}/stories/{self.story.id}/relays"
        with patch("sqlalchemy.orm.Query.first", side_effect=OperationalError("SELECT", {}, Exception("db down"))):
            r = self.client.get(url)
        self.assertEqual(r.status_code, 400)


class TestEditAndDeleteRelay(RelaysTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.relay = self.make_relay(self.story, self.relayer, content="draft")

    def _url(self, story_id: int | None = None, relay_id: int | None = None) -> str:
        story_id = self.story.id if story_id is None else story_id
        relay_id = self.relay.id if relay_id is None else relay_id
        return f"{API}/stories/{story_id}/relays/{relay_id}"

    def test_relay_author_can_edit(self) -> None:
        r = self.client.put(self._url(), json={"content": "final"}, headers=self.auth_headers(self.relayer))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(self.fetch(Relay, self.relay.id).content, "final")

    def test_story_author_cannot_edit_someone_elses_relay(self) -> None:
        r = self.client.put(self._url(), json={"content": "mine now"}, headers=self.auth_headers(self.author))
        self.assertEqual(r.status_code, 403)
        self.assertEqual(self.fetch(Relay, self.relay.id).content, "draft")

    def test_admin_can_edit_and_delete(self) -> None:
        headers = self.auth_headers(self.admin)
        relay_id = self.relay.id
        self.assertEqual(self.client.put(self._url(), json={"content": "ok"}, headers=headers).status_code, 200)
        self.assertEqual(self.client.delete(self._url(), headers=headers).status_code, 200)
        self.assertIsNone(self.fetch(Relay, relay_id))

    def test_stranger_cannot_delete(self) -> None:
        r = self.client.delete(self._url(), headers=self.auth_headers(self.stranger))
        self.assertEqual(r.status_code, 403)
        self.assertIsNotNone(self.fetch(Relay, self.relay.id))

    def test_missing_relay_or_story_is_404(self) -> None:
        headers = self.auth_headers(self.stranger)
        self.assertEqual(self.client.delete(self._url(relay_id=9999), headers=headers).status_code, 404)
        self.assertEqual(self.client.delete(self._url(story_id=9999), headers=headers).status_code, 404)

    def test_relay_addressed_through_another_story_is_404(self) -> None:
        other = self.make_story(self.author, title="other")
        r = self.client.delete(self._url(story_id=other.id), headers=self.auth_headers(self.relayer))
        self.assertEqual(r.status_code, 404)
        self.assertIsNotNone(self.fetch(Relay, self.relay.id))


if __name__ == "__main__":
    unittest.main()
