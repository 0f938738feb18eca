"""Tests for comment listing, creation and deletion rules."""

from __future__ import annotations

from rest_framework.test import APIClient

from comments.models import Comment
from tests.utils import FakeRedisTestCase, auth_client, create_feed, create_user


class CommentTests(FakeRedisTestCase):
    """Readers comment on visible feeds; authors and the admin may delete."""

    @classmethod
    def setUpTestData(cls):
        """Admin, two readers, a published feed and a draft."""
        cls.admin = create_user("1", admin=True)
        cls.alice = create_user("2", username="Alice")
        cls.bob = create_user("3", username="Bob")
        cls.feed = create_feed(cls.admin)
        cls.draft = create_feed(cls.admin, draft=True)

    def test_reader_can_comment(self):
        """A signed-in reader adds a comment attributed to them."""
        response = auth_client(self.alice).post(
            f"/feed/{self.feed.id}/comments", {"content": "  Nice post!  "}, format="json"
        )
        data = response.json()["data"]

        self.assertEqual(response.status_code, 201)
        self.assertEqual(data["content"], "Nice post!")
        self.assertEqual(data["user"]["username"], "Alice")

    def test_anonymous_can_read_but_not_write(self):
        """Listing is public; posting needs a session."""
        Comment.objects.create(feed=self.feed, user=self.alice, content="First")

        listing = APIClient().get(f"/feed/{self.feed.id}/comments")
        posting = APIClient().post(f"/feed/{self.feed.id}/comments", {"content": "Hi"}, format="json")

        self.assertEqual(listing.status_code, 200)
        self.assertEqual([c["content"] for c in listing.json()["data"]], ["First"])
        self.assertEqual(posting.status_code, 401)

    def test_empty_comment_is_rejected(self):
        """Whitespace-only comments fail validation."""
        response = auth_client(self.alice).post(
            f"/feed/{self.feed.id}/comments", {"content": "   "}, format="json"
        )

        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.json()["errors"][0].startswith("content:"))

    def test_draft_feed_comments_are_hidden(self):
        """Comments on drafts behave as if the feed did not exist."""
        response = auth_client(self.alice).get(f"/feed/{self.draft.id}/comments")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["errors"], ["Feed not found"])

    def test_author_can_delete_own_comment(self):
        """The author deletes their comment."""
        comment = Comment.objects.create(feed=self.feed, user=self.alice, content="Mine")

        response = auth_client(self.alice).delete(f"/comment/{comment.id}")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Comment.objects.filter(pk=comment.id).exists())

    def test_other_reader_cannot_delete(self):
        """Someone else's comment is off limits."""
        comment = Comment.objects.create(feed=self.feed, user=self.alice, content="Mine")

        response = auth_client(self.bob).delete(f"/comment/{comment.id}")

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["errors"], ["Permission denied"])
        self.assertTrue(Comment.objects.filter(pk=comment.id).exists())

    def test_admin_can_delete_any_comment(self):
        """The admin moderates all comments."""
        comment = Comment.objects.create(feed=self.feed, user=self.alice, content="Spam")

        response = auth_client(self.admin).delete(f"/comment/{comment.id}")

        self.assertEqual(response.status_code, 200)

    def test_delete_missing_comment_is_404(self):
        """Unknown ids give 404 with the envelope."""
        response = auth_client(self.admin).delete("/comment/999")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["errors"], ["Comment not found"])

    def test_deleting_feed_removes_comments(self):
        """Comments cascade with their feed."""
        feed = create_feed(self.admin, title="Doomed")
        Comment.objects.create(feed=feed, user=self.alice, content="Bye")

        auth_client(self.admin).delete(f"/feed/{feed.id}")

        self.assertFalse(Comment.objects.filter(feed_id=feed.id).exists())
