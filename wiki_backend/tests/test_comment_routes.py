"""
Tests for comment routes.
"""

import pytest


@pytest.fixture
def article_id(alice, seed_article):
    return seed_article(alice, title="Commented")


def post_comment(client, article_id, user, content="Nice!", parent_id=None):
    body = {"content": content}
    if parent_id:
        body["parent_id"] = parent_id
    return client.post(
        f"/articles/{article_id}/comments", json=body, headers={"user-id": user.id}
    )


class TestComments:
    """Tests for top-level comments."""

    def test_add_comment_notifies_author(self, client, test_db, article_id, bob):
        response = post_comment(client, article_id, bob)
        assert response.status_code == 200
        data = response.json()
        assert data["author_name"] == "Bob"
        assert data["parent_id"] is None

        notification = test_db.notifications.get_for_user("alice")[0]
        assert notification.type == "comment"
        assert notification.article_id == article_id

    def test_list_newest_first(self, client, article_id, bob):
        post_comment(client, article_id, bob, content="first")
        post_comment(client, article_id, bob, content="second")
        response = client.get(f"/articles/{article_id}/comments")
        assert [c["content"] for c in response.json()] == ["second", "first"]

    def test_list_missing_article(self, client):
        assert client.get("/articles/missing/comments").status_code == 404

    def test_comment_requires_auth(self, client, article_id):
        response = client.post(f"/articles/{article_id}/comments", json={"content": "hi"})
        assert response.status_code == 401

    def test_empty_comment_rejected(self, client, article_id, bob):
        assert post_comment(client, article_id, bob, content="").status_code == 422


class TestReplies:
    """Tests for one-level threads."""

    def test_reply_notifies_parent_author(self, client, test_db, article_id, alice, bob):
        parent = post_comment(client, article_id, bob).json()
        response = post_comment(client, article_id, alice, content="Thanks", parent_id=parent["id"])
        assert response.status_code == 200

        notification = test_db.notifications.get_for_user("bob")[0]
        assert notification.type == "reply"

        replies = client.get(f"/comments/{parent['id']}/replies").json()
        assert [r["content"] for r in replies] == ["Thanks"]

        top_level = client.get(f"/articles/{article_id}/comments").json()
        assert len(top_level) == 1
        assert top_level[0]["reply_count"] == 1

    def test_replies_oldest_first(self, client, article_id, alice, bob):
        parent = post_comment(client, article_id, bob).json()
        post_comment(client, article_id, alice, content="one", parent_id=parent["id"])
        post_comment(client, article_id, alice, content="two", parent_id=parent["id"])
        replies = client.get(f"/comments/{parent['id']}/replies").json()
        assert [r["content"] for r in replies] == ["one", "two"]

    def test_nested_reply_rejected(self, client, article_id, alice, bob):
        parent = post_comment(client, article_id, bob).json()
        reply = post_comment(client, article_id, alice, parent_id=parent["id"]).json()
        response = post_comment(client, article_id, bob, parent_id=reply["id"])
        assert response.status_code == 400

    def test_parent_on_other_article_rejected(
        self, client, article_id, alice, bob, seed_article
    ):
        other = seed_article(alice, title="Other")
        parent = post_comment(client, other, bob).json()
        response = post_comment(client, article_id, bob, parent_id=parent["id"])
        assert response.status_code == 400

    def test_missing_parent(self, client, article_id, bob):
        assert post_comment(client, article_id, bob, parent_id="missing").status_code == 404


class TestCommentActions:
    """Tests for liking and deleting comments."""

    def test_like_comment(self, client, article_id, alice, bob):
        comment = post_comment(client, article_id, bob).json()
        response = client.post(f"/comments/{comment['id']}/like", headers={"user-id": alice.id})
        assert response.json()["like_count"] == 1

    def test_like_twice_conflicts(self, client, test_db, article_id, alice, bob):
        """A user can like a comment only once."""
        comment = post_comment(client, article_id, bob).json()
        client.post(f"/comments/{comment['id']}/like", headers={"user-id": alice.id})
        response = client.post(f"/comments/{comment['id']}/like", headers={"user-id": alice.id})
        assert response.status_code == 409
        assert test_db.comments.get(comment["id"]).like_count == 1

    def test_likes_from_different_users(self, client, article_id, admin, alice, bob):
        comment = post_comment(client, article_id, bob).json()
        client.post(f"/comments/{comment['id']}/like", headers={"user-id": alice.id})
        response = client.post(f"/comments/{comment['id']}/like", headers={"user-id": admin.id})
        assert response.json()["like_count"] == 2

    def test_like_notifies_comment_author(self, client, test_db, article_id, alice, bob):
        long_text = "This comment runs well past thirty characters"
        comment = post_comment(client, article_id, bob, content=long_text).json()
        client.post(f"/comments/{comment['id']}/like", headers={"user-id": alice.id})

        notification = test_db.notifications.get_for_user(bob.id)[0]
        assert notification.type == "like"
        assert notification.sender_id == alice.id
        assert notification.article_id == article_id
        assert notification.article_title == "Commented"
        assert notification.content == long_text[:30] + "..."

    def test_like_own_comment_not_notified(self, client, test_db, article_id, bob):
        comment = post_comment(client, article_id, bob, content="short").json()
        response = client.post(f"/comments/{comment['id']}/like", headers={"user-id": bob.id})
        assert response.status_code == 200
        assert test_db.notifications.get_for_user(bob.id) == []

    def test_like_reply(self, client, test_db, article_id, alice, bob):
        parent = post_comment(client, article_id, alice).json()
        reply = post_comment(client, article_id, bob, content="ok", parent_id=parent["id"]).json()
        response = client.post(f"/comments/{reply['id']}/like", headers={"user-id": alice.id})
        assert response.json()["like_count"] == 1
        assert test_db.notifications.get_for_user(bob.id)[0].content == "ok"

    def test_like_missing_comment(self, client, alice):
        response = client.post("/comments/missing/like", headers={"user-id": alice.id})
        assert response.status_code == 404

    def test_delete_own_comment_removes_replies(self, client, test_db, article_id, alice, bob):
        parent = post_comment(client, article_id, bob).json()
        reply = post_comment(client, article_id, alice, parent_id=parent["id"]).json()

        response = client.delete(f"/comments/{parent['id']}", headers={"user-id": bob.id})
        assert response.status_code == 200
        assert test_db.comments.get(parent["id"]) is None
        assert test_db.comments.get(reply["id"]) is None

    def test_delete_others_comment_forbidden(self, client, article_id, alice, bob):
        comment = post_comment(client, article_id, bob).json()
        response = client.delete(f"/comments/{comment['id']}", headers={"user-id": alice.id})
        assert response.status_code == 403

    def test_admin_can_delete(self, client, article_id, admin, bob):
        comment = post_comment(client, article_id, bob).json()
        response = client.delete(f"/comments/{comment['id']}", headers={"user-id": admin.id})
        assert response.status_code == 200

    def test_delete_missing(self, client, bob):
        assert client.delete("/comments/missing", headers={"user-id": bob.id}).status_code == 404
