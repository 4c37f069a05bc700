"""Tests for the review routes."""

from datetime import datetime, timedelta, timezone

import pytest

from apps.api.core import queries
from apps.api.core.hasura import HasuraError


def review_row(id, content="Great", author_id=5, parent=None, likes=0):
    return {
        "id": id,
        "title": None,
        "content": content,
        "author_id": author_id,
        "likes_count": likes,
        "parent_review_id": parent,
        "created_at": "2026-10-01T12:00:00+00:00",
        "author": {"id": author_id, "display_name": "Ana", "image": "a.png"},
    }


@pytest.fixture
def existing_review(hasura):
    hasura.on(queries.REVIEW_EXISTS, {"restaurant_reviews_by_pk": {"id": 7, "restaurant_id": 3}})


def like_state(count, mine):
    return {
        "total": {"aggregate": {"count": count}},
        "mine": [{"user_id": 1}] if mine else [],
    }


class TestLikes:
    def test_like_returns_authoritative_state(self, client, hasura, auth_headers, existing_review):
        hasura.on(queries.LIKE_STATE, like_state(4, True))

        response = client.post("/reviews/7/likes", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"userLiked": True, "likesCount": 4}
        assert hasura.executed(queries.INSERT_LIKE) == [{"reviewId": 7, "userId": 1}]
        assert hasura.executed(queries.UPDATE_LIKES_COUNT) == [{"reviewId": 7, "count": 4}]

    def test_unlike(self, client, hasura, auth_headers, existing_review):
        hasura.on(queries.LIKE_STATE, like_state(2, False))

        response = client.delete("/reviews/7/likes", headers=auth_headers)

        assert response.json() == {"userLiked": False, "likesCount": 2}
        assert hasura.executed(queries.DELETE_LIKE) == [{"reviewId": 7, "userId": 1}]

    def test_like_unknown_review(self, client, hasura, auth_headers):
        hasura.on(queries.REVIEW_EXISTS, {"restaurant_reviews_by_pk": None})

        response = client.post("/reviews/7/likes", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "review_not_found"
        assert hasura.executed(queries.INSERT_LIKE) == []

    def test_like_requires_auth(self, client, hasura):
        response = client.post("/reviews/7/likes")

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "not_authenticated"
        assert hasura.calls == []

    def test_bad_token_has_invalid_token_code(self, client):
        response = client.post("/reviews/7/likes", headers={"Authorization": "Bearer junk"})

        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "invalid_token"

    def test_hasura_failure_is_502(self, client, hasura, auth_headers):
        hasura.on(queries.REVIEW_EXISTS, HasuraError("down"))

        response = client.post("/reviews/7/likes", headers=auth_headers)

        assert response.status_code == 502
        assert response.json()["detail"]["code"] == "upstream_error"


class TestReplies:
    def test_replies_mark_viewer_likes(self, client, hasura, auth_headers):
        hasura.on(
            queries.REPLIES,
            {"restaurant_reviews": [review_row(11, parent=7, likes=2), review_row(12, parent=7)]},
        )
        hasura.on(queries.LIKED_REVIEW_IDS, {"restaurant_review_likes": [{"review_id": 11}]})

        response = client.get("/reviews/7/replies", headers=auth_headers)

        body = response.json()
        assert [r["id"] for r in body] == ["11", "12"]
        assert body[0]["userLiked"] is True
        assert body[0]["likesCount"] == 2
        assert body[0]["parentId"] == "7"
        assert body[0]["authorName"] == "Ana"
        assert body[1]["userLiked"] is False

    def test_anonymous_replies_skip_like_lookup(self, client, hasura):
        hasura.on(queries.REPLIES, {"restaurant_reviews": [review_row(11, parent=7)]})

        response = client.get("/reviews/7/replies")

        assert response.status_code == 200
        assert hasura.executed(queries.LIKED_REVIEW_IDS) == []


def comment_context(own=(), latest_at=None, parent=True):
    return {
        "parent": {"id": 7, "restaurant_id": 3} if parent else None,
        "own_replies": [{"id": 100 + i, "content": c} for i, c in enumerate(own)],
        "latest": [{"created_at": latest_at}] if latest_at else [],
    }


class TestComments:
    def test_created(self, client, hasura, auth_headers):
        hasura.on(queries.COMMENT_CONTEXT, comment_context())
        hasura.on(
            queries.INSERT_REPLY,
            {"insert_restaurant_reviews_one": {**review_row(20, "Yum", 1, parent=7), "status": "approved"}},
        )

        response = client.post("/reviews/7/comments", json={"content": "  Yum "}, headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["id"] == "20"
        assert body["status"] == "approved"
        assert hasura.executed(queries.INSERT_REPLY) == [
            {"parentId": 7, "restaurantId": 3, "authorId": 1, "content": "Yum"}
        ]

    @pytest.mark.parametrize("content", ["", "   "])
    def test_empty_is_validation_error(self, client, hasura, auth_headers, content):
        response = client.post("/reviews/7/comments", json={"content": content}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "validation_error"
        assert hasura.calls == []

    def test_too_long_is_validation_error(self, client, auth_headers):
        response = client.post("/reviews/7/comments", json={"content": "x" * 501}, headers=auth_headers)

        assert response.status_code == 400
        assert "500" in response.json()["detail"]["message"]

    def test_duplicate(self, client, hasura, auth_headers):
        hasura.on(queries.COMMENT_CONTEXT, comment_context(own=["Yum"]))

        response = client.post("/reviews/7/comments", json={"content": "Yum"}, headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["detail"]["code"] == "comment_duplicate"
        assert hasura.executed(queries.INSERT_REPLY) == []

    def test_reply_limit(self, client, hasura, auth_headers):
        hasura.on(queries.COMMENT_CONTEXT, comment_context(own=["a", "b", "c", "d", "e"]))

        response = client.post("/reviews/7/comments", json={"content": "f"}, headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "reply_limit"

    def test_flood(self, client, hasura, auth_headers):
        just_now = (datetime.now(timezone.utc) - timedelta(seconds=1)).isoformat()
        hasura.on(queries.COMMENT_CONTEXT, comment_context(latest_at=just_now))

        response = client.post("/reviews/7/comments", json={"content": "Yum"}, headers=auth_headers)

        assert response.status_code == 429
        assert response.json()["detail"]["code"] == "comment_flood"

    def test_flood_with_trimmed_fraction(self, client, hasura, auth_headers):
        # Postgres drops trailing zeros from fractional seconds.
        second_ago = datetime.now(timezone.utc) - timedelta(seconds=1)
        hasura.on(
            queries.COMMENT_CONTEXT,
            comment_context(latest_at=second_ago.strftime("%Y-%m-%dT%H:%M:%S") + ".12+00:00"),
        )

        response = client.post("/reviews/7/comments", json={"content": "Yum"}, headers=auth_headers)

        assert response.status_code == 429
        assert response.json()["detail"]["code"] == "comment_flood"

    def test_old_comment_is_not_flood(self, client, hasura, auth_headers):
        a_minute_ago = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()
        hasura.on(queries.COMMENT_CONTEXT, comment_context(latest_at=a_minute_ago))
        hasura.on(
            queries.INSERT_REPLY,
            {"insert_restaurant_reviews_one": {**review_row(20, "Yum", 1, parent=7), "status": "approved"}},
        )

        response = client.post("/reviews/7/comments", json={"content": "Yum"}, headers=auth_headers)

        assert response.status_code == 201

    def test_unknown_parent(self, client, hasura, auth_headers):
        hasura.on(queries.COMMENT_CONTEXT, comment_context(parent=False))

        response = client.post("/reviews/7/comments", json={"content": "Yum"}, headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "review_not_found"


class TestListing:
    def test_first_page_with_more(self, client, hasura):
        hasura.on(queries.TOP_LEVEL_REVIEWS, {"restaurant_reviews": [review_row(i) for i in (1, 2, 3)]})

        response = client.get("/reviews", params={"limit": 2})

        body = response.json()
        assert [r["id"] for r in body["items"]] == ["1", "2"]
        assert body["nextCursor"] == "2"
        assert body["hasMore"] is True
        assert hasura.executed(queries.TOP_LEVEL_REVIEWS) == [{"limit": 3, "offset": 0}]

    def test_last_page(self, client, hasura):
        hasura.on(queries.TOP_LEVEL_REVIEWS, {"restaurant_reviews": [review_row(5)]})

        response = client.get("/reviews", params={"limit": 2, "cursor": "4"})

        body = response.json()
        assert body["hasMore"] is False
        assert body["nextCursor"] is None
        assert hasura.executed(queries.TOP_LEVEL_REVIEWS) == [{"limit": 3, "offset": 4}]

    def test_limit_is_capped(self, client, hasura):
        hasura.on(queries.TOP_LEVEL_REVIEWS, {"restaurant_reviews": []})

        client.get("/reviews", params={"limit": 500})

        assert hasura.executed(queries.TOP_LEVEL_REVIEWS)[0]["limit"] == 51

    def test_bad_cursor(self, client):
        response = client.get("/reviews", params={"cursor": "abc"})

        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "invalid_cursor"
