"""
Murmur Backend — Comments, Likes and Follows API Tests
========================================================

What:  /comments, /likes, /follow and /unfollow through the ASGI app.
"""

import uuid

import pytest
from sqlalchemy import func, select

from app.models import Comment, Follow, Like


async def _count(session_factory, model, **filters) -> int:
    async with session_factory() as session:
        query = select(func.count()).select_from(model).filter_by(**filters)
        return (await session.execute(query)).scalar_one()


class TestComments:

    @pytest.mark.asyncio
    async def test_create(self, test_client, user, other_user, make_post, auth_headers):
        post = await make_post(other_user)

        response = await test_client.post(
            "/comments",
            json={"postId": str(post.id), "content": "great post"},
            headers=auth_headers(user.id),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["content"] == "great post"
        assert body["userId"] == str(user.id)
        assert body["postId"] == str(post.id)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload", [{}, {"content": "orphan"}, {"postId": str(uuid.uuid4()), "content": ""}]
    )
    async def test_missing_fields(self, test_client, user, auth_headers, payload):
        response = await test_client.post("/comments", json=payload, headers=auth_headers(user.id))

        assert response.status_code == 400
        assert response.json() == {"error": "postId and content are required"}

    @pytest.mark.asyncio
    async def test_unknown_post(self, test_client, user, auth_headers):
        response = await test_client.post(
            "/comments",
            json={"postId": str(uuid.uuid4()), "content": "hello?"},
            headers=auth_headers(user.id),
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Post not found"}

    @pytest.mark.asyncio
    async def test_malformed_json_body(self, test_client, user, auth_headers):
        response = await test_client.post(
            "/comments",
            content=b"{not json",
            headers={**auth_headers(user.id), "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_only_author_may_delete(
        self, test_client, user, other_user, make_post, db_session, auth_headers, session_factory
    ):
        post = await make_post(user)
        comment = Comment(content="mine", user_id=other_user.id, post_id=post.id)
        db_session.add(comment)
        await db_session.commit()

        forbidden = await test_client.delete(
            f"/comments/{comment.id}", headers=auth_headers(user.id)
        )
        assert forbidden.status_code == 403
        assert await _count(session_factory, Comment, id=comment.id) == 1

        deleted = await test_client.delete(
            f"/comments/{comment.id}", headers=auth_headers(other_user.id)
        )
        assert deleted.status_code == 200
        assert deleted.json()["id"] == str(comment.id)
        assert await _count(session_factory, Comment, id=comment.id) == 0

    @pytest.mark.asyncio
    async def test_delete_unknown(self, test_client, user, auth_headers):
        response = await test_client.delete(f"/comments/{uuid.uuid4()}", headers=auth_headers(user.id))
        assert response.status_code == 404
        assert response.json() == {"error": "Comment not found"}


class TestLikes:

    @pytest.mark.asyncio
    async def test_like_then_duplicate(
        self, test_client, user, make_post, auth_headers, session_factory
    ):
        post = await make_post(user)

        first = await test_client.post(
            "/likes", json={"postId": str(post.id)}, headers=auth_headers(user.id)
        )
        assert first.status_code == 200
        assert first.json()["postId"] == str(post.id)

        second = await test_client.post(
            "/likes", json={"postId": str(post.id)}, headers=auth_headers(user.id)
        )
        assert second.status_code == 400
        assert second.json() == {"error": "You have already liked this post"}
        assert await _count(session_factory, Like, post_id=post.id) == 1

    @pytest.mark.asyncio
    async def test_like_requires_post_id(self, test_client, user, auth_headers):
        response = await test_client.post("/likes", json={}, headers=auth_headers(user.id))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_like_unknown_post(self, test_client, user, auth_headers):
        response = await test_client.post(
            "/likes", json={"postId": str(uuid.uuid4())}, headers=auth_headers(user.id)
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unlike(self, test_client, user, make_post, db_session, auth_headers, session_factory):
        post = await make_post(user)
        db_session.add(Like(user_id=user.id, post_id=post.id))
        await db_session.commit()

        response = await test_client.delete(f"/likes/{post.id}", headers=auth_headers(user.id))

        assert response.status_code == 200
        assert await _count(session_factory, Like, post_id=post.id) == 0

        again = await test_client.delete(f"/likes/{post.id}", headers=auth_headers(user.id))
        assert again.status_code == 404
        assert again.json() == {"error": "Like not found"}

    @pytest.mark.asyncio
    async def test_like_shows_in_feed(self, test_client, user, make_post, auth_headers):
        post = await make_post(user)
        await test_client.post("/likes", json={"postId": str(post.id)}, headers=auth_headers(user.id))

        feed = await test_client.get("/posts", headers=auth_headers(user.id))

        assert feed.json()[0]["likedByUser"] is True


class TestFollows:

    @pytest.mark.asyncio
    async def test_follow_and_unfollow(
        self, test_client, user, other_user, auth_headers, session_factory
    ):
        followed = await test_client.post(
            "/follow", json={"followingId": str(other_user.id)}, headers=auth_headers(user.id)
        )
        assert followed.status_code == 201
        assert followed.json() == {"message": "Followed successfully"}
        assert await _count(
            session_factory, Follow, follower_id=user.id, following_id=other_user.id
        ) == 1

        unfollowed = await test_client.delete(
            f"/unfollow/{other_user.id}", headers=auth_headers(user.id)
        )
        assert unfollowed.status_code == 200
        assert unfollowed.json() == {"message": "Unfollowed successfully"}
        assert await _count(session_factory, Follow) == 0

    @pytest.mark.asyncio
    async def test_duplicate_follow(self, test_client, user, other_user, auth_headers):
        payload = {"followingId": str(other_user.id)}
        await test_client.post("/follow", json=payload, headers=auth_headers(user.id))

        response = await test_client.post("/follow", json=payload, headers=auth_headers(user.id))

        assert response.status_code == 400
        assert response.json() == {"error": "You are already following this user"}

    @pytest.mark.asyncio
    async def test_cannot_follow_self(self, test_client, user, auth_headers):
        response = await test_client.post(
            "/follow", json={"followingId": str(user.id)}, headers=auth_headers(user.id)
        )
        assert response.status_code == 400
        assert response.json() == {"error": "You cannot follow yourself"}

    @pytest.mark.asyncio
    async def test_follow_unknown_user(self, test_client, user, auth_headers):
        response = await test_client.post(
            "/follow", json={"followingId": str(uuid.uuid4())}, headers=auth_headers(user.id)
        )
        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    @pytest.mark.asyncio
    async def test_unfollow_not_followed(self, test_client, user, other_user, auth_headers):
        response = await test_client.delete(
            f"/unfollow/{other_user.id}", headers=auth_headers(user.id)
        )
        assert response.status_code == 404
