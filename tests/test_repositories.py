# tests/test_repositories.py
"""
Tests for the post and user repositories.
"""
from __future__ import annotations

import uuid

import pytest

from database.models.base import new_id
from repositories import (
    InvalidIdentifierError,
    InvalidStatusError,
    PostNotFoundError,
    PostRepository,
)


class TestParseId:

    def test_canonical_form(self):
        raw = "  6F9619FF-8B86-D011-B42D-00C04FC964FF "
        assert PostRepository.parse_id(raw) == "6f9619ff-8b86-d011-b42d-00c04fc964ff"

    def test_uuid_instance(self):
        value = uuid.uuid4()
        assert PostRepository.parse_id(value) == str(value)

    @pytest.mark.parametrize("value", ["", "abc", None, 42])
    def test_invalid(self, value):
        with pytest.raises(InvalidIdentifierError) as exc_info:
            PostRepository.parse_id(value, "post_id")
        assert exc_info.value.field == "post_id"

    def test_invalid_is_value_error(self):
        with pytest.raises(ValueError):
            PostRepository.parse_id("nope")


class TestUserRepository:

    async def test_email_is_normalized(self, user_repo):
        created = await user_repo.create_user(" Eve ", " Eve@Example.COM ")
        assert created.name == "Eve"
        assert (await user_repo.get_by_email("eve@example.com")).id == created.id

    async def test_count_and_exists(self, user_repo, user):
        assert await user_repo.count() == 1
        assert await user_repo.exists(user.id)
        assert not await user_repo.exists(new_id())


class TestPostRepository:

    async def test_get_post_missing(self, post_repo):
        with pytest.raises(PostNotFoundError):
            await post_repo.get_post(new_id())

    async def test_feed_is_newest_first_and_limited(self, make_post, post_repo):
        posts = [await make_post(f"post {i}") for i in range(3)]

        feed = await post_repo.get_feed_posts(limit=2)

        assert [p.id for p in feed] == [posts[2].id, posts[1].id]

    async def test_comments_oldest_first(self, make_post, post_repo, user):
        post = await make_post()
        for content in ("first", "second", "third"):
            await post_repo.add_comment(user.id, post.id, content)

        comments = await post_repo.get_post_comments(post.id)
        loaded = await post_repo.get_post(post.id)

        assert [c.content for c in comments] == ["first", "second", "third"]
        assert [c.content for c in loaded.comments] == ["third", "second", "first"]

    async def test_update_urgency(self, make_post, post_repo):
        post = await make_post(urgency=1)
        await post_repo.update_post_urgency(post.id, 3)
        assert (await post_repo.get_post(post.id)).urgency == 3

    async def test_admin_filter(self, make_post, post_repo):
        open_post = await make_post()
        closed_post = await make_post()
        await post_repo.update_post_status(closed_post.id, "closed", "done")

        assert [p.id for p in await post_repo.get_all_posts_for_admin(status="open")] == [open_post.id]
        assert len(await post_repo.get_all_posts_for_admin()) == 2

    async def test_admin_filter_invalid(self, post_repo):
        with pytest.raises(InvalidStatusError):
            await post_repo.get_all_posts_for_admin(status="archived")

    async def test_blank_notes_stored_as_null(self, make_post, post_repo):
        post = await make_post()
        updated = await post_repo.update_post_status(post.id, "inprogress", "")
        assert updated.status_notes is None
