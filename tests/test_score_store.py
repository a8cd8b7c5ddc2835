# tests/test_score_store.py
"""
Tests for the per-post score accumulators.
"""
from __future__ import annotations

import pytest

from database.models.base import new_id
from processor.ranker import IncrementalScoreStore, incremental_average
from repositories import PostNotFoundError


class TestIncrementalScoreStore:

    async def test_new_post_starts_empty(self, make_post):
        post = await make_post()
        assert (post.score_sum, post.score_count) == (0.0, 0)

    async def test_add_score_accumulates(self, make_post, post_repo):
        post = await make_post()
        store = IncrementalScoreStore(post_repo)

        assert await store.add_score(post.id, 0.5, 1) == (0.5, 1)
        new_sum, new_count = await store.add_score(post.id, 0.7, 1)

        assert new_sum == pytest.approx(1.2)
        assert new_count == 2

    async def test_sum_never_negative(self, make_post, post_repo):
        post = await make_post()
        store = IncrementalScoreStore(post_repo)
        await store.add_score(post.id, 0.4, 1)

        new_sum, _ = await store.add_score(post.id, -5.0, 0)

        assert new_sum == 0.0

    async def test_count_never_below_one(self, make_post, post_repo):
        post = await make_post()
        store = IncrementalScoreStore(post_repo)

        _, new_count = await store.add_score(post.id, 0.0, -3)

        assert new_count == 1

    async def test_loaded_post_sees_update(self, make_post, post_repo):
        post = await make_post()
        store = IncrementalScoreStore(post_repo)
        await store.add_score(post.id, 0.9, 1)
        await store.add_score(post.id, 0.3, 1)

        reloaded = await post_repo.get_post(post.id)

        assert reloaded.score_count == 2
        assert store.average(reloaded) == pytest.approx(0.6)

    async def test_unknown_post(self, post_repo):
        with pytest.raises(PostNotFoundError):
            await IncrementalScoreStore(post_repo).add_score(new_id(), 0.5, 1)


class TestIncrementalAverage:

    def test_empty_accumulator(self):
        assert incremental_average(0.0, 0) == 0.0

    def test_average_is_clamped(self):
        assert incremental_average(3.0, 1) == 1.0

    def test_none_values(self):
        assert incremental_average(None, None) == 0.0
