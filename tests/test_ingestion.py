# tests/test_ingestion.py
"""
Tests for report and comment ingestion.

Covers:
  1. Report creation: urgency override, score seeding, image classification
  2. Comment creation: accumulators and urgency recomputation per mode
  3. Failure isolation: scoring errors never fail the write
  4. Upvotes, admin status, urgency preview
  5. End-to-end escalation
"""
from __future__ import annotations

from typing import Optional

import pytest

from constants import ScoreSource, ScoringMode
from database.models.base import new_id
from ml import get_image_client, get_urgency_client
from processor import ReportIngestion, predict_urgency
from processor.scorer import MLScoreProvider, ScoreProvider, ScoreResult
from repositories import InvalidIdentifierError, InvalidStatusError, PostNotFoundError

DANGER_COMMENT = "This is dangerous, critical and urgent"


class BrokenProvider(ScoreProvider):
    async def predict(self, text: str, stored_urgency: Optional[int] = None) -> ScoreResult:
        raise RuntimeError("scorer down")


class UnsureProvider(ScoreProvider):
    """Answers with no discrete urgency."""

    source = ScoreSource.ML

    async def predict(self, text: str, stored_urgency: Optional[int] = None) -> ScoreResult:
        return ScoreResult(score=0.0, urgency=0, source=self.source)


def ingestion(session, mode, **kwargs):
    return ReportIngestion(session, mode, **kwargs)


# ---------------------------------------------------------------------------
# 1. Reports
# ---------------------------------------------------------------------------

class TestReportIssue:

    async def test_prediction_overrides_urgency(self, session, user):
        post = await ingestion(session, ScoringMode.HEURISTIC).report_issue(
            user_id=user.id,
            issue_name="Fire",
            post_desc="This is an emergency, fire danger",
            urgency=1,
        )

        assert post.urgency == 3
        assert (post.score_sum, post.score_count) == (0.85, 1)
        assert post.issue.name == "Fire"
        assert post.status == "open"

    async def test_none_mode_keeps_caller_urgency(self, session, user):
        post = await ingestion(session, ScoringMode.NONE).report_issue(
            user_id=user.id, issue_name="Road", post_desc="fire!", urgency=2,
        )

        assert post.urgency == 2
        assert (post.score_sum, post.score_count) == (0.6, 1)

    @pytest.mark.parametrize("urgency", [0, 4, -1])
    async def test_out_of_range_urgency_defaults_to_one(self, session, user, urgency):
        post = await ingestion(session, ScoringMode.NONE).report_issue(
            user_id=user.id, issue_name="Road", post_desc="pothole", urgency=urgency,
        )

        assert post.urgency == 1
        assert (post.score_sum, post.score_count) == (0.3, 1)

    async def test_zero_prediction_does_not_override(self, session, user):
        service = ingestion(session, ScoringMode.ML, provider=UnsureProvider())

        post = await service.report_issue(
            user_id=user.id, issue_name="Road", post_desc="pothole", urgency=2,
        )

        assert post.urgency == 2

    async def test_provider_error_keeps_caller_urgency(self, session, user):
        service = ingestion(session, ScoringMode.ML, provider=BrokenProvider())

        post = await service.report_issue(
            user_id=user.id, issue_name="Road", post_desc="fire", urgency=2,
        )

        assert post.urgency == 2
        assert post.score_sum == 0.6

    async def test_issue_is_reused(self, session, user):
        service = ingestion(session, ScoringMode.HEURISTIC)
        first = await service.report_issue(user_id=user.id, issue_name="Trash", issue_cat="Sanitation")
        second = await service.report_issue(user_id=user.id, issue_name="Trash")

        assert first.issue_id == second.issue_id
        assert second.issue.category == "Sanitation"

    async def test_missing_category_defaults(self, session, user):
        post = await ingestion(session, ScoringMode.HEURISTIC).report_issue(
            user_id=user.id, issue_name="Bench",
        )
        assert post.issue.category == "Miscellaneous"

    async def test_invalid_user_id(self, session):
        with pytest.raises(InvalidIdentifierError):
            await ingestion(session, ScoringMode.HEURISTIC).report_issue(
                user_id="not-a-uuid", issue_name="Road",
            )

    async def test_image_is_classified(self, session, user, json_transport):
        client = get_image_client(
            url="http://vision.test", transport=json_transport({"predicted_class": "pothole"})
        )
        service = ingestion(session, ScoringMode.HEURISTIC, image_client=client)

        post = await service.report_issue(
            user_id=user.id, issue_name="Road", media_url="https://img.test/p.jpg",
        )

        assert post.classified_as == "pothole"
        assert post.media_url == "https://img.test/p.jpg"

    async def test_image_failure_is_ignored(self, session, user, json_transport):
        client = get_image_client(url="http://vision.test", transport=json_transport({}, status_code=502))
        service = ingestion(session, ScoringMode.HEURISTIC, image_client=client)

        post = await service.report_issue(
            user_id=user.id, issue_name="Road", media_url="https://img.test/p.jpg",
        )

        assert post.classified_as is None

    async def test_no_media_skips_classification(self, session, user, json_transport):
        client = get_image_client(url="http://vision.test", transport=json_transport({"class": "x"}))
        service = ingestion(session, ScoringMode.HEURISTIC, image_client=client)

        post = await service.report_issue(user_id=user.id, issue_name="Road")

        assert post.classified_as is None


# ---------------------------------------------------------------------------
# 2. Comments
# ---------------------------------------------------------------------------

class TestAddComment:

    async def test_heuristic_comment_escalates(self, session, user, make_post, post_repo):
        post = await make_post("Streetlight flickering", urgency=1)
        service = ingestion(session, ScoringMode.HEURISTIC)

        await service.add_comment(user.id, post.id, DANGER_COMMENT)
        assert (await post_repo.get_post(post.id)).urgency == 2

        await service.add_comment(user.id, post.id, DANGER_COMMENT)
        assert (await post_repo.get_post(post.id)).urgency == 3

    async def test_comment_updates_accumulators(self, session, user, make_post, post_repo):
        post = await make_post("Streetlight flickering")
        service = ingestion(session, ScoringMode.HEURISTIC)

        comment = await service.add_comment(user.id, post.id, "pipe leak too")

        reloaded = await post_repo.get_post(post.id)
        assert (reloaded.score_sum, reloaded.score_count) == (0.6, 1)
        assert comment.content == "pipe leak too"
        assert comment.post_id == post.id

    async def test_blank_comment_skips_accumulators(self, session, user, make_post, post_repo):
        post = await make_post()

        await ingestion(session, ScoringMode.HEURISTIC).add_comment(user.id, post.id, "   ")

        assert (await post_repo.get_post(post.id)).score_count == 0

    async def test_none_mode_uses_keyword_analysis(self, session, user, make_post, post_repo):
        post = await make_post("Road damage", urgency=2)

        await ingestion(session, ScoringMode.NONE).add_comment(user.id, post.id, "dangerous critical urgent")

        assert (await post_repo.get_post(post.id)).urgency == 3

    async def test_none_mode_accumulates_stored_level(self, session, user, make_post, post_repo):
        post = await make_post("Road damage", urgency=3)

        await ingestion(session, ScoringMode.NONE).add_comment(user.id, post.id, "still broken")

        reloaded = await post_repo.get_post(post.id)
        assert (reloaded.score_sum, reloaded.score_count) == (0.85, 1)

    async def test_calm_comments_deescalate(self, session, user, make_post, post_repo):
        post = await make_post("Road damage", urgency=3)
        service = ingestion(session, ScoringMode.NONE)

        await service.add_comment(user.id, post.id, "minor")

        # 0.5 * 3 + 0.5 * 0.8 = 1.9
        assert (await post_repo.get_post(post.id)).urgency == 2

    async def test_ml_mode_uses_provider(self, session, user, make_post, post_repo, json_transport):
        client = get_urgency_client(url="http://ml.test", transport=json_transport({"label": "critical"}))
        post = await make_post("Streetlight flickering", urgency=1)
        service = ingestion(session, ScoringMode.ML, provider=MLScoreProvider(client=client))

        await service.add_comment(user.id, post.id, "hmm")

        reloaded = await post_repo.get_post(post.id)
        # 0.5 * 1 + 0.5 * (0.9 * 3) = 1.85
        assert reloaded.urgency == 2
        assert reloaded.score_sum == pytest.approx(0.9)

    async def test_unknown_post(self, session, user):
        with pytest.raises(PostNotFoundError):
            await ingestion(session, ScoringMode.HEURISTIC).add_comment(user.id, new_id(), "hello")

    async def test_malformed_post_id(self, session, user):
        with pytest.raises(InvalidIdentifierError):
            await ingestion(session, ScoringMode.HEURISTIC).add_comment(user.id, "42", "hello")


# ---------------------------------------------------------------------------
# 3. Failure isolation
# ---------------------------------------------------------------------------

class TestScoringFailures:

    async def test_broken_provider_still_saves_comment(self, session, user, make_post, post_repo):
        post = await make_post(urgency=1)
        service = ingestion(session, ScoringMode.ML, provider=BrokenProvider())

        comment = await service.add_comment(user.id, post.id, DANGER_COMMENT)

        comments = await post_repo.get_post_comments(post.id)
        assert [c.id for c in comments] == [comment.id]
        reloaded = await post_repo.get_post(post.id)
        assert reloaded.urgency == 1
        assert reloaded.score_count == 0


# ---------------------------------------------------------------------------
# 4. Upvotes, status, preview
# ---------------------------------------------------------------------------

class TestOtherEvents:

    async def test_toggle_upvote(self, session, user, make_post, post_repo):
        post = await make_post()
        service = ingestion(session, ScoringMode.HEURISTIC)

        assert await service.toggle_upvote(user.id, post.id) is True
        assert len((await post_repo.get_post(post.id)).upvotes) == 1
        assert await service.toggle_upvote(user.id, post.id) is False
        assert len((await post_repo.get_post(post.id)).upvotes) == 0

    async def test_upvote_does_not_touch_accumulators(self, session, user, make_post, post_repo):
        post = await make_post()
        await ingestion(session, ScoringMode.HEURISTIC).toggle_upvote(user.id, post.id)
        assert (await post_repo.get_post(post.id)).score_count == 0

    async def test_upvote_unknown_post(self, session, user):
        with pytest.raises(PostNotFoundError):
            await ingestion(session, ScoringMode.HEURISTIC).toggle_upvote(user.id, new_id())

    async def test_update_status(self, session, make_post):
        post = await make_post()

        updated = await ingestion(session, ScoringMode.HEURISTIC).update_post_status(
            post.id, " Closed ", "Fixed by city crew"
        )

        assert updated.status == "closed"
        assert updated.status_notes == "Fixed by city crew"

    async def test_invalid_status(self, session, make_post):
        post = await make_post()
        with pytest.raises(InvalidStatusError):
            await ingestion(session, ScoringMode.HEURISTIC).update_post_status(post.id, "resolved")

    async def test_predict_urgency_without_ml(self):
        assert await predict_urgency("gas explosion risk") == 3
        assert await predict_urgency("bench is wobbly") == 1

    async def test_predict_urgency_ml_failure_falls_back(self, json_transport):
        client = get_urgency_client(url="http://ml.test", transport=json_transport({}, status_code=500))
        assert await predict_urgency("trash everywhere", MLScoreProvider(client=client)) == 2


# ---------------------------------------------------------------------------
# 5. End-to-end
# ---------------------------------------------------------------------------

class TestEscalationScenario:

    async def test_report_then_urgent_comments(self, session, user, post_repo):
        service = ingestion(session, ScoringMode.HEURISTIC)

        post = await service.report_issue(
            user_id=user.id,
            issue_name="Fire hazard",
            post_desc="This is an emergency, fire danger",
            urgency=1,
        )
        original = post.urgency
        assert original == 3

        for content in ("dangerous wiring", "critical situation", "urgent help needed"):
            await service.add_comment(user.id, post.id, content)

        reloaded = await post_repo.get_post(post.id)
        assert reloaded.urgency >= original
        assert reloaded.score_count == 4
        assert [c.content for c in await post_repo.get_post_comments(post.id)] == [
            "dangerous wiring", "critical situation", "urgent help needed",
        ]
