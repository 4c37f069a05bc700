"""Tests for the comment composer and reply merging."""

import asyncio

import pytest

from tastyplates.http.errors import NetworkError, SessionTerminatedError
from tastyplates.interactions import messages
from tastyplates.interactions.comments import CommentComposer, merge_replies
from tastyplates.interactions.cooldown import CooldownTimer
from tastyplates.interactions.lifetime import Lifetime
from tastyplates.services.outcome import Outcome, RejectionReason
from tastyplates.services.schemas import Reply


def reply(id, optimistic=False):
    return Reply(id=id, content=f"reply {id}", is_optimistic=optimistic)


@pytest.fixture
def composer(reviews, auth, notifier, clock):
    return CommentComposer(
        "R", reviews, auth, notifier, cooldown_seconds=5, cooldown=CooldownTimer(clock=clock)
    )


class TestMergeReplies:
    def test_pending_first_then_server_then_confirmed_local(self):
        merged = merge_replies(
            [reply("3"), reply("2")],
            [reply("optimistic-x", True), reply("2"), reply("9")],
        )
        assert [r.id for r in merged] == ["optimistic-x", "3", "2", "9"]

    def test_no_duplicates(self):
        merged = merge_replies([reply("1"), reply("1")], [reply("1")])
        assert [r.id for r in merged] == ["1"]


class TestSubmit:
    async def test_success_flow(self, composer, reviews, notifier):
        composer.text = "  Great ramen  "
        seen = []

        async def server(payload, token):
            seen.append([r.is_optimistic for r in composer.replies])
            seen.append(composer.text)
            assert payload.parent_id == "R"
            assert payload.content == "Great ramen"
            return Outcome.accept({"status": "approved"})

        reviews.post_comment.side_effect = server
        reviews.fetch_comment_replies.return_value = [reply("50")]

        assert await composer.submit() is True

        assert seen == [[True], ""]
        assert [r.id for r in composer.replies] == ["50"]
        assert notifier.successes == [messages.COMMENTED_SUCCESS]
        assert composer.cooldown.remaining == 5
        reviews.fetch_comment_replies.assert_awaited_once_with("R", "tok", use_cache=False)

    async def test_pending_reply_carries_viewer(self, composer, reviews, user):
        composer.text = "hello"
        captured = []

        async def server(payload, token):
            captured.extend(composer.replies)
            return Outcome.accept()

        reviews.post_comment.side_effect = server
        await composer.submit()

        pending = captured[0]
        assert pending.id.startswith("optimistic-")
        assert pending.author_id == user.id
        assert pending.author_name == "Viewer"
        assert pending.parent_id == "R"

    async def test_failure_removes_exactly_the_pending_reply(self, composer, reviews, notifier):
        composer.replies = [reply("1"), reply("2")]
        composer.text = "hello"
        pending_ids = []

        async def server(payload, token):
            pending_ids.append(composer.replies[0].id)
            raise NetworkError("down")

        reviews.post_comment.side_effect = server

        assert await composer.submit() is False

        assert [r.id for r in composer.replies] == ["1", "2"]
        assert pending_ids[0] not in [r.id for r in composer.replies]
        assert notifier.errors == [messages.ERROR_OCCURRED]
        assert not composer.submitting

    async def test_forced_sign_out_removes_reply_without_toast(self, composer, reviews, notifier):
        composer.text = "hello"
        reviews.post_comment.side_effect = SessionTerminatedError("invalid_token")

        await composer.submit()

        assert composer.replies == []
        assert notifier.toasts == []

    @pytest.mark.parametrize(
        "reason,message",
        [
            (RejectionReason.DUPLICATE, messages.COMMENT_DUPLICATE),
            (RejectionReason.DUPLICATE_WEEK, messages.COMMENT_DUPLICATE_WEEK),
            (RejectionReason.RATE_LIMITED, messages.COMMENT_FLOOD),
            (RejectionReason.REPLY_LIMIT, messages.maximum_comment_replies(5)),
            (RejectionReason.GENERIC, messages.ERROR_OCCURRED),
        ],
    )
    async def test_rejections_have_distinct_messages(
        self, composer, reviews, notifier, reason, message
    ):
        composer.text = "hello"
        reviews.post_comment.return_value = Outcome.reject(reason)

        assert await composer.submit() is False

        assert composer.replies == []
        assert notifier.errors == [message]

    async def test_unauthenticated_rejection_prompts_sign_in(
        self, composer, reviews, notifier, sign_in_prompt
    ):
        composer.text = "hello"
        reviews.post_comment.return_value = Outcome.reject(RejectionReason.UNAUTHENTICATED)

        assert await composer.submit() is False

        assert composer.replies == []
        sign_in_prompt.assert_called_once()
        assert notifier.toasts == []
        assert not composer.cooldown.active

    async def test_flood_starts_cooldown(self, composer, reviews):
        composer.text = "hello"
        reviews.post_comment.return_value = Outcome.reject(RejectionReason.RATE_LIMITED)

        await composer.submit()

        assert composer.cooldown.active

    async def test_duplicate_does_not_start_cooldown(self, composer, reviews):
        composer.text = "hello"
        reviews.post_comment.return_value = Outcome.reject(RejectionReason.DUPLICATE)

        await composer.submit()

        assert not composer.cooldown.active


class TestCooldownGating:
    async def test_attempts_during_cooldown_never_reach_server(self, composer, reviews, clock):
        composer.text = "first"
        assert await composer.submit() is True
        assert reviews.post_comment.await_count == 1

        for second in range(1, 5):
            clock.advance(1)
            composer.text = f"attempt {second}"
            assert await composer.submit() is False
            assert composer.error == messages.cooldown_wait(5 - second)
            assert composer.placeholder == messages.cooldown_wait(5 - second)
            assert not composer.can_submit

        assert reviews.post_comment.await_count == 1

        clock.advance(1)
        composer.text = "after"
        assert composer.can_submit
        assert composer.placeholder == messages.COMMENT_PLACEHOLDER
        assert await composer.submit() is True
        assert reviews.post_comment.await_count == 2

    async def test_thirty_second_cooldown(self, reviews, auth, notifier, clock):
        composer = CommentComposer(
            "R", reviews, auth, notifier, cooldown_seconds=30, cooldown=CooldownTimer(clock=clock)
        )
        composer.text = "first"
        await composer.submit()

        clock.advance(29)
        composer.text = "again"
        assert await composer.submit() is False
        clock.advance(1)
        assert await composer.submit() is True


class TestValidation:
    async def test_empty_text_is_ignored(self, composer, reviews):
        composer.text = "   "

        assert await composer.submit() is False
        reviews.post_comment.assert_not_awaited()
        assert composer.error is None

    async def test_too_long_is_inline_error(self, composer, reviews, notifier):
        composer.text = "x" * 501

        assert await composer.submit() is False

        assert composer.error == messages.maximum_comment_length(500)
        assert notifier.toasts == []
        reviews.post_comment.assert_not_awaited()
        assert composer.text == "x" * 501

    async def test_unauthenticated_prompts(
        self, reviews, anonymous, notifier, sign_in_prompt
    ):
        composer = CommentComposer("R", reviews, anonymous, notifier)
        composer.text = "hello"

        assert await composer.submit() is False

        sign_in_prompt.assert_called_once()
        reviews.post_comment.assert_not_awaited()
        assert composer.text == "hello"

    async def test_second_submit_while_submitting_is_ignored(self, composer, reviews):
        composer.text = "hello"
        entered = asyncio.Event()
        release = asyncio.Event()

        async def slow(payload, token):
            entered.set()
            await release.wait()
            return Outcome.accept()

        reviews.post_comment.side_effect = slow
        first = asyncio.create_task(composer.submit())
        await entered.wait()

        composer.text = "again"
        assert await composer.submit() is False
        release.set()
        assert await first is True
        assert reviews.post_comment.await_count == 1


class TestLoadReplies:
    async def test_load_merges_with_pending(self, composer, reviews):
        composer.replies = [reply("optimistic-a", True)]
        reviews.fetch_comment_replies.return_value = [reply("1")]

        replies = await composer.load_replies()

        assert [r.id for r in replies] == ["optimistic-a", "1"]
        reviews.fetch_comment_replies.assert_awaited_once_with("R", "tok")

    async def test_load_failure_keeps_list(self, composer, reviews, notifier):
        composer.replies = [reply("1")]
        reviews.fetch_comment_replies.side_effect = NetworkError("down")

        assert [r.id for r in await composer.load_replies()] == ["1"]
        assert notifier.toasts == []

    async def test_closed_lifetime_skips_result(self, reviews, auth, notifier):
        lifetime = Lifetime()
        composer = CommentComposer("R", reviews, auth, notifier, lifetime=lifetime)
        composer.text = "hello"

        async def server(payload, token):
            lifetime.close()
            raise NetworkError("down")

        reviews.post_comment.side_effect = server

        await composer.submit()

        assert notifier.toasts == []
