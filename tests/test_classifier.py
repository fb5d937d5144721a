"""
tests/test_classifier.py — ChatEvent → Action
==============================================

The classifier is pure, so every test is a plain input/output check.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from punbot.engine.classifier import classify, first_mention, is_pun_point, is_score_request
from punbot.engine.events import (
    ChatEvent,
    GrantPoint,
    Ignore,
    ScoreRequest,
    SelfGrantRejected,
    SessionContext,
)

BOT_ID = "UBOT"


@pytest.fixture
def ctx() -> SessionContext:
    return SessionContext(bot_id=BOT_ID, bot_name="punbot", directory=MagicMock())


def _event(
    text: str | None,
    sender_id: str = "A",
    *,
    is_from_this_bot: bool = False,
    kind: str = "message",
) -> ChatEvent:
    return ChatEvent(
        sender_id=sender_id,
        text=text,
        channel_id="C1",
        message_id="1700000000.000100",
        is_from_this_bot=is_from_this_bot,
        kind=kind,
    )


class TestGrantPoint:

    @pytest.mark.parametrize("phrase", ["pun point", "PUN POINT", "Pun Point", "pUn PoInT"])
    def test_any_casing(self, ctx, phrase):
        action = classify(_event(f"<@U123> {phrase}"), ctx)
        assert action == GrantPoint(
            granter_id="A",
            target_mention_id="U123",
            channel_id="C1",
            message_id="1700000000.000100",
        )

    def test_discord_snowflake_mention(self, ctx):
        action = classify(_event("<@123456789012345678> pun point"), ctx)
        assert isinstance(action, GrantPoint)
        assert action.target_mention_id == "123456789012345678"

    def test_nickname_mention_form(self, ctx):
        action = classify(_event("<@!42> pun point"), ctx)
        assert isinstance(action, GrantPoint)
        assert action.target_mention_id == "42"

    def test_inside_a_longer_sentence(self, ctx):
        action = classify(_event("lol <@U9> pun point for that one"), ctx)
        assert isinstance(action, GrantPoint)
        assert action.target_mention_id == "U9"

    def test_first_mention_wins(self, ctx):
        action = classify(_event("<@U1> and <@U2> pun point"), ctx)
        assert isinstance(action, GrantPoint)
        assert action.target_mention_id == "U1"

    def test_bot_can_receive_points(self, ctx):
        action = classify(_event(f"<@{BOT_ID}> pun point"), ctx)
        assert isinstance(action, GrantPoint)
        assert action.target_mention_id == BOT_ID


class TestSelfGrant:

    def test_self_grant_rejected(self, ctx):
        action = classify(_event("<@A> pun point", sender_id="A"), ctx)
        assert action == SelfGrantRejected(granter_id="A")

    def test_self_grant_nickname_form(self, ctx):
        action = classify(_event("<@!77> PUN POINT", sender_id="77"), ctx)
        assert action == SelfGrantRejected(granter_id="77")

    def test_self_mention_first_rejects_even_with_other_mentions(self, ctx):
        action = classify(_event("<@A> <@B> pun point", sender_id="A"), ctx)
        assert isinstance(action, SelfGrantRejected)


class TestScoreRequest:

    @pytest.mark.parametrize(
        "text",
        [
            f"<@{BOT_ID}> scores",
            f"<@{BOT_ID}>    SCORES",
            f"<@!{BOT_ID}> Scores please",
            f"<@{BOT_ID}> tell me what the dang scores are??",
            f"<@{BOT_ID}> Tell Me What The Dang Scores Are??",
            f"hey <@{BOT_ID}> scores",
        ],
    )
    def test_accepted_phrasings(self, ctx, text):
        assert classify(_event(text), ctx) == ScoreRequest(channel_id="C1")

    def test_scores_for_another_user_is_ignored(self, ctx):
        assert classify(_event("<@U123> scores"), ctx) == Ignore()

    def test_scores_without_mention_is_ignored(self, ctx):
        assert classify(_event("scores"), ctx) == Ignore()

    def test_is_score_request_needs_the_bot(self):
        assert is_score_request("<@UBOT> scores", "UBOT")
        assert not is_score_request("<@UBOT> scores", "UOTHER")


class TestIgnore:

    @pytest.mark.parametrize(
        "text",
        [
            "hello world",
            "that was a pun",
            "pun point",
            "@bob pun point",
            "give bob a pun point",
            "<@U123> nice one",
        ],
    )
    def test_unrecognized_text(self, ctx, text):
        assert classify(_event(text), ctx) == Ignore()

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_text(self, ctx, text):
        assert classify(_event(text), ctx) == Ignore()

    def test_own_messages(self, ctx):
        event = _event("<@U123> pun point", sender_id=BOT_ID, is_from_this_bot=True)
        assert classify(event, ctx) == Ignore()

    def test_non_message_events(self, ctx):
        assert classify(_event("<@U123> pun point", kind="pins_add"), ctx) == Ignore()

    def test_unaddressed_grant_is_silent(self, ctx):
        """The phrase alone is not actionable — no rejection either."""
        action = classify(_event("@everyone pun point"), ctx)
        assert isinstance(action, Ignore)


class TestHelpers:

    def test_first_mention_none(self):
        assert first_mention("nobody here") is None

    def test_first_mention_picks_first(self):
        assert first_mention("<@B> <@C>") == "B"

    def test_is_pun_point_requires_at_sign(self):
        assert is_pun_point("@x pun point")
        assert not is_pun_point("x pun point")
