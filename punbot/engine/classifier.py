"""
punbot.engine.classifier — ChatEvent → Action
==============================================

Pure mapping from one inbound message to exactly one Action.  No I/O, no
database, no logging side effects beyond debug traces.

Recognized conventions (case-insensitive):

* ``<@someone> pun point``        → :class:`GrantPoint`
  (or :class:`SelfGrantRejected` if *someone* is the sender)
* ``<@bot> scores``               → :class:`ScoreRequest`
* ``<@bot> tell me what the dang scores are??`` → :class:`ScoreRequest`

Matching is a substring search, not tokenization: ``"lol <@42> pun point
right there"`` counts.  When several users are mentioned, the first
mention in the text is the target.
"""

from __future__ import annotations

import logging
import re

from punbot.engine.events import (
    MESSAGE_KIND,
    Action,
    ChatEvent,
    GrantPoint,
    Ignore,
    ScoreRequest,
    SelfGrantRejected,
    SessionContext,
)

logger = logging.getLogger(__name__)

# A mention token: <@123>, <@!123> (Discord nickname form) or <@U123> (Slack).
MENTION_RE = re.compile(r"<@!?([A-Za-z0-9]+)>")

# "@whoever pun point": the phrase must follow an @ somewhere earlier.
_PUN_POINT_RE = re.compile(r"@.*\s+pun\s+point", re.IGNORECASE | re.DOTALL)

_SINGLETON_IGNORE = Ignore()


def _mention_prefix(bot_id: str) -> str:
    return rf"<@!?{re.escape(bot_id)}>"


def first_mention(text: str) -> str | None:
    """Return the id inside the first mention token in *text*, if any."""
    match = MENTION_RE.search(text)
    return match.group(1) if match else None


def is_pun_point(text: str) -> bool:
    return _PUN_POINT_RE.search(text) is not None


def is_score_request(text: str, bot_id: str) -> bool:
    """True for either accepted phrasing addressed to *bot_id*."""
    prefix = _mention_prefix(bot_id)
    long_form = re.compile(
        prefix + r"\s+tell\s+me\s+what\s+the\s+dang\s+scores\s+are\?\?", re.IGNORECASE
    )
    short_form = re.compile(prefix + r"\s+scores", re.IGNORECASE)
    return bool(long_form.search(text) or short_form.search(text))


def classify(event: ChatEvent, ctx: SessionContext) -> Action:
    """Classify *event* into exactly one Action.

    Order of checks:

    1. Not a plain text message, empty text, or our own message → Ignore.
    2. Pun-point phrase present:
       - no mention token → Ignore (an unaddressed grant is silently dropped)
       - first mention is the sender → SelfGrantRejected
       - otherwise → GrantPoint
    3. Score request addressed to the bot → ScoreRequest.
    4. Anything else → Ignore.
    """
    if event.kind != MESSAGE_KIND or not event.text or event.is_from_this_bot:
        return _SINGLETON_IGNORE

    text = event.text

    if is_pun_point(text):
        target = first_mention(text)
        if target is None:
            logger.debug("Pun point phrase without a mention from %s", event.sender_id)
            return _SINGLETON_IGNORE
        if target == event.sender_id:
            return SelfGrantRejected(granter_id=event.sender_id)
        return GrantPoint(
            granter_id=event.sender_id,
            target_mention_id=target,
            channel_id=event.channel_id,
            message_id=event.message_id,
        )

    if is_score_request(text, ctx.bot_id):
        return ScoreRequest(channel_id=event.channel_id)

    return _SINGLETON_IGNORE
