"""
punbot.engine.events — ChatEvent, SessionContext and Action variants
=====================================================================

Every inbound chat message is normalized into a :class:`ChatEvent` and
classified into exactly one Action.  Actions are plain frozen dataclasses
so the classifier stays a pure function and tests can compare by value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from punbot.services.interfaces import DirectoryLookup

__all__ = [
    "MESSAGE_KIND",
    "ChatEvent",
    "SessionContext",
    "Ignore",
    "GrantPoint",
    "SelfGrantRejected",
    "ScoreRequest",
    "Action",
]

# ``ChatEvent.kind`` for a regular user-authored text message.  Joins,
# pins, thread starters and the like use any other value.
MESSAGE_KIND = "message"


# ---------------------------------------------------------------------------
# Inbound event envelope
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ChatEvent:
    """Transport-neutral view of one inbound chat message.

    ``message_id`` is whatever the platform uses to address the message
    for reactions (Slack's ``ts``, Discord's message snowflake).
    """

    sender_id: str
    text: str | None
    channel_id: str
    message_id: str
    is_from_this_bot: bool = False
    kind: str = MESSAGE_KIND


@dataclass(frozen=True, slots=True)
class SessionContext:
    """Who the bot is, plus how to turn user ids into names.

    Passed explicitly into classification and dispatch instead of being
    read off a global bot object.
    """

    bot_id: str
    bot_name: str
    directory: DirectoryLookup


# ---------------------------------------------------------------------------
# Actions — the closed set the classifier can produce
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class Ignore:
    """Nothing to do."""


@dataclass(frozen=True, slots=True)
class GrantPoint:
    granter_id: str
    target_mention_id: str
    channel_id: str
    message_id: str


@dataclass(frozen=True, slots=True)
class SelfGrantRejected:
    granter_id: str


@dataclass(frozen=True, slots=True)
class ScoreRequest:
    channel_id: str


Action = Union[Ignore, GrantPoint, SelfGrantRejected, ScoreRequest]
