"""
punbot.services.dispatcher — Action → Effects
==============================================

Takes one classified Action and carries it out:

=====================  ==================================================
Action                 Effects
=====================  ==================================================
``Ignore``             none
``SelfGrantRejected``  DM the rejection text to the granter
``GrantPoint``         +1 received for the target, +1 given for the
                       granter, then react to the original message
``ScoreRequest``       post ``"<name>: <points>"`` lines to the channel
=====================  ==================================================

Error policy:

* :class:`~punbot.errors.DirectoryLookupFailed` is raised before any
  ledger write, so an unknown id never mutates anything.
* :class:`~punbot.errors.StoreError` propagates to the caller, which logs
  and drops the event.  Nothing is retried.
* The two increments of a grant are independent transactions.  If the
  second one fails the first stays applied (a partial grant).  Points are
  low stakes and a human can fix the numbers by hand.
* A store call that exceeds its timeout raises StoreError, but the worker
  thread keeps going and may still commit.  A timed-out received
  increment can therefore land with no matching given increment and no
  reaction, which is the same partial grant as above.
* Reply-channel failures are logged here and swallowed; they never undo a
  ledger write.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from punbot.constants import EMPTY_SCORES_MESSAGE, REJECTION_MESSAGE, format_score_line
from punbot.database.engine import run_db_bounded
from punbot.engine.events import (
    Action,
    GrantPoint,
    Ignore,
    ScoreRequest,
    SelfGrantRejected,
    SessionContext,
)
from punbot.errors import DirectoryLookupFailed

if TYPE_CHECKING:
    from punbot.services.interfaces import ReplyChannel
    from punbot.services.ledger_service import LedgerRow, LedgerStore

logger = logging.getLogger(__name__)


@dataclass
class DispatchResult:
    """What a single dispatch actually did, for logging and tests."""
    action: Action
    effects: list[str] = field(default_factory=list)


def format_scores(rows: list[LedgerRow]) -> str:
    """Render the ledger as one ``name: points`` line per entry."""
    if not rows:
        return EMPTY_SCORES_MESSAGE
    return "\n".join(format_score_line(row.name, row.points) for row in rows)


class ActionDispatcher:
    """Stateless executor for classified Actions.

    Parameters
    ----------
    store:
        The shared :class:`LedgerStore`.
    replies:
        Anything implementing :class:`~punbot.services.interfaces.ReplyChannel`.
    ack_emoji:
        Reaction added to a message once its point is tallied.
    store_timeout:
        Seconds to wait on any single store call before raising
        :class:`StoreError`.  ``None`` waits forever.
    """

    def __init__(
        self,
        store: LedgerStore,
        replies: ReplyChannel,
        *,
        ack_emoji: str,
        store_timeout: float | None = None,
    ) -> None:
        self.store = store
        self.replies = replies
        self.ack_emoji = ack_emoji
        self.store_timeout = store_timeout

    async def dispatch(self, action: Action, ctx: SessionContext) -> DispatchResult:
        """Perform every effect *action* calls for."""
        result = DispatchResult(action=action)

        if isinstance(action, Ignore):
            pass
        elif isinstance(action, SelfGrantRejected):
            await self._reject(action, result)
        elif isinstance(action, GrantPoint):
            await self._grant(action, ctx, result)
        elif isinstance(action, ScoreRequest):
            await self._scores(action, result)
        else:
            raise TypeError(f"Unknown action type: {type(action).__name__}")

        return result

    # -------------------------------------------------------------------
    # Per-variant handlers
    # -------------------------------------------------------------------
    async def _reject(self, action: SelfGrantRejected, result: DispatchResult) -> None:
        logger.info("Rejected self-grant from %s", action.granter_id)
        if await self._send(action.granter_id, REJECTION_MESSAGE):
            result.effects.append("reply")

    async def _grant(
        self, action: GrantPoint, ctx: SessionContext, result: DispatchResult
    ) -> None:
        target_name = await self._resolve(ctx, action.target_mention_id)
        granter_name = await self._resolve(ctx, action.granter_id)

        points = await run_db_bounded(
            self.store_timeout, self.store.increment_received, target_name
        )
        result.effects.append(f"increment_received:{target_name}")

        given = await run_db_bounded(
            self.store_timeout, self.store.increment_given, granter_name
        )
        result.effects.append(f"increment_given:{granter_name}")

        logger.info(
            "Pun point: %s → %s (%s now has %d, %s has given %d)",
            granter_name, target_name, target_name, points, granter_name, given,
        )

        try:
            await self.replies.post_reaction(
                action.channel_id, self.ack_emoji, action.message_id
            )
            result.effects.append("reaction")
        except Exception:
            logger.exception(
                "Failed to react to message %s in channel %s",
                action.message_id, action.channel_id,
            )

    async def _scores(self, action: ScoreRequest, result: DispatchResult) -> None:
        rows = await run_db_bounded(self.store_timeout, self.store.list_all)
        if await self._send(action.channel_id, format_scores(rows)):
            result.effects.append("reply")

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    async def _resolve(self, ctx: SessionContext, user_id: str) -> str:
        name = await ctx.directory.resolve_name(user_id)
        if not name:
            raise DirectoryLookupFailed(user_id)
        return name

    async def _send(self, target_id: str, text: str) -> bool:
        try:
            await self.replies.post_message(target_id, text)
        except Exception:
            logger.exception("Failed to post message to %s", target_id)
            return False
        return True
