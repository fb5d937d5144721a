"""
punbot.bot.cogs.points — Pun Point Listener
============================================

Listens for on_message, normalizes each message into a ChatEvent and
pushes it onto a queue.  One worker task drains the queue, so events are
classified and dispatched strictly one at a time, in arrival order.

Pipeline:
1. on_message fires → ChatEvent built → queued
2. worker pops the event → classify() → Action
3. ActionDispatcher performs the ledger writes and replies
4. Per-message StoreError / DirectoryLookupFailed are logged and dropped
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from punbot.engine.classifier import classify
from punbot.engine.events import MESSAGE_KIND, ChatEvent, Ignore
from punbot.errors import DirectoryLookupFailed, StoreError

if TYPE_CHECKING:
    from punbot.bot.core import PunBot

logger = logging.getLogger(__name__)

_TEXT_MESSAGE_TYPES = (discord.MessageType.default, discord.MessageType.reply)


def build_chat_event(message: discord.Message, bot_user_id: int | None) -> ChatEvent:
    """Build a ChatEvent from a Discord message."""
    return ChatEvent(
        sender_id=str(message.author.id),
        text=message.content,
        channel_id=str(message.channel.id),
        message_id=str(message.id),
        is_from_this_bot=bot_user_id is not None and message.author.id == bot_user_id,
        kind=MESSAGE_KIND if message.type in _TEXT_MESSAGE_TYPES else message.type.name,
    )


class Points(commands.Cog, name="Points"):
    """Tallies pun points and answers score requests."""

    def __init__(self, bot: PunBot) -> None:
        self.bot = bot
        self._queue: asyncio.Queue[ChatEvent] = asyncio.Queue()
        self._worker: asyncio.Task | None = None

    async def cog_load(self) -> None:
        """Start the queue worker when the cog is loaded."""
        self._worker = asyncio.create_task(self._drain(), name="punbot-points-worker")

    async def cog_unload(self) -> None:
        """Stop the queue worker when the cog is unloaded."""
        if self._worker is not None:
            self._worker.cancel()
            self._worker = None

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        bot_user_id = self.bot.user.id if self.bot.user else None
        self._queue.put_nowait(build_chat_event(message, bot_user_id))

    async def _drain(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self.handle_event(event)
            finally:
                self._queue.task_done()

    async def handle_event(self, event: ChatEvent) -> None:
        """Classify and dispatch one event; never raises for per-message failures."""
        ctx = self.bot.session_ctx
        if ctx is None:
            logger.debug("Session not ready — dropping message %s", event.message_id)
            return

        action = classify(event, ctx)
        if isinstance(action, Ignore):
            return

        try:
            result = await self.bot.dispatcher.dispatch(action, ctx)
        except DirectoryLookupFailed as exc:
            logger.error("Dropping %s: %s", type(action).__name__, exc)
        except StoreError:
            logger.exception(
                "Database error handling message %s; outcome unknown, not retried",
                event.message_id,
            )
        except Exception:
            logger.exception("Unexpected error handling message %s", event.message_id)
        else:
            logger.debug(
                "Dispatched %s for message %s: %s",
                type(action).__name__, event.message_id, ", ".join(result.effects) or "no effects",
            )


async def setup(bot: PunBot) -> None:
    await bot.add_cog(Points(bot))
