"""
punbot.services.interfaces — Narrow collaborator contracts
===========================================================

The dispatcher only needs to look up names and send things back to the
chat platform.  Anything satisfying these protocols will do: the Discord
adapters in :mod:`punbot.bot.core`, or a couple of mocks in tests.
"""

from __future__ import annotations

from typing import Protocol


class DirectoryLookup(Protocol):
    async def resolve_name(self, user_id: str) -> str | None:
        """Display name for *user_id*, or ``None`` if nobody has that id."""
        ...


class ReplyChannel(Protocol):
    async def post_message(self, target_id: str, text: str) -> None:
        """Send *text* to a channel id, or as a direct message to a user id."""
        ...

    async def post_reaction(self, channel_id: str, emoji: str, message_id: str) -> None:
        """React to message *message_id* in *channel_id* with *emoji*."""
        ...
