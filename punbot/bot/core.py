"""
punbot.bot.core — Bot Instance, Adapters & Startup
===================================================

**Why this file exists:**
Everything Discord-specific lives here and in :mod:`punbot.bot.cogs`.  The
classifier and dispatcher only see :class:`~punbot.engine.events.ChatEvent`
and the two narrow protocols in :mod:`punbot.services.interfaces`; this
module provides the Discord implementations of those protocols and wires
the shared state together.

Startup sequence (``on_ready``):

1. Build the :class:`SessionContext` from the logged-in user.
2. Run :class:`InitGate`.  A database failure here is fatal — the bot
   logs it and closes.
3. On the very first run, post the welcome banner.
"""

from __future__ import annotations

import logging

import discord
from discord.abc import Messageable
from discord.ext import commands
from sqlalchemy import Engine

from punbot.config import PunBotConfig
from punbot.constants import welcome_message
from punbot.database.engine import run_db_bounded
from punbot.engine.events import SessionContext
from punbot.errors import StoreError
from punbot.services.dispatcher import ActionDispatcher
from punbot.services.init_gate import InitGate
from punbot.services.ledger_service import LedgerStore

logger = logging.getLogger(__name__)

EXTENSIONS: list[str] = [
    "punbot.bot.cogs.points",
]


# ---------------------------------------------------------------------------
# Protocol adapters
# ---------------------------------------------------------------------------
class DiscordDirectory:
    """:class:`DirectoryLookup` backed by the discord.py user cache."""

    def __init__(self, client: discord.Client) -> None:
        self.client = client

    async def resolve_name(self, user_id: str) -> str | None:
        try:
            snowflake = int(user_id)
        except ValueError:
            return None

        user = self.client.get_user(snowflake)
        if user is None:
            try:
                user = await self.client.fetch_user(snowflake)
            except discord.NotFound:
                return None
        return user.name


class DiscordReplies:
    """:class:`ReplyChannel` that posts to channels or DMs users."""

    def __init__(self, client: discord.Client) -> None:
        self.client = client

    async def _messageable(self, target_id: str) -> Messageable:
        snowflake = int(target_id)
        channel = self.client.get_channel(snowflake)
        if isinstance(channel, Messageable):
            return channel
        user = self.client.get_user(snowflake) or await self.client.fetch_user(snowflake)
        return user

    async def post_message(self, target_id: str, text: str) -> None:
        destination = await self._messageable(target_id)
        await destination.send(text)

    async def post_reaction(self, channel_id: str, emoji: str, message_id: str) -> None:
        channel = self.client.get_channel(int(channel_id))
        if channel is None:
            channel = await self.client.fetch_channel(int(channel_id))
        message = channel.get_partial_message(int(message_id))
        await message.add_reaction(emoji)


# ---------------------------------------------------------------------------
# Bot
# ---------------------------------------------------------------------------
class PunBot(commands.Bot):
    """Bot subclass that carries the ledger, dispatcher and session context.

    Parameters
    ----------
    cfg:
        The parsed :class:`PunBotConfig` from ``config.yaml``.
    engine:
        A SQLAlchemy :class:`Engine` with the punbot tables in place.
    """

    def __init__(self, cfg: PunBotConfig, engine: Engine) -> None:
        intents = discord.Intents.default()
        intents.message_content = True    # Privileged: we read message text
        intents.members = True            # Privileged: id → name lookups

        super().__init__(
            command_prefix=cfg.command_prefix,
            intents=intents,
            description="Keeps track of pun points.",
        )

        self.cfg = cfg
        self.engine = engine
        self.store = LedgerStore(engine)
        self.init_gate = InitGate(engine)
        self.dispatcher = ActionDispatcher(
            self.store,
            DiscordReplies(self),
            ack_emoji=cfg.ack_emoji,
            store_timeout=cfg.store_timeout_seconds,
        )

        # Set in on_ready once we know who we are
        self.session_ctx: SessionContext | None = None

    # -----------------------------------------------------------------------
    # Lifecycle hooks
    # -----------------------------------------------------------------------
    async def setup_hook(self) -> None:
        """Load Cog extensions before connecting."""
        for ext in EXTENSIONS:
            try:
                await self.load_extension(ext)
                logger.info("Loaded extension: %s", ext)
            except Exception as exc:
                logger.error("Failed to load extension %s: %s", ext, exc)

    async def on_ready(self) -> None:
        """Fired when the bot has connected and the cache is populated."""
        assert self.user is not None  # guaranteed after on_ready
        logger.info("Logged in as %s (ID: %s)", self.user.name, self.user.id)

        if self.session_ctx is not None:
            # on_ready fires again after a gateway reconnect
            return

        self.session_ctx = SessionContext(
            bot_id=str(self.user.id),
            bot_name=self.cfg.bot_name,
            directory=DiscordDirectory(self),
        )

        try:
            result = await run_db_bounded(
                self.cfg.store_timeout_seconds, self.init_gate.check_and_mark
            )
        except StoreError:
            logger.critical("Run metadata unavailable — shutting down.", exc_info=True)
            await self.close()
            return

        if result.is_first_run:
            await self._post_welcome()

    async def _post_welcome(self) -> None:
        """Post the welcome banner to the first channel named like the config says."""
        channel = discord.utils.get(
            self.get_all_channels(), name=self.cfg.welcome_channel
        )
        if not isinstance(channel, discord.TextChannel):
            logger.warning(
                "Welcome channel #%s not found — skipping welcome banner",
                self.cfg.welcome_channel,
            )
            return
        try:
            await channel.send(welcome_message(self.cfg.bot_name))
            logger.info("Posted welcome banner to #%s", channel.name)
        except discord.HTTPException:
            logger.exception("Failed to post welcome banner to #%s", channel.name)
