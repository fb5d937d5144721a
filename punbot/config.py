"""
punbot.config — YAML Configuration Loader
==========================================

**Why this file exists:**
Secrets (``DISCORD_TOKEN``, ``DATABASE_URL``) come from ``.env``.  Everything
else that an operator might want to tweak — the bot's display name, where
the welcome banner goes, which emoji acknowledges a point — lives in
``config.yaml`` and is read here into an immutable dataclass.

Usage::

    from punbot.config import load_config

    cfg = load_config()          # reads ./config.yaml by default
    print(cfg.bot_name)          # "punbot"
    print(cfg.welcome_channel)   # "general"
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

DEFAULT_BOT_NAME = "punbot"
DEFAULT_WELCOME_CHANNEL = "general"
DEFAULT_ACK_EMOJI = "\U0001f44d"  # 👍
DEFAULT_STORE_TIMEOUT = 10.0
DEFAULT_COMMAND_PREFIX = "!"


# ---------------------------------------------------------------------------
# Typed settings object
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class PunBotConfig:
    """Immutable configuration loaded from ``config.yaml``."""

    bot_name: str = DEFAULT_BOT_NAME
    welcome_channel: str = DEFAULT_WELCOME_CHANNEL  # Channel *name*, not id
    ack_emoji: str = DEFAULT_ACK_EMOJI
    store_timeout_seconds: float = DEFAULT_STORE_TIMEOUT
    command_prefix: str = DEFAULT_COMMAND_PREFIX


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def load_config(path: str | Path = "config.yaml") -> PunBotConfig:
    """Read *path* and return a :class:`PunBotConfig` instance.

    Keys missing from the file fall back to the dataclass defaults.  The
    ``PUNBOT_NAME`` environment variable, when set, overrides ``bot_name``.

    Raises
    ------
    FileNotFoundError
        If the YAML file doesn't exist.
    ValueError
        If ``store_timeout_seconds`` is not a positive number.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path.resolve()}\n"
            "Hint: copy config.yaml.example → config.yaml and edit it."
        )

    with open(config_path, encoding="utf-8") as fh:
        raw: dict = yaml.safe_load(fh) or {}

    timeout = float(raw.get("store_timeout_seconds", DEFAULT_STORE_TIMEOUT))
    if timeout <= 0:
        raise ValueError(f"store_timeout_seconds must be positive, got {timeout}")

    return PunBotConfig(
        bot_name=os.getenv("PUNBOT_NAME") or raw.get("bot_name", DEFAULT_BOT_NAME),
        welcome_channel=raw.get("welcome_channel", DEFAULT_WELCOME_CHANNEL),
        ack_emoji=raw.get("ack_emoji", DEFAULT_ACK_EMOJI),
        store_timeout_seconds=timeout,
        command_prefix=raw.get("command_prefix", DEFAULT_COMMAND_PREFIX),
    )
