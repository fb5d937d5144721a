"""
punbot.bot.__main__ — ``python -m punbot.bot`` / ``punbot``
============================================================

Reads the token from ``.env``, soft settings from ``config.yaml``, makes
sure the ``punpoints`` and ``info`` tables exist, then hands control to
discord.py until the process is stopped.
"""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

from punbot.bot.core import PunBot
from punbot.config import load_config
from punbot.database.engine import create_db_engine, init_db

LOG_FORMAT = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
PLACEHOLDER_TOKEN = "your-discord-bot-token-here"

logger = logging.getLogger("punbot")


def _read_token() -> str | None:
    token = os.getenv("DISCORD_TOKEN")
    if not token or token == PLACEHOLDER_TOKEN:
        return None
    return token


def main() -> None:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, datefmt="%H:%M:%S")
    load_dotenv()

    token = _read_token()
    if token is None:
        logger.critical("DISCORD_TOKEN missing; set it in .env (see .env.example).")
        sys.exit(1)

    cfg = load_config()
    engine = create_db_engine()
    init_db(engine)
    logger.info("Starting %s (welcome channel #%s)", cfg.bot_name, cfg.welcome_channel)

    try:
        PunBot(cfg=cfg, engine=engine).run(token, log_handler=None)
    except KeyboardInterrupt:
        logger.info("Interrupted, bye.")
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
