"""
punbot.database.__main__ — Generate the database and tables
============================================================

Creates ``punpoints`` and ``info`` without starting the bot.  Existing
tables and rows are left alone.

Run with::

    python -m punbot.database                      # DATABASE_URL or data/punbot.db
    python -m punbot.database sqlite:///other.db
"""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from punbot.database.engine import create_db_engine, init_db


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    )
    load_dotenv()

    args = sys.argv[1:] if argv is None else argv
    engine = create_db_engine(args[0] if args else None)
    init_db(engine)
    engine.dispose()


if __name__ == "__main__":
    main()
