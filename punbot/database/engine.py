"""
punbot.database.engine — Database Connection & Async Helpers
=============================================================

**Why this file exists:**
discord.py runs on an ``asyncio`` event loop, SQLAlchemy is synchronous.
Every DB call made from a Cog goes through :func:`run_db` (or the bounded
:func:`run_db_bounded`), which ships the sync function to a worker thread
so the gateway heartbeat is never starved.

Usage::

    from punbot.database.engine import create_db_engine, init_db, run_db

    engine = create_db_engine()          # DATABASE_URL or data/punbot.db
    init_db(engine)                      # CREATE TABLE IF NOT EXISTS …

    rows = await run_db(store.list_all)
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from contextlib import contextmanager
from pathlib import Path
from typing import ParamSpec, TypeVar

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from punbot.database.models import Base
from punbot.errors import StoreError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

DEFAULT_SQLITE_PATH = Path("data") / "punbot.db"


# ---------------------------------------------------------------------------
# Engine creation
# ---------------------------------------------------------------------------
def default_database_url() -> str:
    """``DATABASE_URL`` if set, otherwise a SQLite file under ``./data``."""
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    return f"sqlite:///{DEFAULT_SQLITE_PATH.as_posix()}"


def create_db_engine(url: str | None = None) -> Engine:
    """Build a SQLAlchemy :class:`Engine`.

    SQLite files get their parent directory created and
    ``check_same_thread`` disabled (sessions are opened on worker threads).
    Networked databases get a small pool:

    * ``pool_size=5`` / ``max_overflow=10``
    * ``pool_timeout=10`` — fail after 10 s if no connection is available.
    * ``pool_recycle=3600`` — recycle connections after 1 hour.
    """
    url = url or default_database_url()

    if url.startswith("sqlite"):
        db_file = url.split(":///", 1)[-1] if ":///" in url else ""
        if db_file and db_file != ":memory:":
            Path(db_file).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_engine(
            url,
            echo=False,        # Set True for SQL debugging
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,   # Reconnect stale connections automatically
            pool_timeout=10,
            pool_recycle=3600,
        )
    logger.info("Database engine created → %s", engine.url.render_as_string(hide_password=True))
    return engine


# ---------------------------------------------------------------------------
# Schema initialization
# ---------------------------------------------------------------------------
def init_db(engine: Engine) -> None:
    """Create the ``punpoints`` and ``info`` tables if they don't exist.

    Safe to call on every startup and never touches existing rows.

    .. note::

        Production schemas are managed by Alembic (``alembic upgrade head``);
        this is the safety net for fresh SQLite files and tests.
    """
    Base.metadata.create_all(engine)
    logger.info("Database tables verified / created.")


# ---------------------------------------------------------------------------
# Session helper
# ---------------------------------------------------------------------------
@contextmanager
def get_session(engine: Engine):
    """Yield a :class:`Session` that auto-commits on success and rolls back
    on exception.
    """
    session = Session(engine)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ---------------------------------------------------------------------------
# Async bridge
# ---------------------------------------------------------------------------
async def run_db(func: Callable[P, T], *args: P.args, **kwargs: P.kwargs) -> T:
    """Run a **synchronous** database function on a background thread.

    Under the hood it calls :func:`asyncio.to_thread`, which schedules
    *func* on the default ``ThreadPoolExecutor`` so the bot's event loop
    is never blocked.
    """
    return await asyncio.to_thread(func, *args, **kwargs)


async def run_db_bounded(
    timeout: float | None, func: Callable[P, T], *args: P.args, **kwargs: P.kwargs
) -> T:
    """Like :func:`run_db`, but give up after *timeout* seconds.

    Expiry raises :class:`StoreError`.  The worker thread cannot be
    interrupted, so a stalled statement still finishes (or fails) in the
    background; the caller simply stops waiting for it.  ``None`` waits
    forever.
    """
    try:
        return await asyncio.wait_for(run_db(func, *args, **kwargs), timeout)
    except asyncio.TimeoutError as exc:
        name = getattr(func, "__qualname__", repr(func))
        raise StoreError(f"{name} timed out after {timeout}s", exc) from exc
