"""
punbot.services.ledger_service — Points Received / Given
=========================================================

:class:`LedgerStore` owns the ``punpoints`` table.  Counters are keyed by
display name and created lazily on the first increment that touches them.

Increments are a single ``UPDATE … SET points = points + 1`` so two bots
(or two overlapping worker threads) can't lose a point to a
read-modify-write race.  When the UPDATE matches no row we INSERT; if
somebody else inserted the row first, the INSERT fails on the primary key
and we retry the UPDATE inside the same transaction.

Every method is synchronous.  From async code call them via
:func:`punbot.database.engine.run_db` / ``run_db_bounded``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from punbot.database.models import LedgerEntry
from punbot.errors import StoreError

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

_COUNTERS = ("points", "given")


class LedgerRow(NamedTuple):
    """Detached snapshot of one :class:`LedgerEntry`."""
    name: str
    points: int
    given: int


class LedgerStore:
    """Persistent per-name counters backed by a SQLAlchemy engine.

    The engine (and its pool) is shared by every call for the lifetime of
    the process.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def increment_received(self, name: str) -> int:
        """Add one point received by *name*.  Returns the new ``points``."""
        return self._increment(name, "points")

    def increment_given(self, name: str) -> int:
        """Add one point given by *name*.  Returns the new ``given``."""
        return self._increment(name, "given")

    def _increment(self, name: str, counter: str) -> int:
        if counter not in _COUNTERS:
            raise ValueError(f"Unknown counter {counter!r}")
        column = getattr(LedgerEntry, counter)
        stmt = (
            update(LedgerEntry)
            .where(LedgerEntry.name == name)
            .values({counter: column + 1})
            .execution_options(synchronize_session=False)
        )

        try:
            with Session(self.engine) as session, session.begin():
                if session.execute(stmt).rowcount == 0:
                    try:
                        with session.begin_nested():
                            session.add(LedgerEntry(name=name, **{counter: 1}))
                    except IntegrityError:
                        # Lost the race to create the row; it exists now.
                        logger.debug("Concurrent insert for %r, retrying update", name)
                        session.execute(stmt)
                value = session.scalar(select(column).where(LedgerEntry.name == name))
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to increment {counter} for {name!r}", exc) from exc

        logger.debug("Ledger %s[%s] → %s", counter, name, value)
        return int(value)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def get_entry(self, name: str) -> LedgerRow | None:
        """Snapshot of *name*'s row, or ``None`` if it was never touched."""
        try:
            with Session(self.engine) as session:
                entry = session.get(LedgerEntry, name)
                if entry is None:
                    return None
                return LedgerRow(entry.name, entry.points, entry.given)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to read ledger entry for {name!r}", exc) from exc

    def list_all(self) -> list[LedgerRow]:
        """Every ledger row, highest ``points`` first, ties broken by name."""
        try:
            with Session(self.engine) as session:
                rows = session.execute(
                    select(LedgerEntry.name, LedgerEntry.points, LedgerEntry.given)
                    .order_by(LedgerEntry.points.desc(), LedgerEntry.name)
                ).all()
        except SQLAlchemyError as exc:
            raise StoreError("Failed to list ledger", exc) from exc
        return [LedgerRow(r.name, r.points, r.given) for r in rows]
