"""
punbot.services.init_gate — First-Run Detection
================================================

The ``info`` table holds a single ``lastrun`` row.  If it is missing, this
is the first time the bot has ever started against this database: we
report ``is_first_run=True`` and insert the row.  Every later start just
refreshes the timestamp.

Meant to be called once per process start from ``on_ready``.  It is not
safe for concurrent callers; two processes racing on an empty database
would both see a first run, and the loser's INSERT fails with a
:class:`StoreError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from punbot.constants import LAST_RUN_KEY
from punbot.database.engine import get_session
from punbot.database.models import RunInfo
from punbot.errors import StoreError

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FirstRunResult:
    is_first_run: bool
    previous_run: str | None = None  # ISO timestamp of the prior start


def _utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


class InitGate:
    """Idempotent "have we run here before?" check."""

    def __init__(self, engine: Engine, clock: Callable[[], str] = _utc_now_iso) -> None:
        self.engine = engine
        self._clock = clock

    def check_and_mark(self) -> FirstRunResult:
        """Record this start and say whether it was the first one ever."""
        now = self._clock()
        try:
            with get_session(self.engine) as session:
                record = session.get(RunInfo, LAST_RUN_KEY)
                if record is None:
                    session.add(RunInfo(name=LAST_RUN_KEY, val=now))
                    result = FirstRunResult(is_first_run=True)
                else:
                    previous = record.val
                    record.val = now
                    result = FirstRunResult(is_first_run=False, previous_run=previous)
        except SQLAlchemyError as exc:
            raise StoreError("Failed to check/mark last run", exc) from exc

        if result.is_first_run:
            logger.info("First run detected — recorded lastrun=%s", now)
        else:
            logger.info("Previous run at %s — lastrun updated to %s", result.previous_run, now)
        return result
