"""
punbot.errors — Exception Types
================================

Only two failures are surfaced to callers:

* :class:`StoreError` — anything that went wrong talking to the database,
  including a call that exceeded its timeout.
* :class:`DirectoryLookupFailed` — a platform id with no known user.

Ambiguous or unaddressed messages are never errors; the classifier maps
them to ``Ignore``.
"""

from __future__ import annotations


class PunBotError(Exception):
    """Base class for all punbot errors."""


class StoreError(PunBotError):
    """A ledger or run-metadata read/write failed.

    The original exception (if any) is kept on :attr:`cause` and is also
    chained as ``__cause__`` by the raiser.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class DirectoryLookupFailed(PunBotError):
    """A user id could not be resolved to a display name."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"No user found for id {user_id!r}")
        self.user_id = user_id
