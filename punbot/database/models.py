"""
punbot.database.models — SQLAlchemy 2.0 Data Models
====================================================

Tables:
- punpoints  — One row per user name that has ever given or received a point
- info       — Process metadata (a single ``lastrun`` row)

Table and column names match the schema the bot has always used, so an
existing ``punbot.db`` keeps working.  The ``user`` column is exposed on the
ORM side as :attr:`LedgerEntry.name`.
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """Shared base for all punbot ORM models."""


# ---------------------------------------------------------------------------
# Ledger — points received / given, keyed by display name
# ---------------------------------------------------------------------------
class LedgerEntry(Base):
    __tablename__ = "punpoints"

    name: Mapped[str] = mapped_column("user", String(100), primary_key=True)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    given: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_punpoints_points_nonneg"),
        CheckConstraint("given >= 0", name="ck_punpoints_given_nonneg"),
    )

    def __repr__(self) -> str:
        return f"<LedgerEntry name={self.name!r} points={self.points} given={self.given}>"


# ---------------------------------------------------------------------------
# Info — key/value process metadata (first-run detection)
# ---------------------------------------------------------------------------
class RunInfo(Base):
    """Key-value metadata row.  Only ``lastrun`` is written today."""
    __tablename__ = "info"

    name: Mapped[str] = mapped_column(String(100), primary_key=True)
    val: Mapped[str | None] = mapped_column(Text, default=None)

    def __repr__(self) -> str:
        return f"<RunInfo name={self.name!r} val={self.val!r}>"
