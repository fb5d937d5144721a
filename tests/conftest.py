"""
tests/conftest.py — Shared Test Fixtures
=========================================
"""

from __future__ import annotations

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.pool import StaticPool

from punbot.database.models import Base
from punbot.services.init_gate import InitGate
from punbot.services.ledger_service import LedgerStore


def _memory_engine() -> Engine:
    # StaticPool: every thread (asyncio.to_thread) sees the same in-memory DB.
    return create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def db_engine() -> Engine:
    """In-memory SQLite engine with the punpoints and info tables."""
    engine = _memory_engine()
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def bare_engine() -> Engine:
    """In-memory SQLite engine with *no* tables — every query fails."""
    return _memory_engine()


@pytest.fixture
def store(db_engine: Engine) -> LedgerStore:
    return LedgerStore(db_engine)


@pytest.fixture
def init_gate(db_engine: Engine) -> InitGate:
    return InitGate(db_engine)
