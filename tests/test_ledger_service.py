"""
tests/test_ledger_service.py — LedgerStore Integration Tests
=============================================================

Uses an in-memory SQLite database via the shared conftest fixtures.
"""

from __future__ import annotations

import pytest
from sqlalchemy import event, select
from sqlalchemy.orm import Session

from punbot.database.models import LedgerEntry
from punbot.errors import StoreError
from punbot.services.ledger_service import LedgerRow, LedgerStore


def _seed(engine, *rows: tuple[str, int, int]) -> None:
    with Session(engine) as session:
        for name, points, given in rows:
            session.add(LedgerEntry(name=name, points=points, given=given))
        session.commit()


class TestIncrementReceived:

    def test_creates_entry_on_first_point(self, store):
        assert store.increment_received("bob") == 1
        assert store.get_entry("bob") == LedgerRow("bob", 1, 0)

    def test_sequential_increments_do_not_lose_points(self, store):
        for expected in range(1, 11):
            assert store.increment_received("bob") == expected
        assert store.get_entry("bob").points == 10

    def test_leaves_given_alone(self, store, db_engine):
        _seed(db_engine, ("bob", 3, 4))
        store.increment_received("bob")
        assert store.get_entry("bob") == LedgerRow("bob", 4, 4)


class TestIncrementGiven:

    def test_creates_entry_on_first_grant(self, store):
        assert store.increment_given("alice") == 1
        assert store.get_entry("alice") == LedgerRow("alice", 0, 1)

    def test_both_counters_on_one_name(self, store):
        store.increment_given("alice")
        store.increment_received("alice")
        store.increment_given("alice")
        assert store.get_entry("alice") == LedgerRow("alice", 1, 2)

    def test_only_one_row_per_name(self, store, db_engine):
        store.increment_given("alice")
        store.increment_received("alice")
        with Session(db_engine) as session:
            names = session.scalars(select(LedgerEntry.name)).all()
        assert names == ["alice"]


class TestReads:

    def test_get_entry_unknown_name(self, store):
        assert store.get_entry("nobody") is None

    def test_list_all_empty(self, store):
        assert store.list_all() == []

    def test_list_all_sums_per_name_regardless_of_order(self, store):
        for name in ["bob", "carol", "bob", "alice", "bob", "carol"]:
            store.increment_received(name)

        totals = {row.name: row.points for row in store.list_all()}
        assert totals == {"alice": 1, "bob": 3, "carol": 2}

    def test_list_all_orders_by_points_then_name(self, store, db_engine):
        _seed(db_engine, ("zed", 2, 0), ("amy", 2, 1), ("bob", 0, 0), ("cat", 5, 0))
        assert [row.name for row in store.list_all()] == ["cat", "amy", "zed", "bob"]

    def test_list_all_includes_zero_point_entries(self, store):
        store.increment_given("alice")
        assert store.list_all() == [LedgerRow("alice", 0, 1)]


class TestFailures:

    def test_increment_wraps_database_errors(self, bare_engine):
        store = LedgerStore(bare_engine)
        with pytest.raises(StoreError) as excinfo:
            store.increment_received("bob")
        assert excinfo.value.cause is not None
        assert excinfo.value.__cause__ is excinfo.value.cause

    def test_list_all_wraps_database_errors(self, bare_engine):
        with pytest.raises(StoreError):
            LedgerStore(bare_engine).list_all()

    def test_get_entry_wraps_database_errors(self, bare_engine):
        with pytest.raises(StoreError):
            LedgerStore(bare_engine).get_entry("bob")

    def test_unknown_counter_rejected(self, store, db_engine):
        _seed(db_engine, ("bob", 1, 0))
        with pytest.raises(ValueError):
            store._increment("bob", "karma")
        assert store.get_entry("bob") == LedgerRow("bob", 1, 0)


class TestConcurrentCreate:
    """Another writer creates the row between our UPDATE and our INSERT."""

    @staticmethod
    def _hide_first_update(engine):
        """Make the first UPDATE match nothing, as if the row didn't exist yet."""
        state = {"seen": False}

        def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
            if statement.lstrip().upper().startswith("UPDATE") and not state["seen"]:
                state["seen"] = True
                statement = statement + " AND 1 = 0"
            return statement, parameters

        event.listen(engine, "before_cursor_execute", before_cursor_execute, retval=True)
        return before_cursor_execute

    def test_insert_conflict_falls_back_to_update(self, store, db_engine):
        _seed(db_engine, ("bob", 1, 0))
        hook = self._hide_first_update(db_engine)
        try:
            assert store.increment_received("bob") == 2
        finally:
            event.remove(db_engine, "before_cursor_execute", hook)

        assert store.get_entry("bob") == LedgerRow("bob", 2, 0)
        with Session(db_engine) as session:
            assert session.scalars(select(LedgerEntry.name)).all() == ["bob"]

    def test_given_counter_takes_the_same_path(self, store, db_engine):
        _seed(db_engine, ("alice", 0, 4))
        hook = self._hide_first_update(db_engine)
        try:
            assert store.increment_given("alice") == 5
        finally:
            event.remove(db_engine, "before_cursor_execute", hook)

        assert store.get_entry("alice") == LedgerRow("alice", 0, 5)
