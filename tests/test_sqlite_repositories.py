"""Tests for SQLite entry and goals repositories."""

import sqlite3
from dataclasses import replace
from pathlib import Path

import pytest

from macro_tracker.adapters.sqlite_entry_repository import SqliteEntryRepository
from macro_tracker.adapters.sqlite_goals_repository import SqliteGoalsRepository
from macro_tracker.adapters.sqlite_store import SqliteStore
from macro_tracker.domain.goals import Goals
from macro_tracker.services.ledger import LedgerService
from tests.conftest import breakfast_items, make_item


def _count(store: SqliteStore, table: str) -> int:
    with store.read() as conn:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]


def test_insert_then_get_round_trips_items_and_totals(ledger: LedgerService) -> None:
    items = breakfast_items()

    entry = ledger.insert_entry(
        date="2026-01-15",
        source="voice",
        raw_input="I had two eggs and toast",
        items=items,
    )
    fetched = ledger.get_entry(entry.id)

    assert fetched == entry
    assert fetched.total_calories == 220
    assert fetched.total_protein == 15
    assert fetched.total_carbs == 16
    assert fetched.total_fat == 11
    assert fetched.total_fiber == 1
    assert [item.name for item in fetched.items] == ["Eggs", "Toast"]
    assert all(item.id and item.entry_id == entry.id for item in fetched.items)
    assert fetched.items[1].confidence == "medium"


def test_items_keep_insertion_order(ledger: LedgerService) -> None:
    names = ["zucchini", "apple", "mango", "banana"]
    entry = ledger.insert_entry(
        date="2026-01-15",
        source="text",
        raw_input="fruit and veg",
        items=[make_item(name=name) for name in names],
    )

    fetched = ledger.get_entry(entry.id)

    assert fetched is not None
    assert [item.name for item in fetched.items] == names


def test_totals_are_plain_float_sums(ledger: LedgerService) -> None:
    values = [0.1, 0.2, 0.3]
    entry = ledger.insert_entry(
        date="2026-01-15",
        source="text",
        raw_input="snacks",
        items=[make_item(calories=value, protein=value) for value in values],
    )

    fetched = ledger.get_entry(entry.id)

    expected = 0.0
    for value in values:
        expected += value
    assert fetched is not None
    assert fetched.total_calories == expected
    assert fetched.total_protein == expected


def test_insert_writes_one_entry_row_and_n_item_rows(
    store: SqliteStore, ledger: LedgerService
) -> None:
    ledger.insert_entry("2026-01-15", "text", "eggs and toast", breakfast_items())

    assert _count(store, "entries") == 1
    assert _count(store, "items") == 2


def test_failed_insert_leaves_no_rows(
    store: SqliteStore, ledger: LedgerService
) -> None:
    entry = ledger.insert_entry("2026-01-15", "text", "first", breakfast_items())
    repository = SqliteEntryRepository(store)
    clashing = replace(
        entry,
        id="another-entry",
        items=[
            replace(entry.items[0], id="fresh-item", entry_id="another-entry"),
            replace(entry.items[1], entry_id="another-entry"),
        ],
    )

    with pytest.raises(sqlite3.IntegrityError):
        repository.create_entry(clashing)

    assert repository.get_entry("another-entry") is None
    assert _count(store, "entries") == 1
    assert _count(store, "items") == 2


def test_get_unknown_entry_returns_none(ledger: LedgerService) -> None:
    assert ledger.get_entry("non-existent") is None


def test_delete_cascades_to_items(store: SqliteStore, ledger: LedgerService) -> None:
    entry = ledger.insert_entry("2026-01-15", "manual", "breakfast", breakfast_items())

    assert ledger.delete_entry(entry.id) is True

    assert ledger.get_entry(entry.id) is None
    with store.read() as conn:
        orphans = conn.execute(
            "SELECT COUNT(*) FROM items WHERE entry_id = ?", (entry.id,)
        ).fetchone()[0]
    assert orphans == 0


def test_delete_unknown_entry_returns_false(ledger: LedgerService) -> None:
    entry = ledger.insert_entry("2026-01-15", "manual", "breakfast", breakfast_items())
    ledger.delete_entry(entry.id)

    assert ledger.delete_entry(entry.id) is False
    assert ledger.delete_entry("non-existent") is False


def test_range_is_inclusive_on_both_bounds(ledger: LedgerService) -> None:
    by_date = {
        day: ledger.insert_entry(day, "text", day, [make_item()])
        for day in ["2026-01-13", "2026-01-14", "2026-01-15", "2026-01-16"]
    }

    entries = ledger.get_entries_by_date_range("2026-01-14", "2026-01-15")

    assert [entry.id for entry in entries] == [
        by_date["2026-01-14"].id,
        by_date["2026-01-15"].id,
    ]
    assert all(entry.items for entry in entries)


def test_range_orders_by_creation_time(ledger: LedgerService) -> None:
    later_date = ledger.insert_entry("2026-01-16", "text", "first", [make_item()])
    earlier_date = ledger.insert_entry("2026-01-15", "text", "second", [make_item()])

    entries = ledger.get_entries_by_date_range("2026-01-15", "2026-01-16")

    assert [entry.id for entry in entries] == [later_date.id, earlier_date.id]


def test_empty_range_returns_empty_list(ledger: LedgerService) -> None:
    assert ledger.get_entries_by_date_range("2026-02-01", "2026-02-28") == []


def test_three_item_entry_totals_and_day_range(ledger: LedgerService) -> None:
    entry_a = ledger.insert_entry(
        "2026-01-15",
        "text",
        "eggs, toast and coffee",
        breakfast_items() + [make_item(name="Latte", calories=40, protein=2)],
    )
    ledger.insert_entry("2026-01-16", "text", "eggs and toast", breakfast_items())

    entries = ledger.get_entries_by_date_range("2026-01-14", "2026-01-15")

    assert entry_a.total_calories == 260
    assert entry_a.total_protein == 17
    assert [entry.id for entry in entries] == [entry_a.id]


def test_goals_repository_upserts_single_row(store: SqliteStore) -> None:
    repository = SqliteGoalsRepository(store)
    assert repository.get_goals() is None

    repository.save_goals(
        Goals(calories=2500, protein=180, carbs=250, fat=65, fiber=30, updated_at="t1")
    )
    repository.save_goals(
        Goals(calories=2500, protein=200, carbs=250, fat=65, fiber=30, updated_at="t2")
    )

    goals = repository.get_goals()
    assert goals is not None
    assert goals.protein == 200
    assert goals.updated_at == "t2"
    assert goals.id == "default"
    assert _count(store, "goals") == 1


def test_concurrent_reader_sees_entry_and_items_only_after_commit(
    store: SqliteStore, db_path: Path
) -> None:
    reader = sqlite3.connect(db_path)

    def counts() -> tuple[int, int]:
        entries = reader.execute("SELECT COUNT(*) FROM entries").fetchone()[0]
        items = reader.execute("SELECT COUNT(*) FROM items").fetchone()[0]
        return entries, items

    try:
        with store.transaction() as conn:
            conn.execute(
                "INSERT INTO entries (id, created_at, date) "
                "VALUES ('e1', '2026-01-15T08:00:00.000000+00:00', '2026-01-15')"
            )
            assert counts() == (0, 0)
            conn.executemany(
                "INSERT INTO items (id, entry_id, name) VALUES (?, 'e1', ?)",
                [("i1", "Eggs"), ("i2", "Toast")],
            )
            assert counts() == (0, 0)

        assert counts() == (1, 2)
    finally:
        reader.close()
