"""SQLite repository for entries and items."""

import sqlite3
from dataclasses import dataclass

from macro_tracker.adapters.sqlite_store import SqliteStore
from macro_tracker.domain.entries import Entry, Item
from macro_tracker.services.ledger import EntryRepository

_ENTRY_COLUMNS = (
    "id, created_at, date, source, raw_input, total_calories, total_protein, "
    "total_carbs, total_fat, total_fiber"
)
_ITEM_COLUMNS = (
    "id, entry_id, name, quantity, calories, protein, carbs, fat, fiber, confidence"
)


@dataclass
class SqliteEntryRepository(EntryRepository):
    """SQLite implementation for entries."""

    store: SqliteStore

    def create_entry(self, entry: Entry) -> None:
        """Insert the entry row and its item rows in one transaction."""
        with self.store.transaction() as conn:
            conn.execute(
                f"INSERT INTO entries ({_ENTRY_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    entry.id,
                    entry.created_at,
                    entry.date,
                    entry.source,
                    entry.raw_input,
                    entry.total_calories,
                    entry.total_protein,
                    entry.total_carbs,
                    entry.total_fat,
                    entry.total_fiber,
                ),
            )
            conn.executemany(
                f"INSERT INTO items ({_ITEM_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    (
                        item.id,
                        entry.id,
                        item.name,
                        item.quantity,
                        item.calories,
                        item.protein,
                        item.carbs,
                        item.fat,
                        item.fiber,
                        item.confidence,
                    )
                    for item in entry.items
                ],
            )

    def get_entry(self, entry_id: str) -> Entry | None:
        """Return an entry joined with its items."""
        with self.store.read() as conn:
            row = conn.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM entries WHERE id = ?", (entry_id,)
            ).fetchone()
            if row is None:
                return None
            item_rows = conn.execute(
                f"SELECT {_ITEM_COLUMNS} FROM items WHERE entry_id = ? "
                "ORDER BY rowid ASC",
                (entry_id,),
            ).fetchall()
        return _parse_entry(row, [_parse_item(item) for item in item_rows])

    def delete_entry(self, entry_id: str) -> bool:
        """Delete an entry; items go with it through the cascade."""
        with self.store.transaction() as conn:
            cursor = conn.execute("DELETE FROM entries WHERE id = ?", (entry_id,))
            return cursor.rowcount > 0

    def list_entries(self, from_date: str, to_date: str) -> list[Entry]:
        """Return entries in the date range ordered by creation time."""
        with self.store.read() as conn:
            rows = conn.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM entries "
                "WHERE date >= ? AND date <= ? "
                "ORDER BY created_at ASC, rowid ASC",
                (from_date, to_date),
            ).fetchall()
            item_rows = conn.execute(
                f"SELECT {_ITEM_COLUMNS} FROM items WHERE entry_id IN "
                "(SELECT id FROM entries WHERE date >= ? AND date <= ?) "
                "ORDER BY entry_id, rowid ASC",
                (from_date, to_date),
            ).fetchall()
        items_by_entry: dict[str, list[Item]] = {}
        for item_row in item_rows:
            item = _parse_item(item_row)
            items_by_entry.setdefault(item.entry_id, []).append(item)
        return [_parse_entry(row, items_by_entry.get(row["id"], [])) for row in rows]


def _parse_entry(row: sqlite3.Row, items: list[Item]) -> Entry:
    return Entry(
        id=row["id"],
        created_at=row["created_at"],
        date=row["date"],
        source=row["source"],
        raw_input=row["raw_input"],
        total_calories=float(row["total_calories"]),
        total_protein=float(row["total_protein"]),
        total_carbs=float(row["total_carbs"]),
        total_fat=float(row["total_fat"]),
        total_fiber=float(row["total_fiber"]),
        items=items,
    )


def _parse_item(row: sqlite3.Row) -> Item:
    return Item(
        id=row["id"],
        entry_id=row["entry_id"],
        name=row["name"],
        quantity=row["quantity"],
        calories=float(row["calories"]),
        protein=float(row["protein"]),
        carbs=float(row["carbs"]),
        fat=float(row["fat"]),
        fiber=float(row["fiber"]),
        confidence=row["confidence"],
    )
