"""Ledger service for nutrition entries and their items."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import uuid4

from macro_tracker.domain.entries import Entry, Item, MacroTotals
from macro_tracker.domain.extraction import ExtractedItem
from macro_tracker.errors import ValidationError

logger = logging.getLogger(__name__)


class EntryRepository(Protocol):
    """Persistence interface for entries."""

    def create_entry(self, entry: Entry) -> None:
        """Persist an entry and all of its items as one unit."""

    def get_entry(self, entry_id: str) -> Entry | None:
        """Return an entry with its items, or None."""

    def delete_entry(self, entry_id: str) -> bool:
        """Delete an entry and its items; return True when a row was removed."""

    def list_entries(self, from_date: str, to_date: str) -> list[Entry]:
        """Return entries dated within [from_date, to_date] by creation time."""


def utc_timestamp() -> str:
    """Return the current UTC time as a sortable ISO-8601 string."""
    return datetime.now(tz=UTC).isoformat(timespec="microseconds")


def new_id() -> str:
    return str(uuid4())


@dataclass
class LedgerService:
    """Creates, reads and deletes entries."""

    repository: EntryRepository
    clock: Callable[[], str] = field(default=utc_timestamp)
    id_factory: Callable[[], str] = field(default=new_id)

    def insert_entry(
        self,
        date: str,
        source: str,
        raw_input: str,
        items: Sequence[ExtractedItem],
    ) -> Entry:
        """Create an entry with its items and return it fully materialized."""
        if not items:
            logger.warning("Rejected entry for %s with no items", date)
            raise ValidationError("An entry needs at least one item")
        entry_id = self.id_factory()
        records = [_to_item(self.id_factory(), entry_id, item) for item in items]
        totals = sum_items(records)
        entry = Entry(
            id=entry_id,
            created_at=self.clock(),
            date=date,
            source=source,
            raw_input=raw_input,
            total_calories=totals.calories,
            total_protein=totals.protein,
            total_carbs=totals.carbs,
            total_fat=totals.fat,
            total_fiber=totals.fiber,
            items=records,
        )
        self.repository.create_entry(entry)
        logger.info(
            "Logged entry %s for %s with %d item(s), %.1f kcal",
            entry.id,
            date,
            len(records),
            entry.total_calories,
        )
        return entry

    def get_entry(self, entry_id: str) -> Entry | None:
        """Return an entry by id, or None when it does not exist."""
        return self.repository.get_entry(entry_id)

    def delete_entry(self, entry_id: str) -> bool:
        """Delete an entry with its items; False when nothing matched."""
        deleted = self.repository.delete_entry(entry_id)
        if deleted:
            logger.info("Deleted entry %s", entry_id)
        return deleted

    def get_entries_by_date_range(self, from_date: str, to_date: str) -> list[Entry]:
        """Return entries whose date lies in [from_date, to_date], both inclusive."""
        return self.repository.list_entries(from_date, to_date)


def sum_items(items: Sequence[Item]) -> MacroTotals:
    total = MacroTotals()
    for item in items:
        total = total.plus(item.macros)
    return total


def _to_item(item_id: str, entry_id: str, item: ExtractedItem) -> Item:
    return Item(
        id=item_id,
        entry_id=entry_id,
        name=item.name,
        quantity=item.quantity,
        calories=item.calories,
        protein=item.protein,
        carbs=item.carbs,
        fat=item.fat,
        fiber=item.fiber,
        confidence=item.confidence,
    )
