"""Service that turns a food description into a logged entry."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from macro_tracker.domain.entries import Entry
from macro_tracker.domain.summary import DailySummary
from macro_tracker.errors import ValidationError
from macro_tracker.services.extraction import ExtractionService
from macro_tracker.services.ledger import LedgerService
from macro_tracker.services.summary import SummaryService

DEFAULT_SOURCE = "text"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoggedEntry:
    """A freshly logged entry and the day it belongs to."""

    entry: Entry
    daily_summary: DailySummary


@dataclass
class NutritionLogService:
    """Extracts items from free text and records them."""

    extraction_service: ExtractionService
    ledger: LedgerService
    summary_service: SummaryService

    async def log(
        self,
        description: str,
        date: str | None = None,
        source: str | None = None,
    ) -> LoggedEntry:
        """Extract, persist and summarise a food description."""
        text = description.strip()
        if not text:
            raise ValidationError("description required")
        day = (date or "").strip() or today()
        resolved_source = (source or "").strip() or DEFAULT_SOURCE
        extraction = await self.extraction_service.extract(text)
        logger.info("Extracted %d item(s) from description", len(extraction.items))
        entry = self.ledger.insert_entry(
            date=day,
            source=resolved_source,
            raw_input=text,
            items=extraction.items,
        )
        return LoggedEntry(
            entry=entry, daily_summary=self.summary_service.get_daily_summary(day)
        )


def today() -> str:
    """Return today's UTC date as YYYY-MM-DD."""
    return datetime.now(tz=UTC).date().isoformat()
