"""Summary service for daily and period totals."""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from macro_tracker.domain.entries import MACRO_FIELDS, Entry, MacroTotals
from macro_tracker.domain.goals import Goals
from macro_tracker.domain.summary import DailySummary, DayTotals, RangeSummary
from macro_tracker.services.goals import GoalsService
from macro_tracker.services.ledger import LedgerService


@dataclass
class SummaryService:
    """Service that aggregates entries against the current goals."""

    ledger: LedgerService
    goals_service: GoalsService

    def get_daily_summary(self, date: str) -> DailySummary:
        """Return totals and entries for a single date."""
        entries = self.ledger.get_entries_by_date_range(date, date)
        totals = _sum_entries(entries)
        return DailySummary(
            date=date,
            total_calories=totals.calories,
            total_protein=totals.protein,
            total_carbs=totals.carbs,
            total_fat=totals.fat,
            total_fiber=totals.fiber,
            entry_count=len(entries),
            entries=entries,
            goals=self.goals_service.get_goals(),
        )

    def get_range_summary(self, from_date: str, to_date: str) -> RangeSummary:
        """Return per-day totals, period totals and per-day averages."""
        entries = self.ledger.get_entries_by_date_range(from_date, to_date)
        days = _group_by_date(entries)
        totals = MacroTotals()
        for day in days:
            totals = totals.plus(day.totals)
        return RangeSummary(
            from_date=from_date,
            to_date=to_date,
            days=days,
            totals=totals,
            averages=totals.divided_by(len(days) or 1),
            entry_count=len(entries),
            goals=self.goals_service.get_goals(),
        )


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def progress_percent(total: float, goal: float | None) -> int | None:
    """Return the goal percentage rounded half up, or None without a goal."""
    if not goal:
        return None
    return round_half_up(100 * total / goal)


def goal_progress(totals: MacroTotals, goals: Goals | None) -> dict[str, int | None]:
    """Map each macro to its goal percentage; empty when goals are unset."""
    if goals is None:
        return {}
    return {
        key: progress_percent(getattr(totals, key), getattr(goals, key))
        for key in MACRO_FIELDS
    }


def _sum_entries(entries: Sequence[Entry]) -> MacroTotals:
    total = MacroTotals()
    for entry in entries:
        total = total.plus(entry.totals)
    return total


def _group_by_date(entries: Sequence[Entry]) -> list[DayTotals]:
    grouped: dict[str, list[Entry]] = {}
    for entry in entries:
        grouped.setdefault(entry.date, []).append(entry)
    return [
        DayTotals(
            date=day,
            totals=_sum_entries(grouped[day]),
            entry_count=len(grouped[day]),
        )
        for day in sorted(grouped)
    ]
