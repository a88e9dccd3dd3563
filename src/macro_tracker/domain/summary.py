"""Domain models for daily and period summaries."""

from dataclasses import dataclass

from macro_tracker.domain.entries import Entry, MacroTotals
from macro_tracker.domain.goals import Goals


@dataclass(frozen=True)
class DailySummary:
    """Totals for a single date with the entries behind them."""

    date: str
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    total_fiber: float
    entry_count: int
    entries: list[Entry]
    goals: Goals | None

    @property
    def totals(self) -> MacroTotals:
        return MacroTotals(
            calories=self.total_calories,
            protein=self.total_protein,
            carbs=self.total_carbs,
            fat=self.total_fat,
            fiber=self.total_fiber,
        )

    def as_dict(self) -> dict[str, object]:
        """Return the day summary in its API shape."""
        return {
            "date": self.date,
            "total_calories": self.total_calories,
            "total_protein": self.total_protein,
            "total_carbs": self.total_carbs,
            "total_fat": self.total_fat,
            "total_fiber": self.total_fiber,
            "entry_count": self.entry_count,
            "entries": [entry.as_dict() for entry in self.entries],
            "goals": self.goals.as_dict() if self.goals else None,
        }


@dataclass(frozen=True)
class DayTotals:
    """Summed totals for one date inside a range."""

    date: str
    totals: MacroTotals
    entry_count: int

    def as_dict(self) -> dict[str, object]:
        return {"date": self.date, **self.totals.as_dict(), "count": self.entry_count}


@dataclass(frozen=True)
class RangeSummary:
    """Per-day and period-wide totals for a date range."""

    from_date: str
    to_date: str
    days: list[DayTotals]
    totals: MacroTotals
    averages: MacroTotals
    entry_count: int
    goals: Goals | None

    def as_dict(self) -> dict[str, object]:
        return {
            "from": self.from_date,
            "to": self.to_date,
            "days": [day.as_dict() for day in self.days],
            "totals": self.totals.as_dict(),
            "averages": self.averages.as_dict(),
            "entry_count": self.entry_count,
            "goals": self.goals.as_dict() if self.goals else None,
        }
