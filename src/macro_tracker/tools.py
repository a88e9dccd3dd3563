"""Agent-facing nutrition tools with text and structured results."""

from dataclasses import dataclass

from macro_tracker.domain.entries import Entry, MacroTotals
from macro_tracker.domain.goals import Goals
from macro_tracker.domain.summary import DailySummary, RangeSummary
from macro_tracker.errors import EntryNotFoundError, ExtractionError, ValidationError
from macro_tracker.services.goals import GoalsService
from macro_tracker.services.ledger import LedgerService
from macro_tracker.services.nutrition_log import NutritionLogService, today
from macro_tracker.services.summary import (
    SummaryService,
    progress_percent,
    round_half_up,
)

_MACRO_LABELS = (
    ("calories", "Calories:", " kcal"),
    ("protein", "Protein: ", "g"),
    ("carbs", "Carbs:   ", "g"),
    ("fat", "Fat:     ", "g"),
    ("fiber", "Fiber:   ", "g"),
)


@dataclass(frozen=True)
class ToolResult:
    """Text for the conversation plus structured details."""

    text: str
    details: dict[str, object]


@dataclass
class NutritionTools:
    """The four nutrition tools over shared services."""

    ledger: LedgerService
    goals_service: GoalsService
    summary_service: SummaryService
    nutrition_log_service: NutritionLogService | None = None

    async def log_nutrition(
        self, description: str, date: str | None = None, source: str | None = None
    ) -> ToolResult:
        """Extract items from a description, store them and report progress."""
        if self.nutrition_log_service is None:
            raise ExtractionError("Nutrition extraction is not configured")
        logged = await self.nutrition_log_service.log(description, date, source)
        text = "\n".join(
            [
                f"Logged {len(logged.entry.items)} item(s):",
                _format_items(logged.entry),
                f"\nEntry total: {_format_entry_total(logged.entry)}",
                _format_day_progress(logged.daily_summary),
            ]
        )
        return ToolResult(
            text=text,
            details={
                "entry": logged.entry.as_dict(),
                "daily_summary": logged.daily_summary.as_dict(),
            },
        )

    def get_nutrition_summary(
        self,
        date: str | None = None,
        from_: str | None = None,
        to: str | None = None,
    ) -> ToolResult:
        """Summarise a date range when both bounds are given, else one day."""
        start = (from_ or "").strip()
        end = (to or "").strip()
        if start and end:
            summary = self.summary_service.get_range_summary(start, end)
            return ToolResult(text=_format_range(summary), details=summary.as_dict())
        day = (date or "").strip() or today()
        daily = self.summary_service.get_daily_summary(day)
        return ToolResult(text=_format_daily(daily), details=daily.as_dict())

    def update_nutrition_goals(self, **values: object) -> ToolResult:
        """Update only the supplied goal values."""
        goals = self.goals_service.update_goals(values)
        lines = ["Nutrition goals updated:"]
        for key, label, unit in _MACRO_LABELS:
            lines.append(f"  {label} {_num(getattr(goals, key))}{unit}")
        return ToolResult(text="\n".join(lines), details={"goals": goals.as_dict()})

    def delete_nutrition_entry(self, entry_id: str) -> ToolResult:
        """Delete an entry and echo what was removed."""
        resolved_id = entry_id.strip()
        if not resolved_id:
            raise ValidationError("entry_id required")
        entry = self.ledger.get_entry(resolved_id)
        if entry is None or not self.ledger.delete_entry(resolved_id):
            raise EntryNotFoundError(f"Entry not found: {resolved_id}")
        text = "\n".join(
            [
                "Deleted nutrition entry:",
                f"  Date: {entry.date}",
                f"  Items: {', '.join(item.name for item in entry.items)}",
                f"  Total: {_num(entry.total_calories)} cal, "
                f"{_num(entry.total_protein)}g protein",
            ]
        )
        return ToolResult(
            text=text, details={"deleted": True, "entry": entry.as_dict()}
        )


def _num(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _format_items(entry: Entry) -> str:
    return "\n".join(
        f"  - {item.name} ({item.quantity}): {_num(item.calories)} cal, "
        f"{_num(item.protein)}g protein, {_num(item.carbs)}g carbs, "
        f"{_num(item.fat)}g fat, {_num(item.fiber)}g fiber [{item.confidence}]"
        for item in entry.items
    )


def _format_entry_total(entry: Entry) -> str:
    return (
        f"{_num(entry.total_calories)} cal, {_num(entry.total_protein)}g protein, "
        f"{_num(entry.total_carbs)}g carbs, {_num(entry.total_fat)}g fat"
    )


def _format_progress(totals: MacroTotals, goals: Goals) -> list[str]:
    lines = []
    for key, label, unit in _MACRO_LABELS:
        total = getattr(totals, key)
        goal = getattr(goals, key)
        percent = progress_percent(total, goal)
        suffix = f" ({percent}%)" if percent is not None else ""
        lines.append(f"  {label} {_num(total)}/{_num(goal)}{unit}{suffix}")
    return lines


def _format_day_progress(summary: DailySummary) -> str:
    if summary.goals is None:
        return (
            f"\nDaily Totals ({summary.date}): "
            f"{_num(summary.total_calories)} cal, "
            f"{_num(summary.total_protein)}g protein, "
            f"{_num(summary.total_carbs)}g carbs, {_num(summary.total_fat)}g fat, "
            f"{_num(summary.total_fiber)}g fiber"
        )
    lines = [f"\nDaily Progress ({summary.date}):"]
    lines.extend(_format_progress(summary.totals, summary.goals))
    return "\n".join(lines)


def _format_daily(summary: DailySummary) -> str:
    lines = [
        f"Nutrition Summary for {summary.date}",
        f"Entries: {summary.entry_count}",
        "",
        "Daily Totals:",
    ]
    for key, label, unit in _MACRO_LABELS:
        lines.append(f"  {label} {_num(getattr(summary.totals, key))}{unit}")
    if summary.entries:
        lines.append("\nEntries:")
        for index, entry in enumerate(summary.entries, start=1):
            names = ", ".join(item.name for item in entry.items)
            lines.append(
                f"  {index}. {names} - {_num(entry.total_calories)} cal "
                f"({entry.source}) [{entry.id}]"
            )
    if summary.goals is None:
        lines.append("\n(No goals set - use update_nutrition_goals to set targets)")
    else:
        lines.append("\nGoal Progress:")
        lines.extend(_format_progress(summary.totals, summary.goals))
    return "\n".join(lines)


def _format_rounded(totals: MacroTotals) -> list[str]:
    return [
        f"  {label} {round_half_up(getattr(totals, key))}{unit}"
        for key, label, unit in _MACRO_LABELS
    ]


def _format_range(summary: RangeSummary) -> str:
    lines = [
        f"Nutrition Summary ({summary.from_date} to {summary.to_date})",
        f"Total entries: {summary.entry_count} across {len(summary.days)} day(s)",
        "",
        "Period Totals:",
    ]
    lines.extend(_format_rounded(summary.totals))
    lines.extend(["", "Daily Averages:"])
    lines.extend(_format_rounded(summary.averages))
    return "\n".join(lines)
