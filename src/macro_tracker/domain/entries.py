"""Domain models for logged entries."""

from dataclasses import asdict, dataclass
from typing import Literal

Confidence = Literal["high", "medium", "low"]

MACRO_FIELDS = ("calories", "protein", "carbs", "fat", "fiber")


@dataclass(frozen=True)
class MacroTotals:
    """Calories (kcal) and macronutrients (g)."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0

    def plus(self, other: "MacroTotals") -> "MacroTotals":
        """Return the field-wise sum with another total."""
        return MacroTotals(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
            fiber=self.fiber + other.fiber,
        )

    def divided_by(self, divisor: float) -> "MacroTotals":
        """Return every field divided by the same divisor."""
        return MacroTotals(
            calories=self.calories / divisor,
            protein=self.protein / divisor,
            carbs=self.carbs / divisor,
            fat=self.fat / divisor,
            fiber=self.fiber / divisor,
        )

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class Item:
    """One food component of an entry."""

    id: str
    entry_id: str
    name: str
    quantity: str
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    confidence: Confidence

    @property
    def macros(self) -> MacroTotals:
        return MacroTotals(
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            fiber=self.fiber,
        )


@dataclass(frozen=True)
class Entry:
    """A logged eating event with totals denormalized from its items."""

    id: str
    created_at: str
    date: str
    source: str
    raw_input: str
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    total_fiber: float
    items: list[Item]

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
        """Return the entry as a JSON-ready mapping."""
        return asdict(self)
