"""Domain models for nutrition goals."""

from dataclasses import asdict, dataclass

GOALS_KEY = "default"


@dataclass(frozen=True)
class Goals:
    """Daily macro targets."""

    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float
    updated_at: str
    id: str = GOALS_KEY

    def as_dict(self) -> dict[str, object]:
        return asdict(self)


BASELINE_GOALS: dict[str, float] = {
    "calories": 2000.0,
    "protein": 150.0,
    "carbs": 250.0,
    "fat": 65.0,
    "fiber": 30.0,
}
