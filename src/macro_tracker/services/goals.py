"""Goals service with partial updates."""

import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from macro_tracker.domain.entries import MACRO_FIELDS
from macro_tracker.domain.goals import BASELINE_GOALS, Goals
from macro_tracker.errors import ValidationError
from macro_tracker.services.ledger import utc_timestamp

logger = logging.getLogger(__name__)


class GoalsRepository(Protocol):
    """Persistence interface for the goals record."""

    def get_goals(self) -> Goals | None:
        """Return the stored goals, or None if never set."""

    def save_goals(self, goals: Goals) -> None:
        """Insert or replace the goals record."""


@dataclass
class GoalsService:
    """Service for reading and updating daily goals."""

    repository: GoalsRepository
    clock: Callable[[], str] = field(default=utc_timestamp)

    def get_goals(self) -> Goals | None:
        """Return current goals or None when unset."""
        return self.repository.get_goals()

    def update_goals(self, updates: Mapping[str, object]) -> Goals:
        """Merge the supplied fields onto the current goals and persist them."""
        cleaned = clean_goal_updates(updates)
        goals = merge_goals(cleaned, self.repository.get_goals(), self.clock())
        self.repository.save_goals(goals)
        logger.info("Updated goals: %s", ", ".join(sorted(cleaned)))
        return goals


def clean_goal_updates(raw: Mapping[str, object]) -> dict[str, float]:
    """Keep known numeric goal fields; reject negatives and empty updates."""
    updates: dict[str, float] = {}
    for key in MACRO_FIELDS:
        value = raw.get(key)
        if isinstance(value, bool) or not isinstance(value, int | float):
            continue
        if not math.isfinite(value):
            continue
        if value < 0:
            raise ValidationError(f"{key} must be non-negative")
        updates[key] = float(value)
    if not updates:
        raise ValidationError("At least one goal value must be provided")
    return updates


def merge_goals(
    updates: Mapping[str, float], existing: Goals | None, updated_at: str
) -> Goals:
    """Apply updates over existing goals, or over the baseline when none exist."""
    base = (
        {key: getattr(existing, key) for key in MACRO_FIELDS}
        if existing is not None
        else BASELINE_GOALS
    )
    merged = {key: updates.get(key, base[key]) for key in MACRO_FIELDS}
    return Goals(updated_at=updated_at, **merged)
