"""SQLite repository for the goals record."""

from dataclasses import dataclass

from macro_tracker.adapters.sqlite_store import SqliteStore
from macro_tracker.domain.goals import GOALS_KEY, Goals
from macro_tracker.services.goals import GoalsRepository


@dataclass
class SqliteGoalsRepository(GoalsRepository):
    """SQLite implementation for goals, keyed by a fixed id."""

    store: SqliteStore

    def get_goals(self) -> Goals | None:
        """Return the goals row if one was ever written."""
        with self.store.read() as conn:
            row = conn.execute(
                "SELECT id, calories, protein, carbs, fat, fiber, updated_at "
                "FROM goals WHERE id = ?",
                (GOALS_KEY,),
            ).fetchone()
        if row is None:
            return None
        return Goals(
            id=row["id"],
            calories=float(row["calories"]),
            protein=float(row["protein"]),
            carbs=float(row["carbs"]),
            fat=float(row["fat"]),
            fiber=float(row["fiber"]),
            updated_at=row["updated_at"],
        )

    def save_goals(self, goals: Goals) -> None:
        """Upsert the goals row."""
        with self.store.transaction() as conn:
            conn.execute(
                """
                INSERT INTO goals (id, calories, protein, carbs, fat, fiber, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                  calories = excluded.calories,
                  protein = excluded.protein,
                  carbs = excluded.carbs,
                  fat = excluded.fat,
                  fiber = excluded.fiber,
                  updated_at = excluded.updated_at
                """,
                (
                    GOALS_KEY,
                    goals.calories,
                    goals.protein,
                    goals.carbs,
                    goals.fat,
                    goals.fiber,
                    goals.updated_at,
                ),
            )
